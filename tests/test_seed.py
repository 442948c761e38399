"""
Tests for bulk seeding.
"""

import asyncio

import pytest

from conftest import FakeSource, entry
from homonyms.core.errors import LookupFailure, TransportError
from homonyms.core.lookup import LookupCache
from homonyms.core.models import WordInput
from homonyms.core.seed import Seeder


class RecordingSleep:
    def __init__(self):
        self.waits = []

    async def __call__(self, seconds):
        self.waits.append(seconds)


def rate_limited(word):
    return TransportError(word, "school", "HTTP 429", status_code=429)


ENTRIES = {
    "bear": entry("bear", "a large heavy mammal", pronunciation="ˈber"),
    "bare": entry("bare", "without covering", pos="adjective"),
    "pail": entry("pail", "a bucket", pronunciation="ˈpāl"),
    "pale": entry("pale", "light in color", pos="adjective"),
}

REPAIR_ENTRIES = {**ENTRIES, "bair": entry("bair", "a made-up spelling")}


class FlakySource(FakeSource):
    """Answers 429 for the first `failures` calls per word."""

    def __init__(self, failures, **kwargs):
        super().__init__(**kwargs)
        self.failures = failures

    async def lookup(self, word):
        if self.calls.count(word) < self.failures:
            self.calls.append(word)
            raise rate_limited(word)
        return await super().lookup(word)


def make_seeder(store, source, **kwargs):
    sleep = RecordingSleep()
    lookup = LookupCache([source], fallback_definitions={})
    return Seeder(lookup, store, sleep=sleep, **kwargs), sleep


class TestFetchWithRetry:
    def test_retries_rate_limited_with_linear_backoff(self, sql_store):
        seeder, sleep = make_seeder(sql_store, FlakySource(2, entries=ENTRIES))
        result = asyncio.run(seeder.fetch_with_retry(lambda: seeder.lookup.get_definition("bear")))
        assert result == "(noun) A large heavy mammal"
        assert sleep.waits == [2.0, 4.0]

    def test_gives_up_after_max_retries(self, sql_store):
        seeder, sleep = make_seeder(sql_store, FlakySource(5, entries=ENTRIES))
        with pytest.raises(LookupFailure) as exc_info:
            asyncio.run(seeder.fetch_with_retry(lambda: seeder.lookup.get_definition("bear")))
        assert exc_info.value.rate_limited
        assert sleep.waits == [2.0, 4.0]

    def test_other_failures_are_not_retried(self, sql_store):
        source = FakeSource(entries=ENTRIES)
        seeder, sleep = make_seeder(sql_store, source)
        with pytest.raises(LookupFailure):
            asyncio.run(seeder.fetch_with_retry(lambda: seeder.lookup.get_definition("xyzzy")))
        assert sleep.waits == []
        assert source.calls == ["xyzzy"]

    def test_bare_transport_error(self, sql_store):
        seeder, sleep = make_seeder(sql_store, FakeSource())
        attempts = []

        async def call():
            attempts.append(1)
            if len(attempts) < 2:
                raise rate_limited("bear")
            return "ok"

        assert asyncio.run(seeder.fetch_with_retry(call)) == "ok"
        assert sleep.waits == [2.0]

    def test_retry_is_logged(self, sql_store, caplog):
        seeder, _ = make_seeder(sql_store, FlakySource(1, entries=ENTRIES))
        with caplog.at_level("WARNING", logger="homonyms.core.seed"):
            asyncio.run(seeder.fetch_with_retry(lambda: seeder.lookup.get_definition("bear")))
        assert "Waiting 2.0s before retry 1/3" in caplog.text


class TestSeedCollection:
    def test_seeds_groups_and_skips_short_ones(self, sql_store):
        seeder, sleep = make_seeder(sql_store, FakeSource(entries=ENTRIES), delay=0.2)
        groups = [("bear", "bare"), ("pail", "pale"), ("xyzzy", "bear")]

        report = asyncio.run(seeder.seed_collection("Starter", groups=groups))

        assert report.added == 2
        assert report.skipped == 1
        assert "xyzzy" in report.failures[0]
        assert 0.2 in sleep.waits

        saved = sql_store.list_homonym_groups(report.collection_id)
        assert [[w.word for w in g.words] for g in saved] == [["bear", "bare"], ["pail", "pale"]]
        assert saved[0].pronunciation == "/ˈber/"

    def test_reuses_collection_by_name(self, sql_store):
        existing = sql_store.create_collection("Starter")
        seeder, _ = make_seeder(sql_store, FakeSource(entries=ENTRIES))

        report = asyncio.run(seeder.seed_collection("Starter", groups=[("bear", "bare")]))

        assert report.collection_id == existing.id
        assert len(sql_store.list_collections()) == 1

    def test_reset_clears_existing_groups(self, sql_store):
        seeder, _ = make_seeder(sql_store, FakeSource(entries=ENTRIES))
        asyncio.run(seeder.seed_collection("Starter", groups=[("bear", "bare")]))
        report = asyncio.run(seeder.seed_collection("Starter", groups=[("pail", "pale")], reset=True))

        saved = sql_store.list_homonym_groups(report.collection_id)
        assert [g.words[0].word for g in saved] == ["pail"]

    def test_rate_limited_word_recovers(self, sql_store):
        seeder, sleep = make_seeder(sql_store, FlakySource(1, entries=ENTRIES))
        report = asyncio.run(seeder.seed_collection("Starter", groups=[("bear", "bare")]))
        assert report.added == 1
        assert 2.0 in sleep.waits


class TestRefreshDefinitions:
    def test_updates_changed_definitions_only(self, sql_store):
        c = sql_store.create_collection("Starter")
        stale = sql_store.create_homonym_group(c.id, "/ˈber/", [
            WordInput("bear", "(noun) Old text"),
            WordInput("bare", "(adjective) Without covering"),
        ])
        current = sql_store.create_homonym_group(c.id, "/ˈpāl/", [
            WordInput("pail", "(noun) A bucket"),
            WordInput("pale", "(adjective) Light in color"),
        ])
        seeder, _ = make_seeder(sql_store, FakeSource(entries=ENTRIES))

        report = asyncio.run(seeder.refresh_definitions(c.id))

        assert report.checked == 4
        assert report.updated_words == 1
        assert report.updated_groups == 1
        refreshed = sql_store.get_homonym_group(stale.id)
        assert [w.definition for w in refreshed.words] == [
            "(noun) A large heavy mammal",
            "(adjective) Without covering",
        ]
        assert sql_store.get_homonym_group(current.id).to_dict() == current.to_dict()

    def test_failed_lookup_keeps_saved_definition(self, sql_store):
        c = sql_store.create_collection("Starter")
        g = sql_store.create_homonym_group(c.id, "/ˈber/", [
            WordInput("bear", "(noun) A large heavy mammal"),
            WordInput("xyzzy", "(noun) Saved by hand"),
        ])
        seeder, _ = make_seeder(sql_store, FakeSource(entries=ENTRIES))

        report = asyncio.run(seeder.refresh_definitions(c.id))

        assert report.updated_groups == 0
        assert "xyzzy" in report.failures[0]
        assert sql_store.get_homonym_group(g.id).to_dict() == g.to_dict()


class TestRepairCollection:
    def test_adds_missing_words_and_groups(self, sql_store):
        c = sql_store.create_collection("Starter")
        g = sql_store.create_homonym_group(c.id, "/ˈber/", [
            WordInput("bear", "(noun) A large heavy mammal"),
            WordInput("bare", "(adjective) Without covering"),
        ])
        seeder, _ = make_seeder(sql_store, FakeSource(entries=REPAIR_ENTRIES))
        groups = [("bear", "bare", "bair"), ("pail", "pale")]

        report = asyncio.run(seeder.repair_collection("Starter", groups=groups))

        assert report.collection_id == c.id
        assert report.fixed_groups == 1
        assert report.added_words == 1
        assert report.created_groups == 1
        repaired = sql_store.get_homonym_group(g.id)
        assert [w.word for w in repaired.words] == ["bear", "bare", "bair"]
        assert [w.word_order for w in repaired.words] == [0, 1, 2]
        assert repaired.words[2].definition == "(noun) A made-up spelling"
        saved = sql_store.list_homonym_groups(c.id)
        assert [[w.word for w in s.words] for s in saved][1] == ["pail", "pale"]

    def test_complete_collection_is_left_alone(self, sql_store):
        seeder, _ = make_seeder(sql_store, FakeSource(entries=REPAIR_ENTRIES))
        asyncio.run(seeder.seed_collection("Starter", groups=[("bear", "bare")]))

        report = asyncio.run(seeder.repair_collection("Starter", groups=[("bear", "bare")]))

        assert (report.fixed_groups, report.added_words, report.created_groups) == (0, 0, 0)
        assert len(sql_store.list_homonym_groups(report.collection_id)) == 1

    def test_unresolvable_word_is_reported(self, sql_store):
        c = sql_store.create_collection("Starter")
        g = sql_store.create_homonym_group(c.id, "/ˈber/", [
            WordInput("bear", "(noun) A large heavy mammal"),
            WordInput("bare", "(adjective) Without covering"),
        ])
        seeder, _ = make_seeder(sql_store, FakeSource(entries=REPAIR_ENTRIES))

        report = asyncio.run(seeder.repair_collection("Starter", groups=[("bear", "bare", "xyzzy")]))

        assert report.fixed_groups == 0
        assert "xyzzy" in report.failures[0]
        assert sql_store.get_homonym_group(g.id).to_dict() == g.to_dict()
