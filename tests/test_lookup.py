"""
Tests for the lexical lookup cache.
"""

import asyncio

import pytest

from conftest import FakeSource, entry
from homonyms.core.errors import LookupFailure, NotFound, Timeout, TransportError, ValidationError
from homonyms.core.lookup import LookupCache


def bear_source(**kwargs):
    return FakeSource(
        "school",
        entries={"bear": entry("bear", "a large heavy mammal", pronunciation="ˈber")},
        **kwargs,
    )


class TestDefinition:
    def test_formats_part_of_speech_and_capitalizes(self):
        lookup = LookupCache([bear_source()])
        assert asyncio.run(lookup.get_definition("bear")) == "(noun) A large heavy mammal"

    def test_empty_word_is_rejected(self):
        lookup = LookupCache([bear_source()])
        with pytest.raises(ValidationError):
            asyncio.run(lookup.get_definition("   "))

    def test_cached_across_case_and_whitespace(self):
        source = bear_source()
        lookup = LookupCache([source])

        async def scenario():
            return [
                await lookup.get_definition("bear"),
                await lookup.get_definition(" BEAR "),
                await lookup.get_definition("Bear"),
            ]

        results = asyncio.run(scenario())
        assert len(set(results)) == 1
        assert source.calls == ["bear"]

    def test_concurrent_requests_share_one_call(self):
        source = bear_source(delay=0.01)
        lookup = LookupCache([source])

        async def scenario():
            return await asyncio.gather(*(lookup.get_definition(w) for w in ["bear", "Bear", " bear"] * 3))

        results = asyncio.run(scenario())
        assert len(results) == 9
        assert len(set(results)) == 1
        assert source.calls == ["bear"]

    def test_different_words_are_independent(self):
        source = FakeSource(entries={
            "bare": entry("bare", "without covering", pos="adjective"),
            "bear": entry("bear", "a large heavy mammal"),
        })
        lookup = LookupCache([source], fallback_definitions={})

        async def scenario():
            return await asyncio.gather(lookup.get_definition("bare"), lookup.get_definition("bear"))

        assert asyncio.run(scenario()) == ["(adjective) Without covering", "(noun) A large heavy mammal"]
        assert sorted(source.calls) == ["bare", "bear"]

    def test_failures_are_not_cached(self):
        source = FakeSource()
        lookup = LookupCache([source], fallback_definitions={})

        with pytest.raises(LookupFailure):
            asyncio.run(lookup.get_definition("bear"))

        source.entries["bear"] = entry("bear", "a large heavy mammal")
        assert asyncio.run(lookup.get_definition("bear")) == "(noun) A large heavy mammal"
        assert source.calls == ["bear", "bear"]

    def test_lookup_failure_names_word(self):
        lookup = LookupCache([FakeSource()], fallback_definitions={})
        with pytest.raises(LookupFailure) as exc_info:
            asyncio.run(lookup.get_definition("xyzzy"))
        assert exc_info.value.word == "xyzzy"
        assert 'Word "xyzzy" not found' in str(exc_info.value)
        assert isinstance(exc_info.value.errors[0], NotFound)

    def test_no_sources_configured(self):
        lookup = LookupCache([], fallback_definitions={})
        with pytest.raises(LookupFailure) as exc_info:
            asyncio.run(lookup.get_definition("bear"))
        assert "no dictionary sources" in exc_info.value.reason


class TestFallbackChain:
    def test_secondary_used_when_primary_fails(self):
        primary = FakeSource("school", errors={"bear": TransportError("bear", "school", "HTTP 500")})
        secondary = FakeSource("collegiate", entries={"bear": entry("bear", "to carry", pos="verb")})
        lookup = LookupCache([primary, secondary], fallback_definitions={})

        assert asyncio.run(lookup.get_definition("bear")) == "(verb) To carry"
        assert primary.calls == ["bear"]
        assert secondary.calls == ["bear"]

    def test_secondary_not_called_when_primary_succeeds(self):
        primary = bear_source()
        secondary = FakeSource("collegiate")
        lookup = LookupCache([primary, secondary])

        asyncio.run(lookup.get_definition("bear"))
        assert secondary.calls == []

    def test_slow_source_times_out_and_chain_continues(self):
        primary = bear_source(delay=1.0)
        secondary = FakeSource("collegiate", entries={"bear": entry("bear", "to carry", pos="verb")})
        lookup = LookupCache([primary, secondary], fallback_definitions={}, timeout=0.05)

        assert asyncio.run(lookup.get_definition("bear")) == "(verb) To carry"

    def test_timeout_recorded_in_failure(self):
        lookup = LookupCache([bear_source(delay=1.0)], fallback_definitions={}, timeout=0.05)
        with pytest.raises(LookupFailure) as exc_info:
            asyncio.run(lookup.get_definition("bear"))
        assert isinstance(exc_info.value.errors[0], Timeout)

    def test_fallback_table_after_all_sources_fail(self):
        source = FakeSource()
        lookup = LookupCache([source])

        assert asyncio.run(lookup.get_definition("Led")) == '(verb) Past tense and past participle of "lead"'
        assert source.calls == ["led"]

        # served from the cache now
        asyncio.run(lookup.get_definition("led"))
        assert source.calls == ["led"]

    def test_rate_limit_visible_on_failure(self):
        source = FakeSource(errors={"bear": TransportError("bear", "school", "HTTP 429", status_code=429)})
        lookup = LookupCache([source], fallback_definitions={})
        with pytest.raises(LookupFailure) as exc_info:
            asyncio.run(lookup.get_definition("bear"))
        assert exc_info.value.rate_limited


class TestPronunciation:
    def test_wrapped_in_slashes(self):
        lookup = LookupCache([bear_source()])
        assert asyncio.run(lookup.get_pronunciation("Bear")) == "/ˈber/"

    def test_falls_back_to_word_and_never_raises(self):
        lookup = LookupCache([FakeSource()])
        assert asyncio.run(lookup.get_pronunciation(" Xyzzy ")) == "/xyzzy/"

    def test_unexpected_error_is_absorbed(self):
        source = FakeSource(errors={"bear": RuntimeError("boom")})
        lookup = LookupCache([source])
        assert asyncio.run(lookup.get_pronunciation("bear")) == "/bear/"

    def test_entry_without_pronunciation_tries_next_source(self):
        primary = FakeSource("school", entries={"bear": entry("bear", "a large heavy mammal")})
        secondary = FakeSource("collegiate", entries={"bear": entry("bear", "to carry", pronunciation="ber")})
        lookup = LookupCache([primary, secondary])
        assert asyncio.run(lookup.get_pronunciation("bear")) == "/ber/"

    def test_fallback_is_not_cached(self):
        source = FakeSource()
        lookup = LookupCache([source])

        asyncio.run(lookup.get_pronunciation("bear"))
        source.entries["bear"] = entry("bear", "a large heavy mammal", pronunciation="ˈber")
        assert asyncio.run(lookup.get_pronunciation("bear")) == "/ˈber/"
        assert source.calls == ["bear", "bear"]

    def test_separate_from_definition_cache(self):
        source = bear_source()
        lookup = LookupCache([source])

        async def scenario():
            await lookup.get_definition("bear")
            await lookup.get_pronunciation("bear")

        asyncio.run(scenario())
        assert source.calls == ["bear", "bear"]
        assert lookup.stats()["definitions"] == 1
        assert lookup.stats()["pronunciations"] == 1


class TestValidateAndClear:
    def test_validate_word(self):
        lookup = LookupCache([bear_source()], fallback_definitions={})

        async def scenario():
            return [
                await lookup.validate_word("bear"),
                await lookup.validate_word("xyzzy"),
                await lookup.validate_word(""),
            ]

        assert asyncio.run(scenario()) == [True, False, False]

    def test_clear_cache_forces_refetch(self):
        source = bear_source()
        lookup = LookupCache([source])

        asyncio.run(lookup.get_definition("bear"))
        lookup.clear_cache()
        assert lookup.stats() == {"definitions": 0, "pronunciations": 0, "in_flight": 0}

        asyncio.run(lookup.get_definition("bear"))
        assert source.calls == ["bear", "bear"]

    def test_clear_during_flight_does_not_repopulate(self):
        lookup = LookupCache([bear_source(delay=0.01)])

        async def scenario():
            task = asyncio.ensure_future(lookup.get_definition("bear"))
            await asyncio.sleep(0)
            assert lookup.stats()["in_flight"] == 1
            lookup.clear_cache()
            return await task

        assert asyncio.run(scenario()) == "(noun) A large heavy mammal"
        assert lookup.stats()["definitions"] == 0
