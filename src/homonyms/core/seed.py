"""
Bulk seeding: fill a collection with the curated homonym groups.

Calls are sequential with a fixed delay between them. Rate-limited lookups
(HTTP 429) are retried with a linear backoff (attempt x base), capped at
max_retries; any other failure skips that one word.

The same machinery keeps a seeded collection healthy afterwards:
refresh_definitions re-looks up every saved word, repair_collection adds the
curated words a group lost during seeding.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, TypeVar

from tenacity import AsyncRetrying, RetryCallState, retry_if_exception, stop_after_attempt, wait_incrementing

from homonyms.core.errors import HomonymsError, LookupFailure, TransportError
from homonyms.core.homophones import CURATED_GROUPS
from homonyms.core.lookup import LookupCache
from homonyms.core.models import Collection, HomonymGroup, WordInput
from homonyms.core.store import MIN_GROUP_WORDS, CollectionStore


logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class SeedReport:
    collection_id: str
    added: int = 0
    skipped: int = 0
    failures: list[str] = field(default_factory=list)


@dataclass
class RefreshReport:
    collection_id: str
    checked: int = 0
    updated_words: int = 0
    updated_groups: int = 0
    failures: list[str] = field(default_factory=list)


@dataclass
class RepairReport:
    collection_id: str
    fixed_groups: int = 0
    added_words: int = 0
    created_groups: int = 0
    failures: list[str] = field(default_factory=list)


def _is_rate_limited(e: BaseException) -> bool:
    return getattr(e, "rate_limited", False)


def _as_inputs(group: HomonymGroup) -> list[WordInput]:
    return [WordInput(w.word, w.definition) for w in group.words]


class Seeder:
    def __init__(
        self,
        lookup: LookupCache,
        store: CollectionStore,
        delay: float = 0.2,
        retry_base: float = 2.0,
        max_retries: int = 3,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.lookup = lookup
        self.store = store
        self.delay = delay
        self.retry_base = retry_base
        self.max_retries = max_retries
        self.sleep = sleep

    def _log_retry(self, retry_state: RetryCallState) -> None:
        logger.warning(
            "Rate limited. Waiting %.1fs before retry %d/%d",
            retry_state.next_action.sleep,
            retry_state.attempt_number,
            self.max_retries,
        )

    async def fetch_with_retry(self, fn: Callable[[], Awaitable[T]]) -> T:
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_retries),
            wait=wait_incrementing(start=self.retry_base, increment=self.retry_base),
            retry=retry_if_exception(_is_rate_limited),
            before_sleep=self._log_retry,
            sleep=self.sleep,
            reraise=True,
        )
        return await retrying(fn)

    async def _definition(self, word: str) -> str:
        return await self.fetch_with_retry(lambda: self.lookup.get_definition(word))

    async def seed_group(self, collection_id: str, words: tuple[str, ...] | list[str]) -> HomonymGroup | None:
        """Look up and save one group. None when fewer than two words resolved."""
        pronunciation = await self.lookup.get_pronunciation(words[0])
        await self.sleep(self.delay)

        inputs = []
        for word in words:
            try:
                definition = await self._definition(word)
            except (LookupFailure, TransportError) as e:
                logger.warning('Failed for "%s": %s', word, e)
                continue
            inputs.append(WordInput(word, definition))
            await self.sleep(self.delay)

        if len(inputs) < MIN_GROUP_WORDS:
            return None
        return self.store.create_homonym_group(collection_id, pronunciation, inputs)

    def find_or_create(self, name: str) -> Collection:
        for collection in self.store.list_collections():
            if collection.name == name:
                return collection
        return self.store.create_collection(name)

    async def seed_collection(
        self,
        name: str,
        groups: list[tuple[str, ...]] | None = None,
        reset: bool = False,
    ) -> SeedReport:
        groups = CURATED_GROUPS if groups is None else groups
        collection = self.find_or_create(name)
        report = SeedReport(collection_id=collection.id)

        if reset:
            for group in self.store.list_homonym_groups(collection.id):
                self.store.delete_homonym_group(group.id)
            logger.info("Cleared existing homonyms in %s", collection.name)

        total = len(groups)
        for i, words in enumerate(groups, start=1):
            label = ", ".join(words)
            try:
                group = await self.seed_group(collection.id, words)
            except HomonymsError as e:
                report.skipped += 1
                report.failures.append(f"[{label}]: {e}")
                logger.error("%d/%d: Failed [%s] - %s", i, total, label, e)
                continue

            if group is None:
                report.skipped += 1
                report.failures.append(f"[{label}]: not enough definitions")
                logger.warning("%d/%d: Skipping [%s] - not enough definitions", i, total, label)
                continue

            report.added += 1
            saved = ", ".join(w.word for w in group.words)
            logger.info("%d/%d: [%s] - %s", i, total, saved, group.pronunciation)

        return report

    # === Maintenance ===

    async def refresh_definitions(self, collection_id: str) -> RefreshReport:
        """
        Look every saved word up again and store the definitions that changed.

        A word whose lookup fails keeps its saved definition. Each changed group
        is rewritten with a single update_homonym_group call.
        """
        report = RefreshReport(collection_id=collection_id)

        for group in self.store.list_homonym_groups(collection_id):
            inputs = []
            changed = 0
            for w in group.words:
                report.checked += 1
                definition = w.definition
                try:
                    definition = await self._definition(w.word)
                except (LookupFailure, TransportError) as e:
                    report.failures.append(f"{w.word}: {e}")
                    logger.warning('Could not refresh "%s": %s', w.word, e)
                await self.sleep(self.delay)

                if definition != w.definition:
                    logger.info('Updated definition for "%s"', w.word)
                    changed += 1
                inputs.append(WordInput(w.word, definition))

            if changed:
                self.store.update_homonym_group(group.id, group.pronunciation, inputs)
                report.updated_words += changed
                report.updated_groups += 1

        return report

    async def repair_collection(
        self,
        name: str,
        groups: list[tuple[str, ...]] | None = None,
    ) -> RepairReport:
        """
        Add curated words missing from a seeded collection.

        A stored group belongs to the curated group that contains all of its
        words. Missing words are looked up and appended after the existing
        ones; curated groups with no stored counterpart are seeded anew.
        """
        groups = CURATED_GROUPS if groups is None else groups
        collection = self.find_or_create(name)
        report = RepairReport(collection_id=collection.id)
        unmatched = self.store.list_homonym_groups(collection.id)

        for words in groups:
            label = ", ".join(words)
            expected = {w.lower() for w in words}
            group = next(
                (g for g in unmatched if g.words and {w.word.lower() for w in g.words} <= expected),
                None,
            )

            if group is None:
                try:
                    created = await self.seed_group(collection.id, words)
                except HomonymsError as e:
                    report.failures.append(f"[{label}]: {e}")
                    logger.error("Failed to add [%s] - %s", label, e)
                    continue
                if created is None:
                    report.failures.append(f"[{label}]: not enough definitions")
                    continue
                report.created_groups += 1
                logger.info("Added missing group [%s]", label)
                continue

            unmatched.remove(group)
            present = {w.word.lower() for w in group.words}
            additions = []
            for word in words:
                if word.lower() in present:
                    continue
                try:
                    definition = await self._definition(word)
                except (LookupFailure, TransportError) as e:
                    report.failures.append(f"{word}: {e}")
                    logger.warning('Failed for "%s": %s', word, e)
                    continue
                additions.append(WordInput(word, definition))
                logger.info('Added "%s" to [%s]', word, label)
                await self.sleep(self.delay)

            if additions:
                self.store.update_homonym_group(
                    group.id, group.pronunciation, _as_inputs(group) + additions
                )
                report.fixed_groups += 1
                report.added_words += len(additions)

        return report
