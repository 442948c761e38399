"""
Lexical lookup cache.

Resolves a word to a definition and, separately, to a pronunciation. Results are
memoized per normalized word, concurrent requests for the same word share one
underlying call, and definitions fall back across the source chain, then the
static fallback table.

Only successful results are cached. Definition failures raise LookupFailure;
pronunciation failures degrade to "/word/".
"""

import asyncio
import logging
from functools import partial
from typing import Awaitable, Callable

from homonyms.core.dictionary import (
    FALLBACK_DEFINITIONS,
    DictionaryEntry,
    DictionarySource,
    format_definition,
    format_pronunciation,
)
from homonyms.core.errors import LookupFailure, NotFound, SourceError, Timeout, ValidationError


logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 8.0


def normalize(word: str) -> str:
    return (word or "").strip().lower()


class LookupCache:
    def __init__(
        self,
        sources: list[DictionarySource],
        fallback_definitions: dict[str, str] | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.sources = list(sources)
        self.fallback_definitions = (
            FALLBACK_DEFINITIONS if fallback_definitions is None else fallback_definitions
        )
        self.timeout = timeout
        self._definitions: dict[str, str] = {}
        self._pronunciations: dict[str, str] = {}
        self._pending_definitions: dict[str, asyncio.Future] = {}
        self._pending_pronunciations: dict[str, asyncio.Future] = {}

    # === Public API ===

    async def get_definition(self, word: str) -> str:
        key = normalize(word)
        if not key:
            raise ValidationError("A word is required")
        return await self._memoized(
            self._definitions, self._pending_definitions, key, self._fetch_definition
        )

    async def get_pronunciation(self, word: str) -> str:
        key = normalize(word)
        if not key:
            return format_pronunciation(key)
        try:
            return await self._memoized(
                self._pronunciations, self._pending_pronunciations, key, self._fetch_pronunciation
            )
        except LookupFailure as e:
            logger.info("No pronunciation for %r (%s), using fallback", key, e.reason)
        except Exception:
            logger.warning("Pronunciation lookup failed for %r", key, exc_info=True)
        return format_pronunciation(key)

    async def validate_word(self, word: str) -> bool:
        try:
            await self.get_definition(word)
        except (LookupFailure, ValidationError):
            return False
        return True

    def clear_cache(self) -> None:
        self._definitions.clear()
        self._pronunciations.clear()
        self._pending_definitions.clear()
        self._pending_pronunciations.clear()
        logger.debug("Dictionary cache cleared")

    def stats(self) -> dict:
        stats = {
            "definitions": len(self._definitions),
            "pronunciations": len(self._pronunciations),
            "in_flight": len(self._pending_definitions) + len(self._pending_pronunciations),
        }
        logger.debug("Lookup cache: %s", stats)
        return stats

    # === Memoization / request coalescing ===

    async def _memoized(
        self,
        cache: dict[str, str],
        pending: dict[str, asyncio.Future],
        key: str,
        fetch: Callable[[str], Awaitable[str]],
    ) -> str:
        if key in cache:
            return cache[key]

        task = pending.get(key)
        if task is None:
            task = asyncio.ensure_future(fetch(key))
            pending[key] = task
            task.add_done_callback(partial(self._settle, cache, pending, key))

        # One caller being cancelled must not cancel the shared lookup.
        return await asyncio.shield(task)

    @staticmethod
    def _settle(cache: dict, pending: dict, key: str, task: asyncio.Future) -> None:
        if pending.get(key) is not task:
            # cache was cleared while this lookup was in flight
            return
        del pending[key]
        if not task.cancelled() and task.exception() is None:
            cache[key] = task.result()

    # === Source chain ===

    async def _call_source(self, source: DictionarySource, word: str) -> DictionaryEntry:
        try:
            return await asyncio.wait_for(source.lookup(word), self.timeout)
        except asyncio.TimeoutError as e:
            raise Timeout(word, source.name, f"{source.name} timed out after {self.timeout}s") from e

    async def _fetch_definition(self, word: str) -> str:
        errors: list[SourceError] = []
        for source in self.sources:
            try:
                entry = await self._call_source(source, word)
                return format_definition(entry)
            except SourceError as e:
                logger.info("%s failed for %r: %s", source.name, word, e)
                errors.append(e)

        fallback = self.fallback_definitions.get(word)
        if fallback:
            logger.info("Using fallback definition for %r", word)
            return fallback

        reason = str(errors[-1]) if errors else "no dictionary sources configured"
        raise LookupFailure(word, reason, errors)

    async def _fetch_pronunciation(self, word: str) -> str:
        errors: list[SourceError] = []
        for source in self.sources:
            try:
                entry = await self._call_source(source, word)
            except SourceError as e:
                errors.append(e)
                continue
            if entry.pronunciation:
                return format_pronunciation(entry.pronunciation)
            errors.append(NotFound(word, source.name, f"{source.name} has no pronunciation for '{word}'"))

        reason = str(errors[-1]) if errors else "no dictionary sources configured"
        raise LookupFailure(word, reason, errors)
