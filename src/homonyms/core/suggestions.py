"""
Suggestion assembler: the candidate list shown after a search.

Original word first, then the homophones whose definitions resolved, in finder
order. A homophone whose lookup fails is left out rather than failing the whole
request.
"""

import asyncio
import logging
from dataclasses import dataclass, asdict
from typing import Callable

from homonyms.core.errors import LookupFailure
from homonyms.core.homophones import get_homophones
from homonyms.core.lookup import LookupCache, normalize


logger = logging.getLogger(__name__)

NO_SUGGESTIONS_NOTICE = "No homonym suggestions found"


@dataclass
class Suggestion:
    word: str
    definition: str
    pronunciation: str = ""
    is_original: bool = False
    is_error: bool = False

    def to_dict(self) -> dict:
        return asdict(self)


def not_found_message(word: str) -> str:
    return f'"{word}" was not found in the dictionary. Please check the spelling.'


class SuggestionAssembler:
    def __init__(self, lookup: LookupCache, finder: Callable[[str], list[str]] = get_homophones):
        self.lookup = lookup
        self.finder = finder

    async def find_suggestions(self, word: str) -> list[Suggestion]:
        key = normalize(word)

        if not await self.lookup.validate_word(key):
            return [Suggestion(
                word=key,
                definition=not_found_message(key),
                pronunciation="Invalid word",
                is_original=True,
                is_error=True,
            )]

        definition, pronunciation = await asyncio.gather(
            self.lookup.get_definition(key),
            self.lookup.get_pronunciation(key),
        )
        suggestions = [Suggestion(key, definition, pronunciation, is_original=True)]

        homophones = [h for h in self.finder(key) if normalize(h) != key]
        results = await asyncio.gather(
            *(self.lookup.get_definition(h) for h in homophones),
            return_exceptions=True,
        )
        for homophone, result in zip(homophones, results):
            if isinstance(result, LookupFailure):
                logger.info("Dropping homophone %r of %r: %s", homophone, key, result.reason)
                continue
            if isinstance(result, BaseException):
                raise result
            suggestions.append(Suggestion(homophone, result, pronunciation))

        return suggestions


def sort_suggestions(suggestions: list[Suggestion]) -> list[Suggestion]:
    return sorted(suggestions, key=lambda s: s.word)


def suggestion_notice(suggestions: list[Suggestion]) -> str | None:
    """User-facing notice when a valid word has no surviving homophones."""
    if len(suggestions) == 1 and not suggestions[0].is_error:
        return NO_SUGGESTIONS_NOTICE
    return None
