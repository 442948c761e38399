"""
Dictionary sources.

A source turns a normalized word into a DictionaryEntry or raises one of the
SourceError subclasses (NotFound, Timeout, TransportError). The lookup cache
walks an ordered chain of sources; see homonyms.core.lookup.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from urllib.parse import quote

import httpx

from homonyms.core.config import Settings
from homonyms.core.errors import NotFound, Timeout, TransportError


logger = logging.getLogger(__name__)


# Definitions for words the dictionaries are known to miss.
FALLBACK_DEFINITIONS: dict[str, str] = {
    "are": '(verb) The plural and second person singular of "be"',
    "been": '(verb) Past participle of "be"',
    "blew": '(verb) Past tense of "blow"',
    "flew": '(verb) Past tense of "fly"',
    "led": '(verb) Past tense and past participle of "lead"',
    "made": '(verb) Past tense and past participle of "make"',
    "matte": "(adjective) Having a dull or flat finish without shine",
    "pee": "(verb) To urinate",
    "seen": '(verb) Past participle of "see"',
    "sent": '(verb) Past tense and past participle of "send"',
    "won": '(verb) Past tense and past participle of "win"',
    "bao": "(noun) A type of Chinese steamed bun",
}


@dataclass
class DictionaryEntry:
    headword: str
    part_of_speech: str = "word"
    definitions: list[str] = field(default_factory=list)
    pronunciation: str | None = None


def format_definition(entry: DictionaryEntry) -> str:
    """(part-of-speech) First definition, capitalized."""
    text = entry.definitions[0].strip()
    return f"({entry.part_of_speech}) {text[:1].upper()}{text[1:]}"


def format_pronunciation(value: str) -> str:
    return f"/{value}/"


def parse_entries(word: str, payload, source: str = "dictionary") -> DictionaryEntry:
    """
    Read the first entry of a Merriam-Webster style JSON payload.

    A list of plain strings is the "did you mean" response and counts as
    NotFound, never as a definition.
    """
    if not payload or not isinstance(payload, list):
        raise NotFound(word, source, f'No data returned for "{word}"')

    first = payload[0]
    if isinstance(first, str):
        suggestions = ", ".join(str(s) for s in payload[:3])
        raise NotFound(word, source, f'Word "{word}" not found. Did you mean: {suggestions}?')
    if not isinstance(first, dict):
        raise NotFound(word, source, f'Unexpected entry for "{word}"')

    definitions = [d for d in first.get("shortdef") or [] if d]
    if not definitions:
        raise NotFound(word, source, f'No definition found for "{word}"')

    pronunciation = None
    prs = (first.get("hwi") or {}).get("prs") or []
    if prs and isinstance(prs[0], dict):
        pronunciation = prs[0].get("mw") or prs[0].get("ipa") or None

    return DictionaryEntry(
        headword=word,
        part_of_speech=first.get("fl") or "word",
        definitions=definitions,
        pronunciation=pronunciation,
    )


class DictionarySource(ABC):
    """One link in the lookup fallback chain."""

    name: str = "source"

    @abstractmethod
    async def lookup(self, word: str) -> DictionaryEntry:
        """Return the entry for `word` or raise a SourceError."""
        ...


class MerriamWebsterSource(DictionarySource):
    def __init__(self, name: str, base_url: str, api_key: str, client: httpx.AsyncClient):
        self.name = name
        self.base_url = base_url
        self.api_key = api_key
        self.client = client

    def url_for(self, word: str) -> str:
        return f"{self.base_url}{quote(word)}"

    async def lookup(self, word: str) -> DictionaryEntry:
        try:
            r = await self.client.get(
                self.url_for(word),
                params={"key": self.api_key},
                headers={"Accept": "application/json"},
            )
        except httpx.TimeoutException as e:
            raise Timeout(word, self.name, f'{self.name} timed out for "{word}"') from e
        except httpx.HTTPError as e:
            raise TransportError(word, self.name, f"{self.name}: {e}") from e

        if r.status_code == 404:
            raise NotFound(word, self.name, f'Word "{word}" not found in {self.name}')
        if r.status_code >= 400:
            raise TransportError(
                word, self.name, f"HTTP {r.status_code}: {r.reason_phrase}", status_code=r.status_code
            )

        try:
            payload = r.json()
        except ValueError as e:
            raise TransportError(word, self.name, f"{self.name} returned invalid JSON") from e

        return parse_entries(word, payload, self.name)


def build_sources(settings: Settings, client: httpx.AsyncClient) -> list[DictionarySource]:
    """Primary (school) then secondary (collegiate); sources without a key are skipped."""
    candidates = [
        ("school", settings.dictionary_base_url, settings.dictionary_api_key),
        ("collegiate", settings.collegiate_base_url, settings.collegiate_api_key),
    ]
    sources = []
    for name, base_url, api_key in candidates:
        if not api_key:
            logger.warning("No API key for the %s dictionary, source disabled", name)
            continue
        sources.append(MerriamWebsterSource(name, base_url, api_key, client))
    return sources
