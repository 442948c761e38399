"""
Where CLI commands read and write.

The `client` module talks to a running API server. LocalBackend exposes the
same functions against a store opened in-process (redis by default) and does
dictionary lookups itself. get_backend picks the server when it answers its
health check and the local store otherwise.
"""

import asyncio
import logging

import httpx

from homonyms.cli import client
from homonyms.core.config import Settings
from homonyms.core.dictionary import build_sources
from homonyms.core.errors import EntityNotFoundError
from homonyms.core.lookup import LookupCache
from homonyms.core.store import CollectionStore, open_store
from homonyms.core.suggestions import SuggestionAssembler, sort_suggestions, suggestion_notice


logger = logging.getLogger(__name__)


class LocalBackend:
    def __init__(self, store: CollectionStore, settings: Settings):
        self.store = store
        self.settings = settings

    async def _with_lookup(self, fn):
        async with httpx.AsyncClient(timeout=self.settings.lookup_timeout) as http:
            lookup = LookupCache(build_sources(self.settings, http), timeout=self.settings.lookup_timeout)
            return await fn(lookup)

    # === Collections ===

    def list_collections(self) -> list[dict]:
        return [c.to_dict() for c in self.store.list_collections()]

    def create_collection(self, name: str) -> dict:
        return self.store.create_collection(name).to_dict()

    def get_collection(self, collection_id: str) -> dict:
        collection = self.store.get_collection(collection_id)
        if not collection:
            raise EntityNotFoundError(f"Collection not found: {collection_id}")
        return {**collection.to_dict(), "stats": self.store.collection_stats(collection_id)}

    def rename_collection(self, collection_id: str, name: str) -> dict:
        collection = self.store.rename_collection(collection_id, name)
        if not collection:
            raise EntityNotFoundError(f"Collection not found: {collection_id}")
        return collection.to_dict()

    def delete_collection(self, collection_id: str) -> dict:
        if not self.store.delete_collection(collection_id):
            raise EntityNotFoundError(f"Collection not found: {collection_id}")
        return {"deleted": collection_id}

    # === Homonym groups ===

    def list_homonyms(self, collection_id: str) -> list[dict]:
        if not self.store.get_collection(collection_id):
            raise EntityNotFoundError(f"Collection not found: {collection_id}")
        return [g.to_dict() for g in self.store.list_homonym_groups(collection_id)]

    def search_homonyms(self, collection_id: str, term: str) -> list[dict]:
        if not self.store.get_collection(collection_id):
            raise EntityNotFoundError(f"Collection not found: {collection_id}")
        return [g.to_dict() for g in self.store.search_homonym_groups(collection_id, term)]

    def create_homonym_group(self, collection_id: str, pronunciation: str, words: list[dict]) -> dict:
        return self.store.create_homonym_group(collection_id, pronunciation, words).to_dict()

    def get_homonym_group(self, group_id: str) -> dict:
        group = self.store.get_homonym_group(group_id)
        if not group:
            raise EntityNotFoundError(f"Homonym group not found: {group_id}")
        return group.to_dict()

    def update_homonym_group(self, group_id: str, pronunciation: str, words: list[dict]) -> dict:
        group = self.store.update_homonym_group(group_id, pronunciation, words)
        if not group:
            raise EntityNotFoundError(f"Homonym group not found: {group_id}")
        return group.to_dict()

    def delete_homonym_group(self, group_id: str) -> dict:
        if not self.store.delete_homonym_group(group_id):
            raise EntityNotFoundError(f"Homonym group not found: {group_id}")
        return {"deleted": group_id}

    # === Words ===

    def get_definition(self, word: str) -> str:
        return asyncio.run(self._with_lookup(lambda lookup: lookup.get_definition(word)))

    def get_pronunciation(self, word: str) -> str:
        return asyncio.run(self._with_lookup(lambda lookup: lookup.get_pronunciation(word)))

    def get_suggestions(self, word: str, sort: bool = False) -> dict:
        async def run(lookup: LookupCache):
            return await SuggestionAssembler(lookup).find_suggestions(word)

        suggestions = asyncio.run(self._with_lookup(run))
        if sort:
            suggestions = sort_suggestions(suggestions)
        return {
            "word": word.strip().lower(),
            "suggestions": [s.to_dict() for s in suggestions],
            "notice": suggestion_notice(suggestions),
        }


def open_local(settings: Settings | None = None) -> LocalBackend:
    settings = settings or Settings.from_env()
    return LocalBackend(open_store(settings, settings.local_backend), settings)


def get_backend(args):
    """The API client when the server is up (and --local was not given), else a local store."""
    if getattr(args, "local", False):
        return open_local()
    if client.health():
        return client
    print(f"! API not reachable at {client.BASE_URL}, using local store")
    logger.info("Falling back to local store")
    return open_local()
