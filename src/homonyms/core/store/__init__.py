"""
Collection store.

Owns collections, homonym groups and their words. Two backends share these
semantics:
  - sql.SqlCollectionStore: relational (SQLite), cascades via foreign keys
  - redis_store.RedisCollectionStore: local key-value fallback

Group creation and update are all-or-nothing in both.
"""

from abc import ABC, abstractmethod

from homonyms.core.config import Settings
from homonyms.core.errors import ValidationError
from homonyms.core.models import Collection, HomonymGroup, WordInput


MIN_GROUP_WORDS = 2


def validate_name(name: str | None) -> str:
    name = (name or "").strip()
    if not name:
        raise ValidationError("Collection name is required")
    return name


def validate_group(pronunciation: str | None, words: list) -> tuple[str, list[WordInput]]:
    """Check a group before anything is written. Returns cleaned values."""
    pronunciation = (pronunciation or "").strip()
    if not pronunciation:
        raise ValidationError("Pronunciation is required")
    if not words:
        raise ValidationError("At least one word is required")
    if len(words) < MIN_GROUP_WORDS:
        raise ValidationError(f"A homonym group needs at least {MIN_GROUP_WORDS} words")

    cleaned = []
    for i, w in enumerate(words):
        if isinstance(w, dict):
            w = WordInput(word=w.get("word") or "", definition=w.get("definition") or "")
        word = (w.word or "").strip()
        definition = (w.definition or "").strip()
        if not word:
            raise ValidationError(f"Word {i + 1} has no spelling")
        if not definition:
            raise ValidationError(f'Word "{word}" has no definition')
        cleaned.append(WordInput(word, definition))
    return pronunciation, cleaned


class CollectionStore(ABC):
    """CRUD for collections, homonym groups and words, plus substring search."""

    # === Collections ===

    @abstractmethod
    def create_collection(self, name: str) -> Collection: ...

    @abstractmethod
    def get_collection(self, collection_id: str) -> Collection | None: ...

    @abstractmethod
    def list_collections(self) -> list[Collection]:
        """Newest first."""
        ...

    @abstractmethod
    def rename_collection(self, collection_id: str, name: str) -> Collection | None: ...

    @abstractmethod
    def delete_collection(self, collection_id: str) -> bool:
        """Delete a collection with all its groups and words."""
        ...

    # === Homonym groups ===

    @abstractmethod
    def create_homonym_group(
        self, collection_id: str, pronunciation: str, words: list[WordInput]
    ) -> HomonymGroup:
        """
        Persist a group and its words atomically.

        word_order is the index in `words`. Raises ValidationError for a blank
        pronunciation or too few / incomplete words, EntityNotFoundError for an
        unknown collection.
        """
        ...

    @abstractmethod
    def get_homonym_group(self, group_id: str) -> HomonymGroup | None: ...

    @abstractmethod
    def update_homonym_group(
        self, group_id: str, pronunciation: str, words: list[WordInput]
    ) -> HomonymGroup | None:
        """
        Replace a group's pronunciation and words in one step.

        Same validation as create. The new words take word_order from their
        index in `words`; id, collection and created_at are kept. None when the
        group does not exist.
        """
        ...

    @abstractmethod
    def delete_homonym_group(self, group_id: str) -> bool: ...

    @abstractmethod
    def list_homonym_groups(self, collection_id: str) -> list[HomonymGroup]:
        """Creation order; words by word_order then spelling."""
        ...

    def search_homonym_groups(self, collection_id: str, term: str) -> list[HomonymGroup]:
        """Whole groups where any word's spelling or definition contains `term`."""
        groups = self.list_homonym_groups(collection_id)
        if not (term or "").strip():
            return groups
        return [g for g in groups if g.matches(term)]

    def collection_stats(self, collection_id: str) -> dict:
        groups = self.list_homonym_groups(collection_id)
        return {
            "total_groups": len(groups),
            "total_words": sum(len(g.words) for g in groups),
        }

    def close(self) -> None:
        pass


def open_store(settings: Settings, backend: str | None = None) -> CollectionStore:
    backend = (backend or settings.backend).lower()

    if backend == "sqlite":
        from homonyms.core.store.sql import SqlCollectionStore, connect, init_db

        conn = connect(settings.database_path)
        init_db(conn)
        return SqlCollectionStore(conn)

    if backend == "redis":
        import redis
        from homonyms.core.store.redis_store import RedisCollectionStore

        client = redis.Redis(host=settings.redis_host, port=settings.redis_port, db=settings.redis_db)
        return RedisCollectionStore(client, prefix=settings.redis_prefix)

    raise ValueError(f"Unknown store backend: {backend}. Available: sqlite, redis")
