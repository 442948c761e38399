"""
Key-value collection store (Redis).

Same shapes as the relational store. Each collection and each group (words
embedded) is one JSON document; ordering lives in index lists:

    {prefix}:collections                 collection ids, insertion order
    {prefix}:collection:{id}             collection JSON
    {prefix}:collection:{id}:groups      group ids, insertion order
    {prefix}:group:{id}                  group JSON with words
"""

import json
import logging
from contextlib import contextmanager

import redis

from homonyms.core.errors import EntityNotFoundError, StoreError
from homonyms.core.models import Collection, HomonymGroup, Word, WordInput, generate_id, utcnow
from homonyms.core.store import CollectionStore, validate_group, validate_name


logger = logging.getLogger(__name__)


class RedisCollectionStore(CollectionStore):
    def __init__(self, client: redis.Redis, prefix: str = "homonyms"):
        self.client = client
        self.prefix = prefix

    def _collections_key(self) -> str:
        return f"{self.prefix}:collections"

    def _collection_key(self, collection_id: str) -> str:
        return f"{self.prefix}:collection:{collection_id}"

    def _groups_key(self, collection_id: str) -> str:
        return f"{self.prefix}:collection:{collection_id}:groups"

    def _group_key(self, group_id: str) -> str:
        return f"{self.prefix}:group:{group_id}"

    @contextmanager
    def _errors(self, action: str):
        try:
            yield
        except redis.RedisError as e:
            logger.error("Failed to %s: %s", action, e)
            raise StoreError(f"Failed to {action}") from e

    # === Collections ===

    def create_collection(self, name: str) -> Collection:
        name = validate_name(name)
        now = utcnow()
        collection = Collection(id=generate_id(), name=name, created_at=now, updated_at=now)
        with self._errors("create collection"):
            pipe = self.client.pipeline(transaction=True)
            pipe.set(self._collection_key(collection.id), json.dumps(collection.to_dict()))
            pipe.rpush(self._collections_key(), collection.id)
            pipe.execute()
        return collection

    def get_collection(self, collection_id: str) -> Collection | None:
        with self._errors("fetch collection"):
            data = self.client.get(self._collection_key(collection_id))
        if not data:
            return None
        return Collection.from_dict(json.loads(data))

    def list_collections(self) -> list[Collection]:
        with self._errors("fetch collections"):
            ids = self.client.lrange(self._collections_key(), 0, -1)
            collections = []
            for cid in reversed(ids):
                collection = self.get_collection(cid.decode())
                if collection:
                    collections.append(collection)
        return collections

    def rename_collection(self, collection_id: str, name: str) -> Collection | None:
        name = validate_name(name)
        collection = self.get_collection(collection_id)
        if collection is None:
            return None
        collection.name = name
        collection.updated_at = utcnow()
        with self._errors("update collection"):
            self.client.set(self._collection_key(collection_id), json.dumps(collection.to_dict()))
        return collection

    def delete_collection(self, collection_id: str) -> bool:
        with self._errors("delete collection"):
            if not self.client.exists(self._collection_key(collection_id)):
                return False
            group_ids = self.client.lrange(self._groups_key(collection_id), 0, -1)

            pipe = self.client.pipeline(transaction=True)
            for gid in group_ids:
                pipe.delete(self._group_key(gid.decode()))
            pipe.delete(self._groups_key(collection_id))
            pipe.delete(self._collection_key(collection_id))
            pipe.lrem(self._collections_key(), 0, collection_id)
            pipe.execute()
        return True

    # === Homonym groups ===

    def create_homonym_group(
        self, collection_id: str, pronunciation: str, words: list[WordInput]
    ) -> HomonymGroup:
        pronunciation, words = validate_group(pronunciation, words)
        if self.get_collection(collection_id) is None:
            raise EntityNotFoundError(f"Collection not found: {collection_id}")

        group = HomonymGroup(
            id=generate_id(),
            collection_id=collection_id,
            pronunciation=pronunciation,
            created_at=utcnow(),
        )
        group.words = [
            Word(id=generate_id(), homonym_group_id=group.id, word=w.word,
                 definition=w.definition, word_order=i)
            for i, w in enumerate(words)
        ]

        # MULTI/EXEC: the group document and its index entry land together
        with self._errors("create homonym group"):
            pipe = self.client.pipeline(transaction=True)
            pipe.set(self._group_key(group.id), json.dumps(group.to_dict()))
            pipe.rpush(self._groups_key(collection_id), group.id)
            pipe.execute()
        return group

    def get_homonym_group(self, group_id: str) -> HomonymGroup | None:
        with self._errors("fetch homonym group"):
            data = self.client.get(self._group_key(group_id))
        if not data:
            return None
        return HomonymGroup.from_dict(json.loads(data))

    def update_homonym_group(
        self, group_id: str, pronunciation: str, words: list[WordInput]
    ) -> HomonymGroup | None:
        pronunciation, words = validate_group(pronunciation, words)
        group = self.get_homonym_group(group_id)
        if group is None:
            return None

        group.pronunciation = pronunciation
        group.words = [
            Word(id=generate_id(), homonym_group_id=group.id, word=w.word,
                 definition=w.definition, word_order=i)
            for i, w in enumerate(words)
        ]
        # words live inside the group document, so one SET replaces them all
        with self._errors("update homonym group"):
            self.client.set(self._group_key(group.id), json.dumps(group.to_dict()))
        return group

    def delete_homonym_group(self, group_id: str) -> bool:
        group = self.get_homonym_group(group_id)
        if group is None:
            return False
        with self._errors("delete homonym group"):
            pipe = self.client.pipeline(transaction=True)
            pipe.delete(self._group_key(group_id))
            pipe.lrem(self._groups_key(group.collection_id), 0, group_id)
            pipe.execute()
        return True

    def list_homonym_groups(self, collection_id: str) -> list[HomonymGroup]:
        with self._errors("fetch homonym groups"):
            ids = self.client.lrange(self._groups_key(collection_id), 0, -1)
            groups = []
            for gid in ids:
                group = self.get_homonym_group(gid.decode())
                if group:
                    groups.append(group)
        return groups

    def clear(self) -> None:
        """Drop every key under this store's prefix. Useful for tests."""
        with self._errors("clear store"):
            for key in self.client.scan_iter(f"{self.prefix}:*"):
                self.client.delete(key)

    def close(self) -> None:
        self.client.close()
