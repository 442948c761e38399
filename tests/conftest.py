"""
Shared fixtures: fake dictionary sources and both store backends.
"""

import asyncio

import pytest
import redis

from homonyms.core.dictionary import DictionaryEntry, DictionarySource
from homonyms.core.errors import NotFound
from homonyms.core.store.redis_store import RedisCollectionStore
from homonyms.core.store.sql import SqlCollectionStore, connect, init_db


def entry(word, definition, pos="noun", pronunciation=None):
    return DictionaryEntry(
        headword=word,
        part_of_speech=pos,
        definitions=[definition],
        pronunciation=pronunciation,
    )


class FakeSource(DictionarySource):
    """In-memory source. Words in `errors` raise, unknown words are NotFound."""

    def __init__(self, name="fake", entries=None, errors=None, delay=0.0):
        self.name = name
        self.entries = dict(entries or {})
        self.errors = dict(errors or {})
        self.delay = delay
        self.calls = []

    async def lookup(self, word):
        self.calls.append(word)
        if self.delay:
            await asyncio.sleep(self.delay)
        if word in self.errors:
            raise self.errors[word]
        if word in self.entries:
            return self.entries[word]
        raise NotFound(word, self.name, f"{self.name} has no entry for '{word}'")


@pytest.fixture
def sql_store():
    conn = connect(":memory:")
    init_db(conn)
    store = SqlCollectionStore(conn)
    yield store
    store.close()


@pytest.fixture
def redis_store():
    client = redis.Redis(host="localhost", port=6379, db=15)
    try:
        client.ping()
    except redis.RedisError:
        pytest.skip("Redis not available")
    store = RedisCollectionStore(client, prefix="homonyms-test")
    store.clear()
    yield store
    store.clear()
    store.close()


@pytest.fixture(params=["sql", "redis"])
def store(request):
    return request.getfixturevalue(f"{request.param}_store")
