"""
Relational collection store (SQLite).

collections -> homonym_groups -> words, each child table declared with
ON DELETE CASCADE; foreign keys are switched on per connection.
"""

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path

from homonyms.core.errors import EntityNotFoundError, StoreError
from homonyms.core.models import Collection, HomonymGroup, Word, WordInput, generate_id, utcnow
from homonyms.core.store import CollectionStore, validate_group, validate_name


logger = logging.getLogger(__name__)

_DDL = """
CREATE TABLE IF NOT EXISTS collections (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS homonym_groups (
    id TEXT PRIMARY KEY,
    collection_id TEXT NOT NULL REFERENCES collections (id) ON DELETE CASCADE,
    pronunciation TEXT NOT NULL,
    created_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_homonym_groups_collection ON homonym_groups (collection_id);

CREATE TABLE IF NOT EXISTS words (
    id TEXT PRIMARY KEY,
    homonym_group_id TEXT NOT NULL REFERENCES homonym_groups (id) ON DELETE CASCADE,
    word TEXT NOT NULL,
    definition TEXT NOT NULL,
    word_order INTEGER NOT NULL DEFAULT 0
);
CREATE INDEX IF NOT EXISTS idx_words_homonym_group ON words (homonym_group_id);
CREATE INDEX IF NOT EXISTS idx_words_word ON words (word);
"""


def _lower(value: str | None) -> str | None:
    # SQLite's built-in lower() only folds ASCII
    return value.lower() if value is not None else None


def connect(db_path: str | Path = ":memory:") -> sqlite3.Connection:
    """Open a connection with foreign keys on. Shared across server threads."""
    db_path_str = str(db_path)
    conn = sqlite3.connect(db_path_str, check_same_thread=False)
    conn.execute("PRAGMA foreign_keys = ON")
    conn.create_function("py_lower", 1, _lower, deterministic=True)
    if db_path_str != ":memory:":
        conn.execute("PRAGMA journal_mode = WAL")
    conn.row_factory = sqlite3.Row
    return conn


def init_db(conn: sqlite3.Connection) -> None:
    conn.executescript(_DDL)
    conn.commit()


def _collection(row: sqlite3.Row) -> Collection:
    return Collection(
        id=row["id"],
        name=row["name"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def _word(row: sqlite3.Row) -> Word:
    return Word(
        id=row["id"],
        homonym_group_id=row["homonym_group_id"],
        word=row["word"],
        definition=row["definition"],
        word_order=row["word_order"],
    )


class SqlCollectionStore(CollectionStore):
    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    @contextmanager
    def _errors(self, action: str):
        try:
            yield
        except sqlite3.Error as e:
            logger.error("Failed to %s: %s", action, e)
            raise StoreError(f"Failed to {action}") from e

    # === Collections ===

    def create_collection(self, name: str) -> Collection:
        name = validate_name(name)
        now = utcnow()
        collection = Collection(id=generate_id(), name=name, created_at=now, updated_at=now)
        with self._errors("create collection"), self.conn:
            self.conn.execute(
                "INSERT INTO collections (id, name, created_at, updated_at) VALUES (?, ?, ?, ?)",
                (collection.id, collection.name, collection.created_at, collection.updated_at),
            )
        return collection

    def get_collection(self, collection_id: str) -> Collection | None:
        with self._errors("fetch collection"):
            row = self.conn.execute(
                "SELECT id, name, created_at, updated_at FROM collections WHERE id = ?",
                (collection_id,),
            ).fetchone()
        return _collection(row) if row else None

    def list_collections(self) -> list[Collection]:
        with self._errors("fetch collections"):
            rows = self.conn.execute(
                "SELECT id, name, created_at, updated_at FROM collections "
                "ORDER BY created_at DESC, rowid DESC"
            ).fetchall()
        return [_collection(r) for r in rows]

    def rename_collection(self, collection_id: str, name: str) -> Collection | None:
        name = validate_name(name)
        with self._errors("update collection"), self.conn:
            cur = self.conn.execute(
                "UPDATE collections SET name = ?, updated_at = ? WHERE id = ?",
                (name, utcnow(), collection_id),
            )
        if cur.rowcount == 0:
            return None
        return self.get_collection(collection_id)

    def delete_collection(self, collection_id: str) -> bool:
        with self._errors("delete collection"), self.conn:
            cur = self.conn.execute("DELETE FROM collections WHERE id = ?", (collection_id,))
        return cur.rowcount > 0

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

        # one transaction: the group and every word, or nothing
        with self._errors("create homonym group"), self.conn:
            self.conn.execute(
                "INSERT INTO homonym_groups (id, collection_id, pronunciation, created_at) "
                "VALUES (?, ?, ?, ?)",
                (group.id, group.collection_id, group.pronunciation, group.created_at),
            )
            self.conn.executemany(
                "INSERT INTO words (id, homonym_group_id, word, definition, word_order) "
                "VALUES (?, ?, ?, ?, ?)",
                [(w.id, w.homonym_group_id, w.word, w.definition, w.word_order) for w in group.words],
            )
        return group

    def get_homonym_group(self, group_id: str) -> HomonymGroup | None:
        with self._errors("fetch homonym group"):
            rows = self.conn.execute(
                "SELECT id, collection_id, pronunciation, created_at FROM homonym_groups WHERE id = ?",
                (group_id,),
            ).fetchall()
            groups = self._with_words(rows)
        return groups[0] if groups else None

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

        with self._errors("update homonym group"), self.conn:
            self.conn.execute(
                "UPDATE homonym_groups SET pronunciation = ? WHERE id = ?",
                (group.pronunciation, group.id),
            )
            self.conn.execute("DELETE FROM words WHERE homonym_group_id = ?", (group.id,))
            self.conn.executemany(
                "INSERT INTO words (id, homonym_group_id, word, definition, word_order) "
                "VALUES (?, ?, ?, ?, ?)",
                [(w.id, w.homonym_group_id, w.word, w.definition, w.word_order) for w in group.words],
            )
        return group

    def delete_homonym_group(self, group_id: str) -> bool:
        with self._errors("delete homonym group"), self.conn:
            cur = self.conn.execute("DELETE FROM homonym_groups WHERE id = ?", (group_id,))
        return cur.rowcount > 0

    def list_homonym_groups(self, collection_id: str) -> list[HomonymGroup]:
        with self._errors("fetch homonym groups"):
            rows = self.conn.execute(
                "SELECT id, collection_id, pronunciation, created_at FROM homonym_groups "
                "WHERE collection_id = ? ORDER BY created_at, rowid",
                (collection_id,),
            ).fetchall()
            return self._with_words(rows)

    def search_homonym_groups(self, collection_id: str, term: str) -> list[HomonymGroup]:
        needle = (term or "").strip().lower()
        if not needle:
            return self.list_homonym_groups(collection_id)

        with self._errors("search homonym groups"):
            rows = self.conn.execute(
                """
                SELECT hg.id, hg.collection_id, hg.pronunciation, hg.created_at
                FROM homonym_groups hg
                WHERE hg.collection_id = ?
                AND EXISTS (
                    SELECT 1 FROM words w
                    WHERE w.homonym_group_id = hg.id
                    AND (instr(py_lower(w.word), ?) > 0 OR instr(py_lower(w.definition), ?) > 0)
                )
                ORDER BY hg.created_at, hg.rowid
                """,
                (collection_id, needle, needle),
            ).fetchall()
            return self._with_words(rows)

    def collection_stats(self, collection_id: str) -> dict:
        with self._errors("count homonym groups"):
            row = self.conn.execute(
                """
                SELECT COUNT(DISTINCT hg.id) AS total_groups, COUNT(w.id) AS total_words
                FROM homonym_groups hg
                LEFT JOIN words w ON w.homonym_group_id = hg.id
                WHERE hg.collection_id = ?
                """,
                (collection_id,),
            ).fetchone()
        return {"total_groups": row["total_groups"], "total_words": row["total_words"]}

    def close(self) -> None:
        self.conn.close()

    def _with_words(self, group_rows: list[sqlite3.Row]) -> list[HomonymGroup]:
        groups = [
            HomonymGroup(
                id=r["id"],
                collection_id=r["collection_id"],
                pronunciation=r["pronunciation"],
                created_at=r["created_at"],
            )
            for r in group_rows
        ]
        if not groups:
            return groups

        by_id = {g.id: g for g in groups}
        placeholders = ", ".join("?" for _ in groups)
        rows = self.conn.execute(
            "SELECT id, homonym_group_id, word, definition, word_order FROM words "
            f"WHERE homonym_group_id IN ({placeholders}) ORDER BY word_order, word",
            list(by_id),
        ).fetchall()
        for row in rows:
            by_id[row["homonym_group_id"]].words.append(_word(row))
        return groups
