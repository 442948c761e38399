"""
Collections, homonym groups and words.

Both stores and the REST API exchange these shapes; to_dict() is the wire
format, from_dict() reads it back.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone


def generate_id() -> str:
    return uuid.uuid4().hex[:12]


def utcnow() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class WordInput:
    word: str
    definition: str

    @classmethod
    def from_dict(cls, data: dict) -> "WordInput":
        return cls(word=data["word"], definition=data["definition"])


@dataclass
class Word:
    id: str
    homonym_group_id: str
    word: str
    definition: str
    word_order: int = 0

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "homonym_group_id": self.homonym_group_id,
            "word": self.word,
            "definition": self.definition,
            "word_order": self.word_order,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Word":
        return cls(
            id=data["id"],
            homonym_group_id=data["homonym_group_id"],
            word=data["word"],
            definition=data["definition"],
            word_order=data.get("word_order", 0),
        )


def sort_words(words: list[Word]) -> list[Word]:
    """Display order: word_order, then spelling."""
    return sorted(words, key=lambda w: (w.word_order, w.word))


@dataclass
class HomonymGroup:
    id: str
    collection_id: str
    pronunciation: str
    created_at: str
    words: list[Word] = field(default_factory=list)

    def matches(self, term: str) -> bool:
        """Case-insensitive substring match on any spelling or definition."""
        needle = term.strip().lower()
        return any(
            needle in w.word.lower() or needle in w.definition.lower()
            for w in self.words
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "collection_id": self.collection_id,
            "pronunciation": self.pronunciation,
            "created_at": self.created_at,
            "words": [w.to_dict() for w in self.words],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "HomonymGroup":
        group = cls(
            id=data["id"],
            collection_id=data["collection_id"],
            pronunciation=data["pronunciation"],
            created_at=data["created_at"],
        )
        group.words = sort_words([Word.from_dict(w) for w in data.get("words", [])])
        return group


@dataclass
class Collection:
    id: str
    name: str
    created_at: str
    updated_at: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Collection":
        return cls(
            id=data["id"],
            name=data["name"],
            created_at=data["created_at"],
            updated_at=data.get("updated_at", data["created_at"]),
        )
