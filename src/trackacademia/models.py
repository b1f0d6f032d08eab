"""Record types for accounts, books, lectures and topics.

Records are plain dataclasses. ``to_document`` / ``from_document`` map them
to store documents (same snake_case field names, no ``id`` key); timestamp
conversion is done by the data-access gateway, not here.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import date, datetime
from enum import Enum
from typing import Any, ClassVar


class Difficulty(str, Enum):
    """How hard a lecture topic felt."""

    EASY = "easy"
    MODERATE = "moderate"
    DIFFICULT = "difficult"


@dataclass(frozen=True)
class Identity:
    """Signed-in identity as reported by the identity provider."""

    uid: str
    email: str
    display_name: str | None = None
    id_token: str | None = field(default=None, repr=False, compare=False)


@dataclass
class Topic:
    """A topic covered in a lecture (embedded, not addressable)."""

    name: str
    explanation: str
    difficulty: Difficulty = Difficulty.EASY

    def __post_init__(self):
        self.difficulty = Difficulty(self.difficulty)

    def is_complete(self) -> bool:
        """Both name and explanation carry text."""
        return bool(self.name.strip()) and bool(self.explanation.strip())

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "explanation": self.explanation,
            "difficulty": self.difficulty.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Topic:
        return cls(
            name=data.get("name", ""),
            explanation=data.get("explanation", ""),
            difficulty=Difficulty(data.get("difficulty", Difficulty.EASY.value)),
        )


class Record:
    """Mixin for documents stored in a named collection."""

    # Fields holding a calendar day (stored as midnight UTC)
    DATE_FIELDS: ClassVar[tuple[str, ...]] = ()
    # Fields holding an instant
    TIMESTAMP_FIELDS: ClassVar[tuple[str, ...]] = ("created_at", "updated_at")

    @classmethod
    def field_names(cls) -> set[str]:
        return {f.name for f in fields(cls)}

    def to_document(self) -> dict[str, Any]:
        """Serialize to a store document without the identifier."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if f.name != "id"
        }

    @classmethod
    def from_document(cls, record_id: str, data: dict[str, Any]):
        known = cls.field_names()
        values = {k: v for k, v in data.items() if k in known}
        values["id"] = record_id
        return cls(**values)


@dataclass
class Account(Record):
    """User profile document, keyed by the identity uid."""

    email: str
    display_name: str | None = None
    degree: str | None = None
    id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def has_degree(self) -> bool:
        return bool(self.degree and self.degree.strip())


@dataclass
class Book(Record):
    """A course book registered by its owner."""

    owner_id: str
    title: str
    author: str
    cover_url: str | None = None
    id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class Lecture(Record):
    """A dated lecture entry under a book."""

    DATE_FIELDS: ClassVar[tuple[str, ...]] = ("date",)

    owner_id: str
    book_id: str
    date: date
    topics: list[Topic] = field(default_factory=list)
    id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def to_document(self) -> dict[str, Any]:
        document = super().to_document()
        document["topics"] = [t.to_dict() for t in self.topics]
        return document

    @classmethod
    def from_document(cls, record_id: str, data: dict[str, Any]) -> Lecture:
        data = dict(data)
        data["topics"] = [
            t if isinstance(t, Topic) else Topic.from_dict(t)
            for t in data.get("topics", [])
        ]
        return super().from_document(record_id, data)


# Collection name -> record type
COLLECTIONS: dict[str, type[Record]] = {
    "accounts": Account,
    "books": Book,
    "lectures": Lecture,
}
