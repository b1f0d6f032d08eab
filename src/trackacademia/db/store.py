"""Document store boundary.

Backends speak plain documents (``dict``) keyed by opaque string ids, with
timestamps already in the store representation. Backends translate their
own transport failures into PersistenceError.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

Document = dict[str, Any]


class DocumentStore(ABC):
    """Abstract base class for remote document store backends."""

    @abstractmethod
    async def add(
        self, collection: str, data: Document, doc_id: str | None = None
    ) -> str:
        """Persist a new document and return its id.

        When ``doc_id`` is given the document is written under that id.
        """

    @abstractmethod
    async def get(self, collection: str, doc_id: str) -> Document | None:
        """Get a document by id, or None if not found."""

    @abstractmethod
    async def query(
        self,
        collection: str,
        filters: dict[str, Any],
        order_by: str,
        descending: bool = True,
    ) -> list[tuple[str, Document]]:
        """Equality-filtered documents sorted on a single field."""

    @abstractmethod
    async def update(self, collection: str, doc_id: str, data: Document) -> None:
        """Merge fields into an existing document."""

    @abstractmethod
    async def delete(self, collection: str, doc_id: str) -> None:
        """Delete a document. Deleting a missing id is not an error."""

    async def close(self) -> None:
        """Release backend resources."""
