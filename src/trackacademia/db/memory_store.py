"""In-process document store for local development and tests.

Mirrors the observable behaviour of the Firestore backend: generated ids,
update of a missing document fails, delete of a missing document does not.
"""

from __future__ import annotations

import copy
import uuid
from typing import Any

from trackacademia.db.store import Document, DocumentStore
from trackacademia.errors import PersistenceError


class MemoryDocumentStore(DocumentStore):
    """Dictionary-backed store. Documents are deep-copied on the way in and out."""

    def __init__(self):
        self._collections: dict[str, dict[str, Document]] = {}

    def _collection(self, name: str) -> dict[str, Document]:
        return self._collections.setdefault(name, {})

    async def add(
        self, collection: str, data: Document, doc_id: str | None = None
    ) -> str:
        doc_id = doc_id or uuid.uuid4().hex[:20]
        self._collection(collection)[doc_id] = copy.deepcopy(data)
        return doc_id

    async def get(self, collection: str, doc_id: str) -> Document | None:
        data = self._collection(collection).get(doc_id)
        return copy.deepcopy(data) if data is not None else None

    async def query(
        self,
        collection: str,
        filters: dict[str, Any],
        order_by: str,
        descending: bool = True,
    ) -> list[tuple[str, Document]]:
        matches = [
            (doc_id, copy.deepcopy(data))
            for doc_id, data in self._collection(collection).items()
            if all(data.get(k) == v for k, v in filters.items())
            and data.get(order_by) is not None
        ]
        # sorted() is stable: equal keys keep insertion order
        return sorted(matches, key=lambda item: item[1][order_by], reverse=descending)

    async def update(self, collection: str, doc_id: str, data: Document) -> None:
        existing = self._collection(collection).get(doc_id)
        if existing is None:
            raise PersistenceError(
                f"No document to update: {collection}/{doc_id}",
                collection=collection,
            )
        existing.update(copy.deepcopy(data))

    async def delete(self, collection: str, doc_id: str) -> None:
        self._collection(collection).pop(doc_id, None)

    def count(self, collection: str) -> int:
        """Number of documents in a collection."""
        return len(self._collection(collection))
