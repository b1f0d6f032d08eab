"""Google Cloud Firestore backend.

Uses the async client. Credentials come from the environment
(GOOGLE_APPLICATION_CREDENTIALS or the metadata server), as with any
google-cloud client.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Generator

import structlog
from google.api_core import exceptions as google_exceptions
from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from trackacademia.db.store import Document, DocumentStore
from trackacademia.errors import PersistenceError

logger = structlog.get_logger(__name__)


@contextmanager
def _translate_errors(collection: str, operation: str) -> Generator[None, None, None]:
    """Re-raise Google API failures as PersistenceError."""
    try:
        yield
    except google_exceptions.GoogleAPIError as e:
        logger.error(
            "firestore.call_failed",
            collection=collection,
            operation=operation,
            error=str(e),
        )
        raise PersistenceError(
            f"Firestore {operation} on '{collection}' failed: {e}",
            collection=collection,
        ) from e


class FirestoreDocumentStore(DocumentStore):
    """DocumentStore over ``google.cloud.firestore.AsyncClient``."""

    def __init__(
        self,
        project_id: str | None = None,
        database: str | None = None,
        client: firestore.AsyncClient | None = None,
    ):
        """
        Args:
            project_id: GCP project (None = inferred from credentials)
            database: Firestore database name (None = "(default)")
            client: Pre-built client, mainly for tests; left open by close()
        """
        self._owns_client = client is None
        self._client = client or firestore.AsyncClient(
            project=project_id, database=database
        )

    async def close(self) -> None:
        """Close the client if this store created it."""
        if self._owns_client:
            self._client.close()
            logger.debug("firestore.client_closed")

    async def add(
        self, collection: str, data: Document, doc_id: str | None = None
    ) -> str:
        with _translate_errors(collection, "add"):
            if doc_id is not None:
                await self._client.collection(collection).document(doc_id).set(data)
                return doc_id
            _, ref = await self._client.collection(collection).add(data)
            return ref.id

    async def get(self, collection: str, doc_id: str) -> Document | None:
        with _translate_errors(collection, "get"):
            snapshot = await self._client.collection(collection).document(doc_id).get()
        if not snapshot.exists:
            return None
        return snapshot.to_dict()

    async def query(
        self,
        collection: str,
        filters: dict[str, Any],
        order_by: str,
        descending: bool = True,
    ) -> list[tuple[str, Document]]:
        query = self._client.collection(collection)
        for name, value in filters.items():
            query = query.where(filter=FieldFilter(name, "==", value))
        direction = (
            firestore.AsyncQuery.DESCENDING
            if descending
            else firestore.AsyncQuery.ASCENDING
        )
        query = query.order_by(order_by, direction=direction)

        with _translate_errors(collection, "query"):
            return [(snapshot.id, snapshot.to_dict()) async for snapshot in query.stream()]

    async def update(self, collection: str, doc_id: str, data: Document) -> None:
        with _translate_errors(collection, "update"):
            await self._client.collection(collection).document(doc_id).update(data)

    async def delete(self, collection: str, doc_id: str) -> None:
        with _translate_errors(collection, "delete"):
            await self._client.collection(collection).document(doc_id).delete()
