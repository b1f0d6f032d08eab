"""Data-access gateway over the remote document store.

One instance is constructed at process start and shared by every consumer.
The gateway holds no per-call state; it only normalizes records:

- assigns ``created_at`` / ``updated_at`` on create, re-stamps
  ``updated_at`` on every update (client clock, strictly increasing)
- converts date/datetime fields to store timestamps and back
- attaches the store-assigned id to records it returns

Ownership is not checked here. Callers go through
``trackacademia.core.authorization`` before rendering or mutating.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from enum import Enum
from typing import Any, Callable

import structlog

from trackacademia.db.store import Document, DocumentStore
from trackacademia.db.timestamps import from_timestamp, to_timestamp, utc_now
from trackacademia.errors import ValidationError
from trackacademia.models import COLLECTIONS, Record, Topic

logger = structlog.get_logger(__name__)

# Fields that an update may never write
IMMUTABLE_FIELDS = frozenset({"id", "created_at"})


def _encode_value(value: Any) -> Any:
    """Convert one in-memory value to its store representation."""
    # datetime is a subclass of date, both go through to_timestamp
    if isinstance(value, date):
        return to_timestamp(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Topic):
        return value.to_dict()
    if isinstance(value, (list, tuple)):
        return [_encode_value(v) for v in value]
    return value


class DataAccessGateway:
    """CRUD over named collections with timestamp normalization."""

    def __init__(
        self,
        store: DocumentStore,
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Args:
            store: Document store backend
            clock: Source of the current instant (client clock)
        """
        self._store = store
        self._clock = clock
        self._last_stamp: datetime | None = None

    @property
    def store(self) -> DocumentStore:
        return self._store

    def _stamp(self) -> datetime:
        """Current instant, strictly later than any stamp issued before."""
        now = to_timestamp(self._clock())
        if self._last_stamp is not None and now <= self._last_stamp:
            now = self._last_stamp + timedelta(microseconds=1)
        self._last_stamp = now
        return now

    @staticmethod
    def _record_type(collection: str) -> type[Record]:
        try:
            return COLLECTIONS[collection]
        except KeyError:
            raise ValueError(f"Unknown collection: {collection}") from None

    @staticmethod
    def _encode(document: dict[str, Any]) -> Document:
        return {name: _encode_value(value) for name, value in document.items()}

    @staticmethod
    def _decode(record_type: type[Record], doc_id: str, data: Document) -> Record:
        decoded = dict(data)
        for name in record_type.DATE_FIELDS:
            if name in decoded:
                decoded[name] = from_timestamp(decoded[name], as_date=True)
        for name in record_type.TIMESTAMP_FIELDS:
            if name in decoded:
                decoded[name] = from_timestamp(decoded[name])
        return record_type.from_document(doc_id, decoded)

    async def create(
        self,
        collection: str,
        record: Record,
        record_id: str | None = None,
    ) -> str:
        """Persist a new record and return its identifier.

        Args:
            collection: Collection name ("accounts", "books", "lectures")
            record: Record to persist; its ``id`` is ignored
            record_id: Explicit id (accounts are keyed by identity uid)

        Returns:
            Identifier of the stored document

        Raises:
            PersistenceError: If the store rejects the write
        """
        record_type = self._record_type(collection)
        if not isinstance(record, record_type):
            raise TypeError(
                f"Collection '{collection}' holds {record_type.__name__}, "
                f"got {type(record).__name__}"
            )

        document = record.to_document()
        if document.get("created_at") is None:
            document["created_at"] = self._stamp()
        if document.get("updated_at") is None:
            document["updated_at"] = document["created_at"]

        new_id = await self._store.add(collection, self._encode(document), record_id)
        logger.debug("gateway.created", collection=collection, record_id=new_id)
        return new_id

    async def get(self, collection: str, record_id: str) -> Record | None:
        """Get a record by id.

        Returns:
            The record with dates converted and id attached, None if absent
        """
        record_type = self._record_type(collection)
        data = await self._store.get(collection, record_id)
        if data is None:
            return None
        return self._decode(record_type, record_id, data)

    async def list(
        self,
        collection: str,
        filters: dict[str, Any] | None = None,
        order_by: str = "created_at",
        descending: bool = True,
    ) -> list[Record]:
        """List records matching equality filters, newest first by default.

        An empty collection yields an empty list.
        """
        record_type = self._record_type(collection)
        rows = await self._store.query(
            collection,
            self._encode(filters or {}),
            order_by,
            descending,
        )
        return [self._decode(record_type, doc_id, data) for doc_id, data in rows]

    async def update(
        self,
        collection: str,
        record_id: str,
        changes: dict[str, Any],
    ) -> None:
        """Merge the supplied fields and stamp ``updated_at``.

        Raises:
            ValidationError: If a field is unknown or immutable
            PersistenceError: If the record is missing or the store fails
        """
        record_type = self._record_type(collection)
        known = record_type.field_names()

        for name in changes:
            if name in IMMUTABLE_FIELDS:
                raise ValidationError(f"Field '{name}' cannot be updated", field=name)
            if name not in known:
                raise ValidationError(
                    f"Unknown field '{name}' for {collection}", field=name
                )

        document = dict(changes)
        document["updated_at"] = self._stamp()

        await self._store.update(collection, record_id, self._encode(document))
        logger.debug(
            "gateway.updated",
            collection=collection,
            record_id=record_id,
            fields=sorted(changes),
        )

    async def delete(self, collection: str, record_id: str) -> None:
        """Delete a record. Deleting an absent id is not a usage error."""
        self._record_type(collection)
        await self._store.delete(collection, record_id)
        logger.debug("gateway.deleted", collection=collection, record_id=record_id)
