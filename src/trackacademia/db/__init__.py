"""Document store access.

Provides:
- DocumentStore boundary and its backends (memory, Firestore)
- DataAccessGateway: CRUD with timestamp normalization
- Timestamp conversion helpers

The Firestore backend lives in trackacademia.db.firestore_store and is
imported by the bootstrap only when selected (it loads grpc).
"""

from trackacademia.db.gateway import DataAccessGateway
from trackacademia.db.memory_store import MemoryDocumentStore
from trackacademia.db.store import DocumentStore
from trackacademia.db.timestamps import from_timestamp, strip_time, to_timestamp, utc_now

__all__ = [
    "DataAccessGateway",
    "DocumentStore",
    "MemoryDocumentStore",
    "from_timestamp",
    "strip_time",
    "to_timestamp",
    "utc_now",
]
