"""Ownership checks.

Every read or write of a Book or Lecture on behalf of a user goes through
this module, so there is a single place comparing ``owner_id`` with the
acting identity.
"""

from __future__ import annotations

from typing import TypeVar

import structlog

from trackacademia.db.gateway import DataAccessGateway
from trackacademia.errors import Unauthorized
from trackacademia.models import Identity

logger = structlog.get_logger(__name__)

OwnedT = TypeVar("OwnedT")


def require_identity(identity: Identity | None) -> Identity:
    """Return the identity or raise Unauthorized when signed out."""
    if identity is None:
        raise Unauthorized("Sign in required")
    return identity


def ensure_owner(record: OwnedT, identity: Identity | None) -> OwnedT:
    """Return ``record`` if the identity owns it.

    Raises:
        Unauthorized: Signed out, or ``record.owner_id`` differs
    """
    identity = require_identity(identity)
    owner_id = getattr(record, "owner_id", None)
    if owner_id != identity.uid:
        logger.warning(
            "authz.denied",
            uid=identity.uid,
            record_type=type(record).__name__,
            record_id=getattr(record, "id", None),
        )
        raise Unauthorized("You don't have permission to access this record")
    return record


async def load_owned(
    gateway: DataAccessGateway,
    collection: str,
    record_id: str,
    identity: Identity | None,
):
    """Read a record and check ownership.

    Returns:
        The record, or None if it does not exist

    Raises:
        Unauthorized: The record belongs to someone else
    """
    require_identity(identity)
    record = await gateway.get(collection, record_id)
    if record is None:
        return None
    return ensure_owner(record, identity)
