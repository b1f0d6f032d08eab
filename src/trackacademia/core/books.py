"""Book operations on behalf of the signed-in user.

Deleting a book does not delete its lectures.
"""

from __future__ import annotations

from typing import Any

import structlog

from trackacademia.core.authorization import load_owned, require_identity
from trackacademia.db.gateway import DataAccessGateway
from trackacademia.errors import ValidationError
from trackacademia.models import Book, Identity

logger = structlog.get_logger(__name__)

EDITABLE_FIELDS = ("title", "author", "cover_url")


def _required_text(value: str | None, field: str) -> str:
    text = (value or "").strip()
    if not text:
        raise ValidationError(f"{field.replace('_', ' ').capitalize()} is required", field=field)
    return text


def _optional_url(value: str | None) -> str | None:
    url = (value or "").strip()
    return url or None


async def add_book(
    gateway: DataAccessGateway,
    identity: Identity | None,
    title: str,
    author: str,
    cover_url: str | None = None,
) -> Book:
    """Register a new book owned by ``identity``.

    Raises:
        ValidationError: Title or author is blank
        Unauthorized: Signed out
    """
    identity = require_identity(identity)
    book = Book(
        owner_id=identity.uid,
        title=_required_text(title, "title"),
        author=_required_text(author, "author"),
        cover_url=_optional_url(cover_url),
    )
    book_id = await gateway.create("books", book)
    logger.info("books.added", uid=identity.uid, book_id=book_id)
    return await gateway.get("books", book_id)


async def list_books(gateway: DataAccessGateway, identity: Identity | None) -> list[Book]:
    """Books owned by ``identity``, most recently created first."""
    identity = require_identity(identity)
    return await gateway.list("books", {"owner_id": identity.uid}, order_by="created_at")


async def get_book(
    gateway: DataAccessGateway, identity: Identity | None, book_id: str
) -> Book | None:
    """Owned book by id, None if it does not exist."""
    return await load_owned(gateway, "books", book_id, identity)


async def edit_book(
    gateway: DataAccessGateway,
    identity: Identity | None,
    book_id: str,
    changes: dict[str, Any],
) -> Book | None:
    """Update title, author and/or cover URL.

    Returns:
        The re-read book, None if it does not exist

    Raises:
        ValidationError: Blank title/author or a non-editable field
        Unauthorized: Book belongs to someone else
    """
    book = await load_owned(gateway, "books", book_id, identity)
    if book is None:
        return None

    updates: dict[str, Any] = {}
    for name, value in changes.items():
        if name not in EDITABLE_FIELDS:
            raise ValidationError(f"Field '{name}' cannot be edited", field=name)
        if name == "cover_url":
            updates[name] = _optional_url(value)
        else:
            updates[name] = _required_text(value, name)

    if updates:
        await gateway.update("books", book_id, updates)
        logger.info("books.edited", book_id=book_id, fields=sorted(updates))
    return await gateway.get("books", book_id)


async def remove_book(
    gateway: DataAccessGateway, identity: Identity | None, book_id: str
) -> bool:
    """Delete an owned book.

    Returns:
        True if deleted, False if not found
    """
    book = await load_owned(gateway, "books", book_id, identity)
    if book is None:
        return False
    await gateway.delete("books", book_id)
    logger.info("books.removed", book_id=book_id)
    return True
