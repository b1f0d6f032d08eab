"""Lecture operations and the active-lecture selection policy.

Topics are validated before anything touches the store: entries without
both a name and an explanation are dropped, and a lecture must keep at
least one topic.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Iterable, Sequence

import structlog

from trackacademia.core.authorization import ensure_owner, load_owned, require_identity
from trackacademia.db.gateway import DataAccessGateway
from trackacademia.db.timestamps import strip_time
from trackacademia.errors import ValidationError
from trackacademia.models import Book, Identity, Lecture, Topic

logger = structlog.get_logger(__name__)


@dataclass
class LecturePage:
    """Lectures of one book plus the one to show first."""

    book: Book
    lectures: list[Lecture]
    active: Lecture | None


def clean_topics(topics: Iterable[Topic]) -> list[Topic]:
    """Strip topic text and drop incomplete entries.

    Raises:
        ValidationError: No topic has both a name and an explanation
    """
    valid = [
        Topic(
            name=t.name.strip(),
            explanation=t.explanation.strip(),
            difficulty=t.difficulty,
        )
        for t in topics
        if t.is_complete()
    ]
    if not valid:
        raise ValidationError(
            "Add at least one topic with both name and explanation",
            field="topics",
        )
    return valid


def select_active_lecture(lectures: Sequence[Lecture], today: date) -> Lecture | None:
    """Pick the lecture to show first.

    ``lectures`` must already be sorted newest first. Returns the first one
    dated ``today``, else the first one, else None.
    """
    today = strip_time(today)
    for lecture in lectures:
        if strip_time(lecture.date) == today:
            return lecture
    return lectures[0] if lectures else None


def lectures_in_window(lectures: Iterable[Lecture], today: date, days: int = 7) -> int:
    """Count lectures dated within the last ``days`` days, today included."""
    today = strip_time(today)
    start = today - timedelta(days=days - 1)
    return sum(1 for lecture in lectures if start <= strip_time(lecture.date) <= today)


async def add_lecture(
    gateway: DataAccessGateway,
    identity: Identity | None,
    book: Book,
    lecture_date: date,
    topics: Iterable[Topic],
) -> Lecture:
    """Log a lecture under an owned book.

    Raises:
        ValidationError: No valid topic (nothing is written)
        Unauthorized: Book belongs to someone else
    """
    valid_topics = clean_topics(topics)
    identity = require_identity(identity)
    ensure_owner(book, identity)

    lecture = Lecture(
        owner_id=identity.uid,
        book_id=book.id,
        date=strip_time(lecture_date),
        topics=valid_topics,
    )
    lecture_id = await gateway.create("lectures", lecture)
    logger.info(
        "lectures.added",
        book_id=book.id,
        lecture_id=lecture_id,
        topics=len(valid_topics),
    )
    return await gateway.get("lectures", lecture_id)


async def list_lectures(
    gateway: DataAccessGateway, identity: Identity | None, book: Book
) -> list[Lecture]:
    """Lectures of an owned book, newest date first."""
    identity = require_identity(identity)
    ensure_owner(book, identity)
    return await gateway.list(
        "lectures",
        {"owner_id": identity.uid, "book_id": book.id},
        order_by="date",
    )


async def lecture_page(
    gateway: DataAccessGateway,
    identity: Identity | None,
    book: Book,
    today: date,
) -> LecturePage:
    lectures = await list_lectures(gateway, identity, book)
    return LecturePage(
        book=book,
        lectures=lectures,
        active=select_active_lecture(lectures, today),
    )


async def get_lecture(
    gateway: DataAccessGateway, identity: Identity | None, lecture_id: str
) -> Lecture | None:
    return await load_owned(gateway, "lectures", lecture_id, identity)


async def edit_lecture(
    gateway: DataAccessGateway,
    identity: Identity | None,
    lecture_id: str,
    lecture_date: date | None = None,
    topics: Iterable[Topic] | None = None,
) -> Lecture | None:
    """Change the date and/or topics of an owned lecture.

    Returns:
        The re-read lecture, None if it does not exist

    Raises:
        ValidationError: Topics given but none valid (nothing is written)
        Unauthorized: Lecture belongs to someone else
    """
    changes: dict[str, Any] = {}
    if topics is not None:
        changes["topics"] = clean_topics(topics)
    if lecture_date is not None:
        changes["date"] = strip_time(lecture_date)

    lecture = await load_owned(gateway, "lectures", lecture_id, identity)
    if lecture is None:
        return None

    if changes:
        await gateway.update("lectures", lecture_id, changes)
        logger.info("lectures.edited", lecture_id=lecture_id, fields=sorted(changes))
    return await gateway.get("lectures", lecture_id)


async def remove_lecture(
    gateway: DataAccessGateway, identity: Identity | None, lecture_id: str
) -> bool:
    """Delete an owned lecture. Returns False if not found."""
    lecture = await load_owned(gateway, "lectures", lecture_id, identity)
    if lecture is None:
        return False
    await gateway.delete("lectures", lecture_id)
    logger.info("lectures.removed", lecture_id=lecture_id)
    return True
