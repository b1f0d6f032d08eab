"""Dashboard summary for the signed-in user."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from trackacademia.core.authorization import require_identity
from trackacademia.core.lectures import lectures_in_window
from trackacademia.db.gateway import DataAccessGateway
from trackacademia.models import Account, Identity


@dataclass
class DashboardSummary:
    degree: str | None
    total_books: int
    lectures_this_week: int
    status: str  # "Active" | "Getting Started"


async def build_dashboard(
    gateway: DataAccessGateway,
    identity: Identity | None,
    profile: Account | None,
    today: date,
) -> DashboardSummary:
    identity = require_identity(identity)
    books = await gateway.list("books", {"owner_id": identity.uid})
    lectures = await gateway.list("lectures", {"owner_id": identity.uid}, order_by="date")

    return DashboardSummary(
        degree=profile.degree if profile is not None else None,
        total_books=len(books),
        lectures_this_week=lectures_in_window(lectures, today),
        status="Active" if books else "Getting Started",
    )
