"""Pytest configuration for phased testing.

Tests are organized by phase:
- f1: store, gateway, timestamps
- f2: identity, session
- f3: route guard, books, lectures, dashboard, uploads
- f4: web API, CLI, config

Future phase tests are automatically skipped.
"""

from datetime import datetime, timedelta, timezone

import pytest

from trackacademia.db.gateway import DataAccessGateway
from trackacademia.db.memory_store import MemoryDocumentStore
from trackacademia.models import Identity

# Current implementation phase
CURRENT_PHASE = 4


def pytest_collection_modifyitems(config, items):
    """Skip tests from phases that haven't been implemented yet."""
    for item in items:
        # Extract phase from path (tests/f2/... -> 2)
        parts = item.fspath.strpath.split("/")
        for part in parts:
            if part.startswith("f") and part[1:].isdigit():
                test_phase = int(part[1:])
                if test_phase > CURRENT_PHASE:
                    item.add_marker(
                        pytest.mark.skip(
                            reason=f"Phase F{test_phase} not yet implemented (current: F{CURRENT_PHASE})"
                        )
                    )
                break


class FakeClock:
    """Deterministic clock advancing one second per reading."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        current = self.now
        self.now = self.now + timedelta(seconds=1)
        return current


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    """Fresh in-memory document store."""
    return MemoryDocumentStore()


@pytest.fixture
def gateway(store):
    """Data-access gateway over the memory store."""
    return DataAccessGateway(store)


@pytest.fixture
def alice():
    return Identity(uid="uid-alice", email="alice@example.com", display_name="Alice")


@pytest.fixture
def bob():
    return Identity(uid="uid-bob", email="bob@example.com")
