"""Tests for DataAccessGateway (F1)."""

from datetime import date, datetime, timezone

import pytest

from trackacademia.db.gateway import DataAccessGateway
from trackacademia.errors import ValidationError
from trackacademia.models import Account, Book, Difficulty, Lecture, Topic


@pytest.fixture
def timed_gateway(store, clock):
    """Gateway with a deterministic clock."""
    return DataAccessGateway(store, clock=clock)


class TestGatewayCreate:
    """Tests for create/get."""

    @pytest.mark.asyncio
    async def test_create_then_get(self, gateway):
        """Read-back matches the written fields, with id and timestamps."""
        book_id = await gateway.create(
            "books", Book(owner_id="u1", title="Algebra", author="Axler")
        )
        book = await gateway.get("books", book_id)

        assert book.id == book_id
        assert book.owner_id == "u1"
        assert book.title == "Algebra"
        assert book.author == "Axler"
        assert book.cover_url is None
        assert book.created_at is not None
        assert book.updated_at == book.created_at

    @pytest.mark.asyncio
    async def test_timestamps_are_aware_utc(self, gateway):
        book_id = await gateway.create("books", Book(owner_id="u1", title="T", author="A"))
        book = await gateway.get("books", book_id)
        assert book.created_at.tzinfo is not None
        assert book.created_at.utcoffset().total_seconds() == 0

    @pytest.mark.asyncio
    async def test_stored_document_has_no_id_key(self, gateway, store):
        book_id = await gateway.create("books", Book(owner_id="u1", title="T", author="A"))
        raw = await store.get("books", book_id)
        assert "id" not in raw
        assert isinstance(raw["created_at"], datetime)

    @pytest.mark.asyncio
    async def test_explicit_record_id(self, gateway):
        """Accounts are keyed by the identity uid."""
        record_id = await gateway.create(
            "accounts", Account(email="a@b.co"), record_id="uid-42"
        )
        assert record_id == "uid-42"
        account = await gateway.get("accounts", "uid-42")
        assert account.email == "a@b.co"
        assert account.degree is None

    @pytest.mark.asyncio
    async def test_lecture_date_and_topics_round_trip(self, gateway, store):
        """Calendar day is stored as a timestamp and read back as the same day."""
        lecture = Lecture(
            owner_id="u1",
            book_id="b1",
            date=date(2024, 3, 15),
            topics=[Topic("Limits", "Epsilon-delta", Difficulty.DIFFICULT)],
        )
        lecture_id = await gateway.create("lectures", lecture)

        raw = await store.get("lectures", lecture_id)
        assert raw["date"] == datetime(2024, 3, 15, tzinfo=timezone.utc)
        assert raw["topics"] == [
            {"name": "Limits", "explanation": "Epsilon-delta", "difficulty": "difficult"}
        ]

        fetched = await gateway.get("lectures", lecture_id)
        assert fetched.date == date(2024, 3, 15)
        assert fetched.topics == lecture.topics

    @pytest.mark.asyncio
    async def test_get_missing_returns_none(self, gateway):
        assert await gateway.get("books", "missing") is None

    @pytest.mark.asyncio
    async def test_unknown_collection_raises(self, gateway):
        with pytest.raises(ValueError):
            await gateway.get("courses", "x")

    @pytest.mark.asyncio
    async def test_record_type_mismatch_raises(self, gateway):
        with pytest.raises(TypeError):
            await gateway.create("books", Account(email="a@b.co"))


class TestGatewayUpdate:
    """Tests for update."""

    @pytest.mark.asyncio
    async def test_update_merges_and_restamps(self, timed_gateway):
        book_id = await timed_gateway.create(
            "books", Book(owner_id="u1", title="Old", author="A")
        )
        before = await timed_gateway.get("books", book_id)

        await timed_gateway.update("books", book_id, {"title": "New"})
        after = await timed_gateway.get("books", book_id)

        assert after.title == "New"
        assert after.author == "A"
        assert after.created_at == before.created_at
        assert after.updated_at > before.updated_at

    @pytest.mark.asyncio
    async def test_updated_at_strictly_increases_with_frozen_clock(self, store):
        """Same clock reading twice still yields increasing stamps."""
        frozen = datetime(2024, 1, 1, tzinfo=timezone.utc)
        gw = DataAccessGateway(store, clock=lambda: frozen)
        book_id = await gw.create("books", Book(owner_id="u1", title="T", author="A"))

        stamps = []
        for title in ("B", "C", "D"):
            await gw.update("books", book_id, {"title": title})
            stamps.append((await gw.get("books", book_id)).updated_at)

        assert stamps == sorted(stamps)
        assert len(set(stamps)) == 3

    @pytest.mark.asyncio
    async def test_update_created_at_rejected(self, gateway):
        book_id = await gateway.create("books", Book(owner_id="u1", title="T", author="A"))
        with pytest.raises(ValidationError) as exc_info:
            await gateway.update("books", book_id, {"created_at": datetime.now(timezone.utc)})
        assert exc_info.value.field == "created_at"

    @pytest.mark.asyncio
    async def test_update_id_rejected(self, gateway):
        book_id = await gateway.create("books", Book(owner_id="u1", title="T", author="A"))
        with pytest.raises(ValidationError):
            await gateway.update("books", book_id, {"id": "other"})

    @pytest.mark.asyncio
    async def test_update_unknown_field_rejected(self, gateway, store):
        """Nothing is written when a field is rejected."""
        book_id = await gateway.create("books", Book(owner_id="u1", title="T", author="A"))
        raw_before = await store.get("books", book_id)

        with pytest.raises(ValidationError):
            await gateway.update("books", book_id, {"title": "X", "pages": 12})

        assert await store.get("books", book_id) == raw_before


class TestGatewayList:
    """Tests for list/delete."""

    @pytest.mark.asyncio
    async def test_list_newest_first(self, timed_gateway):
        ids = []
        for title in ("first", "second", "third"):
            ids.append(
                await timed_gateway.create(
                    "books", Book(owner_id="u1", title=title, author="A")
                )
            )
        books = await timed_gateway.list("books", {"owner_id": "u1"})
        assert [b.id for b in books] == list(reversed(ids))

    @pytest.mark.asyncio
    async def test_list_filters_by_owner(self, gateway):
        await gateway.create("books", Book(owner_id="u1", title="Mine", author="A"))
        await gateway.create("books", Book(owner_id="u2", title="Theirs", author="B"))
        books = await gateway.list("books", {"owner_id": "u1"})
        assert [b.title for b in books] == ["Mine"]

    @pytest.mark.asyncio
    async def test_list_empty_collection(self, gateway):
        assert await gateway.list("lectures") == []

    @pytest.mark.asyncio
    async def test_list_by_date_filter_value_encoded(self, gateway):
        """Date filters are converted like stored dates."""
        await gateway.create(
            "lectures",
            Lecture(owner_id="u1", book_id="b1", date=date(2024, 3, 15)),
        )
        found = await gateway.list("lectures", {"date": date(2024, 3, 15)}, order_by="date")
        assert len(found) == 1

    @pytest.mark.asyncio
    async def test_delete_then_get_none(self, gateway):
        book_id = await gateway.create("books", Book(owner_id="u1", title="T", author="A"))
        await gateway.delete("books", book_id)
        assert await gateway.get("books", book_id) is None

    @pytest.mark.asyncio
    async def test_delete_missing_is_noop(self, gateway):
        await gateway.delete("books", "missing")
