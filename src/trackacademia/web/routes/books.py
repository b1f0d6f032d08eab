"""Book endpoints, including the lectures of a book.

All endpoints require a signed-in user with a completed profile.
"""

from datetime import date

import structlog
from fastapi import APIRouter, Depends, HTTPException, status

from trackacademia.bootstrap import Services
from trackacademia.core import books, lectures
from trackacademia.models import Book, Topic
from trackacademia.session.controller import SessionState
from trackacademia.web.dependencies import get_services, get_today, require_view
from trackacademia.web.schemas import (
    BookCreate,
    BookListResponse,
    BookResponse,
    BookUpdate,
    LectureCreate,
    LectureListResponse,
    LectureResponse,
)

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/books", tags=["books"])

guard = require_view(requires_profile_completion=True)


async def _owned_book_or_404(services: Services, state: SessionState, book_id: str) -> Book:
    book = await books.get_book(services.gateway, state.identity, book_id)
    if book is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Book '{book_id}' not found",
        )
    return book


@router.get("", response_model=BookListResponse)
async def list_books(
    state: SessionState = Depends(guard),
    services: Services = Depends(get_services),
) -> BookListResponse:
    """List the user's books, newest first."""
    owned = await books.list_books(services.gateway, state.identity)
    logger.info("books_list", count=len(owned))
    return BookListResponse(
        books=[BookResponse.model_validate(b) for b in owned],
        count=len(owned),
    )


@router.post("", response_model=BookResponse, status_code=status.HTTP_201_CREATED)
async def create_book(
    request: BookCreate,
    state: SessionState = Depends(guard),
    services: Services = Depends(get_services),
) -> BookResponse:
    """Register a new book."""
    book = await books.add_book(
        services.gateway,
        state.identity,
        title=request.title,
        author=request.author,
        cover_url=request.cover_url,
    )
    return BookResponse.model_validate(book)


@router.get("/{book_id}", response_model=BookResponse)
async def get_book(
    book_id: str,
    state: SessionState = Depends(guard),
    services: Services = Depends(get_services),
) -> BookResponse:
    """Get one of the user's books."""
    book = await _owned_book_or_404(services, state, book_id)
    return BookResponse.model_validate(book)


@router.patch("/{book_id}", response_model=BookResponse)
async def update_book(
    book_id: str,
    request: BookUpdate,
    state: SessionState = Depends(guard),
    services: Services = Depends(get_services),
) -> BookResponse:
    """Edit title, author or cover URL."""
    book = await books.edit_book(
        services.gateway,
        state.identity,
        book_id,
        request.model_dump(exclude_unset=True),
    )
    if book is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Book '{book_id}' not found",
        )
    return BookResponse.model_validate(book)


@router.delete("/{book_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_book(
    book_id: str,
    state: SessionState = Depends(guard),
    services: Services = Depends(get_services),
) -> None:
    """Delete a book. Its lectures are kept."""
    if not await books.remove_book(services.gateway, state.identity, book_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Book '{book_id}' not found",
        )


@router.get("/{book_id}/lectures", response_model=LectureListResponse)
async def list_book_lectures(
    book_id: str,
    state: SessionState = Depends(guard),
    services: Services = Depends(get_services),
    today: date = Depends(get_today),
) -> LectureListResponse:
    """Lectures of a book, newest first, with today's (or the latest) selected."""
    book = await _owned_book_or_404(services, state, book_id)
    page = await lectures.lecture_page(services.gateway, state.identity, book, today)
    return LectureListResponse(
        book=BookResponse.model_validate(page.book),
        lectures=[LectureResponse.model_validate(lec) for lec in page.lectures],
        count=len(page.lectures),
        active_lecture_id=page.active.id if page.active else None,
    )


@router.post(
    "/{book_id}/lectures",
    response_model=LectureResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_lecture(
    book_id: str,
    request: LectureCreate,
    state: SessionState = Depends(guard),
    services: Services = Depends(get_services),
) -> LectureResponse:
    """Log a lecture with its topics."""
    book = await _owned_book_or_404(services, state, book_id)
    lecture = await lectures.add_lecture(
        services.gateway,
        state.identity,
        book,
        request.date,
        [Topic(**t.model_dump()) for t in request.topics],
    )
    return LectureResponse.model_validate(lecture)
