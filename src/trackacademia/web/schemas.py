"""Pydantic schemas for the Web API.

Serialization models for session, profile, books, lectures and dashboard.
"""

from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, Field, field_validator, model_validator

from trackacademia.models import Difficulty


# =============================================================================
# AUTH / SESSION SCHEMAS
# =============================================================================


class SignUpRequest(BaseModel):
    """Request body for creating an account."""

    email: str = Field(..., min_length=3, max_length=200)
    password: str = Field(..., min_length=1, max_length=200)
    display_name: str | None = Field(default=None, max_length=100)


class SignInRequest(BaseModel):
    """Request body for signing in."""

    email: str = Field(..., min_length=3, max_length=200)
    password: str = Field(..., min_length=1, max_length=200)


class IdentityResponse(BaseModel):
    """Signed-in identity."""

    uid: str
    email: str
    display_name: str | None = None

    model_config = {"from_attributes": True}


class ProfileResponse(BaseModel):
    """Account profile."""

    id: str
    email: str
    display_name: str | None = None
    degree: str | None = None
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None

    model_config = {"from_attributes": True}


class SessionResponse(BaseModel):
    """Current session snapshot."""

    is_loading: bool
    signed_in: bool
    identity: IdentityResponse | None = None
    profile: ProfileResponse | None = None


class AuthResponse(SessionResponse):
    """Session snapshot returned by sign-up and sign-in.

    ``id_token`` must be sent as ``Authorization: Bearer <id_token>`` on
    every gated request.
    """

    id_token: str | None = None


class ProfileUpdate(BaseModel):
    """Request body for completing or editing the profile."""

    degree: str | None = Field(default=None, max_length=200)
    display_name: str | None = Field(default=None, max_length=100)

    @field_validator("degree")
    @classmethod
    def degree_not_blank(cls, v: str | None) -> str:
        # Only called when degree is sent, so null here is an explicit null
        if v is None or not v.strip():
            raise ValueError("Please enter your degree")
        return v.strip()

    @model_validator(mode="after")
    def at_least_one_field(self) -> ProfileUpdate:
        if not self.model_fields_set:
            raise ValueError("Nothing to update")
        return self


# =============================================================================
# BOOK SCHEMAS
# =============================================================================


class BookCreate(BaseModel):
    """Request body for registering a book."""

    title: str = Field(..., min_length=1, max_length=200)
    author: str = Field(..., min_length=1, max_length=200)
    cover_url: str | None = Field(default=None, max_length=2000)


class BookUpdate(BaseModel):
    """Request body for editing a book; only sent fields change."""

    title: str | None = Field(default=None, min_length=1, max_length=200)
    author: str | None = Field(default=None, min_length=1, max_length=200)
    cover_url: str | None = Field(default=None, max_length=2000)


class BookResponse(BaseModel):
    """Response for a book."""

    id: str
    owner_id: str
    title: str
    author: str
    cover_url: str | None = None
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None

    model_config = {"from_attributes": True}


class BookListResponse(BaseModel):
    """Response for list of books."""

    books: list[BookResponse]
    count: int


# =============================================================================
# LECTURE SCHEMAS
# =============================================================================


class TopicSchema(BaseModel):
    """A topic covered in a lecture."""

    name: str = Field(default="", max_length=200)
    explanation: str = Field(default="", max_length=5000)
    difficulty: Difficulty = Difficulty.EASY

    model_config = {"from_attributes": True}


class LectureCreate(BaseModel):
    """Request body for logging a lecture."""

    date: dt.date
    topics: list[TopicSchema] = Field(default_factory=list)


class LectureUpdate(BaseModel):
    """Request body for editing a lecture."""

    date: dt.date | None = None
    topics: list[TopicSchema] | None = None


class LectureResponse(BaseModel):
    """Response for a lecture."""

    id: str
    owner_id: str
    book_id: str
    date: dt.date
    topics: list[TopicSchema]
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None

    model_config = {"from_attributes": True}


class LectureListResponse(BaseModel):
    """Lectures of one book plus the active selection."""

    book: BookResponse
    lectures: list[LectureResponse]
    count: int
    active_lecture_id: str | None = None


# =============================================================================
# DASHBOARD / UPLOAD / HEALTH SCHEMAS
# =============================================================================


class DashboardResponse(BaseModel):
    """Dashboard summary."""

    degree: str | None = None
    total_books: int
    lectures_this_week: int
    status: str

    model_config = {"from_attributes": True}


class CoverUploadResponse(BaseModel):
    """Public URL of an uploaded cover."""

    url: str


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    version: str = "0.1.0"
    timestamp: str = Field(
        default_factory=lambda: dt.datetime.now(dt.timezone.utc).isoformat()
    )
