"""Pydantic models for the ``bookmarks`` table."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, StringConstraints

from app.core.constants import (
    DEFAULT_MANGA_COUNTRY,
    DEFAULT_MANGA_STATUS,
    MANGA_STATUS_MAX,
    MANGA_STATUS_MIN,
)
from app.models.enums import ReadingStatus

Required = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class BookmarkCreate(BaseModel):
    """Payload for POST /api/bookmarks."""
    manga_id: Required
    manga_hid: Required
    manga_title: Required
    manga_slug: Required
    manga_cover_b2key: str | None = None
    manga_status: int = Field(
        default=DEFAULT_MANGA_STATUS, ge=MANGA_STATUS_MIN, le=MANGA_STATUS_MAX
    )
    manga_country: Annotated[str, StringConstraints(min_length=2, max_length=2)] = (
        DEFAULT_MANGA_COUNTRY
    )
    last_read_chapter: str | None = None
    last_read_chapter_hid: str | None = None
    reading_status: ReadingStatus = ReadingStatus.plan_to_read


class BookmarkUpdate(BaseModel):
    """Payload for PUT /api/bookmarks/{id}."""
    last_read_chapter: str | None = None
    last_read_chapter_hid: str | None = None


class ReadingProgressUpdate(BaseModel):
    """Payload for PUT /api/bookmarks/{id}/progress."""
    last_read_chapter: Required
    last_read_chapter_hid: Required


class ReadingStatusUpdate(BaseModel):
    """Payload for PUT /api/bookmarks/{id}/status."""
    reading_status: ReadingStatus


class Bookmark(BaseModel):
    """Full bookmark record returned from the database."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    username: str | None = None
    manga_id: str
    manga_hid: str
    manga_title: str
    manga_slug: str
    manga_cover_b2key: str | None = None
    manga_status: int = DEFAULT_MANGA_STATUS
    manga_country: str = DEFAULT_MANGA_COUNTRY
    last_read_chapter: str | None = None
    last_read_chapter_hid: str | None = None
    last_read_at: datetime | None = None
    reading_status: ReadingStatus = ReadingStatus.plan_to_read
    created_at: datetime | None = None
    updated_at: datetime | None = None


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int
