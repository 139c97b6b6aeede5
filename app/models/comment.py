"""Pydantic models for the ``comments`` table and its API shapes."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, StringConstraints

from app.core.constants import COMMENT_MAX_LENGTH, COMMENT_MIN_LENGTH

CommentContent = Annotated[
    str,
    StringConstraints(
        strip_whitespace=True,
        min_length=COMMENT_MIN_LENGTH,
        max_length=COMMENT_MAX_LENGTH,
    ),
]
NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class CommentCreate(BaseModel):
    """Payload for POST /api/comments."""
    manga_id: NonEmptyStr
    chapter_hid: NonEmptyStr
    content: CommentContent
    parent_id: UUID | None = None


class CommentRecord(BaseModel):
    """A row of the ``comments`` table as returned by Supabase."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    manga_id: str
    chapter_hid: str
    content: str
    parent_id: str | None = None
    created_at: datetime
    updated_at: datetime


class AuthorInfo(BaseModel):
    """Display data for a comment author, taken from ``profiles``."""
    username: str | None = None
    avatar_url: str | None = None


class Comment(CommentRecord):
    """Client-facing comment with author display fields and replies."""
    username: str
    avatar_url: str | None = None
    replies: list[Comment] = Field(default_factory=list)
