"""Pydantic models for the ``profiles`` table and profile endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated

from pydantic import AnyHttpUrl, BaseModel, ConfigDict, StringConstraints

from app.core.constants import (
    BIO_MAX_LENGTH,
    USERNAME_MAX_LENGTH,
    USERNAME_MIN_LENGTH,
    USERNAME_PATTERN,
)

Bio = Annotated[str, StringConstraints(max_length=BIO_MAX_LENGTH)]


class Profile(BaseModel):
    """Full profile record returned from the database."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    username: str | None = None
    email: str | None = None
    bio: str | None = None
    avatar_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ProfileUpdate(BaseModel):
    """Payload for PUT /api/profile (username is mandatory)."""
    username: Annotated[
        str,
        StringConstraints(
            min_length=USERNAME_MIN_LENGTH,
            max_length=USERNAME_MAX_LENGTH,
            pattern=USERNAME_PATTERN,
        ),
    ]
    bio: Bio | None = None


class UserProfileUpdate(BaseModel):
    """Payload for PUT /api/users/profile (partial update)."""
    username: Annotated[str, StringConstraints(min_length=USERNAME_MIN_LENGTH)] | None = None
    bio: Bio | None = None
    avatar_url: AnyHttpUrl | None = None
