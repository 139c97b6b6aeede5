"""Request models for auth endpoints and the authenticated user context."""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, EmailStr, Field, StringConstraints

from app.core.constants import PASSWORD_MIN_LENGTH, USERNAME_MIN_LENGTH


class RegisterRequest(BaseModel):
    email: EmailStr
    password: Annotated[str, StringConstraints(min_length=PASSWORD_MIN_LENGTH)]
    username: Annotated[
        str, StringConstraints(strip_whitespace=True, min_length=USERNAME_MIN_LENGTH)
    ]


class LoginRequest(BaseModel):
    email: EmailStr
    password: Annotated[str, StringConstraints(min_length=1)]


class ChangePasswordRequest(BaseModel):
    password: Annotated[str, StringConstraints(min_length=PASSWORD_MIN_LENGTH)]


class AuthUser(BaseModel):
    """Identity of the caller, resolved from their access token.

    Produced by ``get_current_user`` and passed to every protected handler.
    """
    id: str
    email: str | None = None
    username: str | None = None
    access_token: str = Field(repr=False)

    @property
    def display_name(self) -> str | None:
        return self.username or self.email
