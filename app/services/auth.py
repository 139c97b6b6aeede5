"""Account registration, sessions and password changes via Supabase Auth."""

from __future__ import annotations

import logging
from typing import Any

from app.core.constants import PROFILES_TABLE
from app.core.errors import AppError, AuthenticationError, ValidationError
from app.db.supabase import SupabaseClients, is_not_found
from app.models.auth import AuthUser, LoginRequest, RegisterRequest

logger = logging.getLogger(__name__)


def register(clients: SupabaseClients, payload: RegisterRequest) -> dict[str, Any]:
    """Create an account; the username is kept in the user's metadata."""
    try:
        response = clients.public.auth.sign_up(
            {
                "email": payload.email,
                "password": payload.password,
                "options": {"data": {"username": payload.username}},
            }
        )
    except Exception as exc:
        logger.warning("register_failed", extra={"error_message": str(exc)})
        raise ValidationError(str(exc) or "Registration failed") from exc

    user = response.user
    logger.info("user_registered", extra={"user_id": user.id if user else None})
    return {
        "user": {
            "id": user.id if user else None,
            "email": user.email if user else None,
        }
    }


def login(clients: SupabaseClients, payload: LoginRequest) -> dict[str, Any]:
    """Exchange email and password for a session."""
    try:
        response = clients.public.auth.sign_in_with_password(
            {"email": payload.email, "password": payload.password}
        )
    except Exception as exc:
        logger.info("login_failed", extra={"error_message": str(exc)})
        raise AuthenticationError("Invalid credentials") from exc

    user, session = response.user, response.session
    if user is None or session is None:
        raise AuthenticationError("Invalid credentials")

    return {
        "user": {"id": user.id, "email": user.email},
        "session": {
            "access_token": session.access_token,
            "refresh_token": session.refresh_token,
            "expires_at": session.expires_at,
        },
    }


def logout(clients: SupabaseClients, user: AuthUser) -> None:
    """Revoke the caller's session."""
    try:
        clients.admin.auth.admin.sign_out(user.access_token)
    except Exception as exc:
        logger.error(
            "logout_failed",
            extra={"user_id": user.id, "error_message": str(exc)},
        )
        raise AppError("Logout failed") from exc


def get_identity(clients: SupabaseClients, user: AuthUser) -> dict[str, Any]:
    """Return the caller's identity merged with their profile row.

    Without a profile row the metadata username is used and the
    timestamps are null.
    """
    profile: dict[str, Any] = {}
    try:
        result = (
            clients.admin.table(PROFILES_TABLE)
            .select("*")
            .eq("id", user.id)
            .single()
            .execute()
        )
        profile = result.data or {}
    except Exception as exc:
        if not is_not_found(exc):
            logger.error(
                "identity_profile_fetch_failed",
                extra={"user_id": user.id, "error_message": str(exc)},
            )
            raise AppError("Error fetching user profile") from exc

    return {
        "user": {
            "id": user.id,
            "email": user.email,
            "username": profile.get("username") or user.username,
            "created_at": profile.get("created_at"),
            "updated_at": profile.get("updated_at"),
        }
    }


def change_password(clients: SupabaseClients, user: AuthUser, password: str) -> None:
    try:
        clients.admin.auth.admin.update_user_by_id(user.id, {"password": password})
    except Exception as exc:
        logger.warning(
            "password_change_failed",
            extra={"user_id": user.id, "error_message": str(exc)},
        )
        raise ValidationError(str(exc) or "Password change failed") from exc
