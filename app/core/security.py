"""Request authentication.

``get_current_user`` resolves the caller's access token (bearer header
first, then the auth cookie) against Supabase Auth and yields a typed
``AuthUser`` for protected handlers.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import Depends, Request

from app.core.config import Settings, get_settings
from app.core.errors import AuthenticationError
from app.db.supabase import SupabaseClients, get_clients
from app.models.auth import AuthUser

logger = logging.getLogger(__name__)


def get_token(request: Request, config: Settings) -> str | None:
    """Extract the access token from the Authorization header or cookie."""
    auth_header = request.headers.get("Authorization", "")
    parts = auth_header.split()
    if len(parts) == 2 and parts[0].lower() == "bearer":
        return parts[1]
    return request.cookies.get(config.AUTH_COOKIE_NAME) or None


def get_current_user(
    request: Request,
    clients: Annotated[SupabaseClients, Depends(get_clients)],
    config: Annotated[Settings, Depends(get_settings)],
) -> AuthUser:
    token = get_token(request, config)
    if not token:
        raise AuthenticationError("You are not logged in! Please log in to get access.")

    try:
        response = clients.public.auth.get_user(token)
    except Exception as exc:
        logger.warning(
            "token_verification_failed",
            extra={"path": request.url.path, "error_message": str(exc)},
        )
        raise AuthenticationError("Invalid or expired token.") from exc

    user = response.user if response else None
    if user is None:
        raise AuthenticationError("Invalid or expired token.")

    metadata = user.user_metadata or {}
    return AuthUser(
        id=str(user.id),
        email=user.email,
        username=metadata.get("username"),
        access_token=token,
    )


CurrentUser = Annotated[AuthUser, Depends(get_current_user)]
Clients = Annotated[SupabaseClients, Depends(get_clients)]
