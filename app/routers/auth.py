"""Authentication endpoints.

POST /register, POST /login, POST /logout, GET /me.  Login also drops the
access token into an http-only cookie so browser clients can skip the
bearer header.
"""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Response

from app.core.config import Settings, get_settings
from app.core.security import Clients, CurrentUser
from app.models.auth import LoginRequest, RegisterRequest
from app.services import auth as auth_service

router = APIRouter()


@router.post("/register", status_code=201)
def register(body: RegisterRequest, clients: Clients) -> dict[str, Any]:
    data = auth_service.register(clients, body)
    return {
        "success": True,
        "message": "Registration successful. Please check your email for verification.",
        "data": data,
    }


@router.post("/login")
def login(
    body: LoginRequest,
    response: Response,
    clients: Clients,
    config: Annotated[Settings, Depends(get_settings)],
) -> dict[str, Any]:
    data = auth_service.login(clients, body)
    response.set_cookie(
        config.AUTH_COOKIE_NAME,
        data["session"]["access_token"],
        httponly=True,
        secure=not config.is_development,
        samesite="lax",
    )
    return {"success": True, "message": "Login successful", "data": data}


@router.post("/logout")
def logout(
    user: CurrentUser,
    response: Response,
    clients: Clients,
    config: Annotated[Settings, Depends(get_settings)],
) -> dict[str, Any]:
    auth_service.logout(clients, user)
    response.delete_cookie(config.AUTH_COOKIE_NAME)
    return {"success": True, "message": "Logged out successfully"}


@router.get("/me")
def me(user: CurrentUser, clients: Clients) -> dict[str, Any]:
    """Return the caller's identity and profile basics."""
    return {"success": True, "data": auth_service.get_identity(clients, user)}
