"""Account endpoints under /api/users (all require authentication)."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter

from app.core.security import Clients, CurrentUser
from app.models.auth import ChangePasswordRequest
from app.models.profile import UserProfileUpdate
from app.services import auth as auth_service
from app.services import profiles as profile_service

router = APIRouter()


@router.get("/profile")
def get_profile(user: CurrentUser, clients: Clients) -> dict[str, Any]:
    profile = profile_service.get_user_profile(clients.admin, user)
    return {"success": True, "data": {"profile": profile.model_dump(mode="json")}}


@router.put("/profile")
def update_profile(
    body: UserProfileUpdate, user: CurrentUser, clients: Clients
) -> dict[str, Any]:
    profile = profile_service.update_user_profile(clients.admin, user, body)
    return {
        "success": True,
        "message": "Profile updated successfully",
        "data": {"profile": profile.model_dump(mode="json")},
    }


@router.put("/change-password")
def change_password(
    body: ChangePasswordRequest, user: CurrentUser, clients: Clients
) -> dict[str, Any]:
    auth_service.change_password(clients, user, body.password)
    return {"success": True, "message": "Password changed successfully"}
