"""Profile endpoints under /api/profile, including avatar upload.

The profile row is created on first write, so these endpoints work for
users who registered but never saved a profile.
"""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Depends, File, UploadFile

from app.core.config import Settings, get_settings
from app.core.errors import ValidationError
from app.core.security import Clients, CurrentUser
from app.models.profile import ProfileUpdate
from app.services import profiles as profile_service

router = APIRouter()


@router.get("")
def get_profile(user: CurrentUser, clients: Clients) -> dict[str, Any]:
    profile = profile_service.get_profile(clients.admin, user)
    return {"success": True, "data": {"profile": profile.model_dump(mode="json")}}


@router.put("")
def update_profile(
    body: ProfileUpdate, user: CurrentUser, clients: Clients
) -> dict[str, Any]:
    profile = profile_service.save_profile(clients.admin, user, body)
    return {
        "success": True,
        "message": "Profile updated successfully",
        "data": {"profile": profile.model_dump(mode="json")},
    }


@router.post("/upload-image")
def upload_image(
    user: CurrentUser,
    clients: Clients,
    config: Annotated[Settings, Depends(get_settings)],
    image: Annotated[UploadFile | None, File()] = None,
) -> dict[str, Any]:
    """Upload a new avatar (multipart field ``image``)."""
    if image is None:
        raise ValidationError("No file uploaded")

    # Read one byte past the limit so oversize files are detected
    # without buffering all of them
    data = image.file.read(config.AVATAR_MAX_BYTES + 1)
    result = profile_service.upload_avatar(
        clients.admin,
        config,
        user,
        data,
        image.filename,
        image.content_type,
    )
    return {
        "success": True,
        "message": "Profile image uploaded successfully",
        "data": {
            "avatar_url": result["avatar_url"],
            "profile": result["profile"].model_dump(mode="json"),
        },
    }


@router.delete("/delete-image")
def delete_image(
    user: CurrentUser,
    clients: Clients,
    config: Annotated[Settings, Depends(get_settings)],
) -> dict[str, Any]:
    profile = profile_service.delete_avatar(clients.admin, config, user)
    return {
        "success": True,
        "message": "Profile image deleted successfully",
        "data": {"profile": profile.model_dump(mode="json")},
    }
