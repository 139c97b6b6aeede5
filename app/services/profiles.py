"""Profile reads and writes, including avatar storage.

Profiles live in the ``profiles`` table keyed by the auth user id.  A row
may not exist yet for a freshly registered user, so the ``/api/profile``
operations create it on first write and synthesize a basic profile on
read.  Avatars are stored in the ``AVATAR_BUCKET`` under
``<user_id>/profile-<epoch-ms>.<ext>``.
"""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import Any

from supabase import Client

from app.core.config import Settings
from app.core.constants import PROFILES_TABLE
from app.core.errors import AppError, NotFoundError, ValidationError
from app.db.supabase import is_not_found
from app.models.auth import AuthUser
from app.models.profile import Profile, ProfileUpdate, UserProfileUpdate

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _fetch_profile(client: Client, user_id: str, columns: str = "*") -> dict[str, Any] | None:
    """Return the profile row, or None when the user has none yet."""
    try:
        result = (
            client.table(PROFILES_TABLE)
            .select(columns)
            .eq("id", user_id)
            .single()
            .execute()
        )
    except Exception as exc:
        if is_not_found(exc):
            return None
        logger.error(
            "profile_fetch_failed",
            extra={"user_id": user_id, "error_message": str(exc)},
        )
        raise AppError("Error fetching profile") from exc
    return result.data or None


def _first_row(result: Any, message: str) -> dict[str, Any]:
    if not result.data:
        raise AppError(message)
    return result.data[0]


def _insert_profile(client: Client, row: dict[str, Any]) -> Profile:
    try:
        result = client.table(PROFILES_TABLE).insert(row).execute()
    except Exception as exc:
        logger.error(
            "profile_create_failed",
            extra={"user_id": row["id"], "error_message": str(exc)},
        )
        raise AppError("Error creating profile") from exc
    logger.info("profile_created", extra={"user_id": row["id"]})
    return Profile.model_validate(_first_row(result, "Error creating profile"))


def _update_profile(client: Client, user_id: str, changes: dict[str, Any]) -> Profile:
    try:
        result = (
            client.table(PROFILES_TABLE)
            .update({**changes, "updated_at": _now()})
            .eq("id", user_id)
            .execute()
        )
    except Exception as exc:
        logger.error(
            "profile_update_failed",
            extra={"user_id": user_id, "error_message": str(exc)},
        )
        raise AppError("Error updating profile") from exc
    if not result.data:
        raise NotFoundError("Profile not found")
    return Profile.model_validate(result.data[0])


# ---------------------------------------------------------------------------
# /api/profile
# ---------------------------------------------------------------------------


def get_profile(client: Client, user: AuthUser) -> Profile:
    """Return the caller's profile, or a basic one built from their identity."""
    row = _fetch_profile(client, user.id)
    if row is None:
        logger.info("profile_missing_using_identity", extra={"user_id": user.id})
        now = datetime.now(timezone.utc)
        return Profile(
            id=user.id,
            username=user.display_name,
            email=user.email,
            created_at=now,
            updated_at=now,
        )
    return Profile.model_validate(row)


def save_profile(client: Client, user: AuthUser, payload: ProfileUpdate) -> Profile:
    """Create the caller's profile or update username and bio."""
    if _fetch_profile(client, user.id, "id") is None:
        return _insert_profile(
            client,
            {
                "id": user.id,
                "username": payload.username,
                "email": user.email,
                "bio": payload.bio,
            },
        )
    return _update_profile(
        client, user.id, {"username": payload.username, "bio": payload.bio}
    )


def _avatar_path(user_id: str, filename: str | None, content_type: str) -> str:
    if filename and "." in filename:
        extension = filename.rsplit(".", 1)[-1].lower()
    else:
        extension = content_type.split("/", 1)[-1]
    return f"{user_id}/profile-{int(time.time() * 1000)}.{extension}"


def upload_avatar(
    client: Client,
    config: Settings,
    user: AuthUser,
    data: bytes,
    filename: str | None,
    content_type: str | None,
) -> dict[str, Any]:
    """Store an avatar image and point the caller's profile at it."""
    if not content_type or not content_type.startswith("image/"):
        raise ValidationError("Only image files are allowed")
    if len(data) > config.AVATAR_MAX_BYTES:
        raise ValidationError("File too large")

    path = _avatar_path(user.id, filename, content_type)
    bucket = client.storage.from_(config.AVATAR_BUCKET)
    try:
        bucket.upload(path, data, {"content-type": content_type, "upsert": "true"})
    except Exception as exc:
        logger.error(
            "avatar_upload_failed",
            extra={"user_id": user.id, "path": path, "error_message": str(exc)},
        )
        raise AppError("Failed to upload image") from exc

    avatar_url = bucket.get_public_url(path)

    if _fetch_profile(client, user.id, "id") is None:
        profile = _insert_profile(
            client,
            {
                "id": user.id,
                "username": user.display_name,
                "email": user.email,
                "avatar_url": avatar_url,
            },
        )
    else:
        profile = _update_profile(client, user.id, {"avatar_url": avatar_url})

    logger.info("avatar_uploaded", extra={"user_id": user.id, "path": path})
    return {"avatar_url": avatar_url, "profile": profile}


def delete_avatar(client: Client, config: Settings, user: AuthUser) -> Profile:
    """Remove the caller's avatar from storage and clear it on the profile."""
    row = _fetch_profile(client, user.id, "avatar_url")
    if row is None:
        raise NotFoundError("Profile not found")

    avatar_url = row.get("avatar_url")
    if not avatar_url:
        raise ValidationError("No profile image to delete")

    # Public URLs end with the object name inside the user's folder
    object_name = avatar_url.split("?", 1)[0].rstrip("/").rsplit("/", 1)[-1]
    path = f"{user.id}/{object_name}"
    try:
        client.storage.from_(config.AVATAR_BUCKET).remove([path])
    except Exception as exc:
        logger.error(
            "avatar_delete_failed",
            extra={"user_id": user.id, "path": path, "error_message": str(exc)},
        )
        raise AppError("Failed to delete image") from exc

    return _update_profile(client, user.id, {"avatar_url": None})


# ---------------------------------------------------------------------------
# /api/users/profile
# ---------------------------------------------------------------------------


def get_user_profile(client: Client, user: AuthUser) -> Profile:
    row = _fetch_profile(client, user.id)
    if row is None:
        raise NotFoundError("Profile not found")
    return Profile.model_validate(row)


def update_user_profile(
    client: Client, user: AuthUser, payload: UserProfileUpdate
) -> Profile:
    """Apply only the fields present in *payload*."""
    changes = payload.model_dump(mode="json", exclude_unset=True)
    return _update_profile(client, user.id, changes)
