"""Bookmark CRUD and reading progress.

Every query is scoped by the caller's ``user_id``, so a bookmark id that
belongs to someone else behaves exactly like a missing one.  Creation is
an upsert on ``(user_id, manga_id)``: bookmarking the same manga twice
overwrites the first row instead of duplicating it.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime, timezone
from typing import Any

from supabase import Client

from app.core.constants import BOOKMARK_CONFLICT_COLUMNS, BOOKMARKS_TABLE
from app.core.errors import AppError, NotFoundError
from app.db.supabase import is_not_found
from app.models.auth import AuthUser
from app.models.bookmark import Bookmark, BookmarkCreate, BookmarkUpdate, Pagination
from app.models.enums import ReadingStatus, SortOrder

logger = logging.getLogger(__name__)

_OPTIONAL_COLUMNS = {"manga_cover_b2key", "last_read_chapter", "last_read_chapter_hid"}


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def list_bookmarks(
    client: Client,
    user: AuthUser,
    page: int,
    limit: int,
    sort: str,
    order: SortOrder,
    reading_status: ReadingStatus | None = None,
) -> tuple[list[Bookmark], Pagination]:
    """Return one page of the caller's bookmarks and the pagination info."""
    offset = (page - 1) * limit

    query = (
        client.table(BOOKMARKS_TABLE)
        .select("*", count="exact")
        .eq("user_id", user.id)
    )
    if reading_status is not None:
        query = query.eq("reading_status", reading_status.value)

    try:
        result = (
            query.order(sort, desc=order == SortOrder.desc)
            .range(offset, offset + limit - 1)
            .execute()
        )
    except Exception as exc:
        logger.error(
            "bookmarks_fetch_failed",
            extra={"user_id": user.id, "error_message": str(exc)},
        )
        raise AppError("Failed to fetch bookmarks") from exc

    total = result.count or 0
    bookmarks = [Bookmark.model_validate(row) for row in result.data or []]
    return bookmarks, Pagination(
        page=page,
        limit=limit,
        total=total,
        pages=math.ceil(total / limit),
    )


def add_bookmark(client: Client, user: AuthUser, payload: BookmarkCreate) -> Bookmark:
    """Create or overwrite the caller's bookmark for ``payload.manga_id``.

    Optional columns the client left out are not sent, so re-bookmarking a
    manga keeps whatever cover or chapter was stored before.
    """
    row: dict[str, Any] = {
        **payload.model_dump(mode="json", exclude=_OPTIONAL_COLUMNS),
        **payload.model_dump(mode="json", include=_OPTIONAL_COLUMNS, exclude_unset=True),
        "user_id": user.id,
    }
    if user.username:
        row["username"] = user.username
    if payload.last_read_chapter:
        row["last_read_at"] = _now()

    try:
        result = (
            client.table(BOOKMARKS_TABLE)
            .upsert(row, on_conflict=BOOKMARK_CONFLICT_COLUMNS)
            .execute()
        )
    except Exception as exc:
        logger.error(
            "bookmark_upsert_failed",
            extra={
                "user_id": user.id,
                "manga_id": payload.manga_id,
                "error_message": str(exc),
            },
        )
        raise AppError("Failed to add bookmark") from exc

    if not result.data:
        raise AppError("Failed to add bookmark")

    logger.info(
        "bookmark_saved",
        extra={"user_id": user.id, "manga_id": payload.manga_id},
    )
    return Bookmark.model_validate(result.data[0])


def update_bookmark(
    client: Client,
    user: AuthUser,
    bookmark_id: str,
    changes: dict[str, Any],
    action: str = "update bookmark",
) -> Bookmark:
    """Apply *changes* to one of the caller's bookmarks.

    *action* names the operation in error messages, e.g.
    ``"update reading progress"``.
    """
    try:
        result = (
            client.table(BOOKMARKS_TABLE)
            .update(changes)
            .eq("id", bookmark_id)
            .eq("user_id", user.id)
            .execute()
        )
    except Exception as exc:
        logger.error(
            "bookmark_update_failed",
            extra={
                "bookmark_id": bookmark_id,
                "action": action,
                "error_message": str(exc),
            },
        )
        raise AppError(f"Failed to {action}") from exc

    if not result.data:
        raise NotFoundError("Bookmark not found")
    return Bookmark.model_validate(result.data[0])


def record_progress(
    client: Client,
    user: AuthUser,
    bookmark_id: str,
    last_read_chapter: str | None,
    last_read_chapter_hid: str | None,
    action: str = "update reading progress",
) -> Bookmark:
    """Store the last chapter read and stamp ``last_read_at``."""
    return update_bookmark(
        client,
        user,
        bookmark_id,
        {
            "last_read_chapter": last_read_chapter,
            "last_read_chapter_hid": last_read_chapter_hid,
            "last_read_at": _now(),
        },
        action=action,
    )


def patch_progress(
    client: Client, user: AuthUser, bookmark_id: str, payload: BookmarkUpdate
) -> Bookmark:
    """Write only the progress fields present in *payload*, plus ``last_read_at``."""
    changes: dict[str, Any] = payload.model_dump(exclude_unset=True)
    changes["last_read_at"] = _now()
    return update_bookmark(client, user, bookmark_id, changes)


def set_reading_status(
    client: Client, user: AuthUser, bookmark_id: str, status: ReadingStatus
) -> Bookmark:
    return update_bookmark(
        client,
        user,
        bookmark_id,
        {"reading_status": status.value},
        action="update reading status",
    )


def remove_bookmark(client: Client, user: AuthUser, bookmark_id: str) -> None:
    """Delete one of the caller's bookmarks."""
    try:
        existing = (
            client.table(BOOKMARKS_TABLE)
            .select("id")
            .eq("id", bookmark_id)
            .eq("user_id", user.id)
            .single()
            .execute()
        )
    except Exception as exc:
        if not is_not_found(exc):
            logger.warning(
                "bookmark_lookup_failed",
                extra={"bookmark_id": bookmark_id, "error_message": str(exc)},
            )
        raise NotFoundError("Bookmark not found") from exc

    if not existing.data:
        raise NotFoundError("Bookmark not found")

    try:
        (
            client.table(BOOKMARKS_TABLE)
            .delete()
            .eq("id", bookmark_id)
            .eq("user_id", user.id)
            .execute()
        )
    except Exception as exc:
        logger.error(
            "bookmark_delete_failed",
            extra={"bookmark_id": bookmark_id, "error_message": str(exc)},
        )
        raise AppError("Failed to remove bookmark") from exc

    logger.info("bookmark_removed", extra={"bookmark_id": bookmark_id})


def check_bookmark(client: Client, user: AuthUser, manga_id: str) -> dict[str, Any] | None:
    """Return ``id, last_read_chapter, last_read_at`` or None if not bookmarked."""
    try:
        result = (
            client.table(BOOKMARKS_TABLE)
            .select("id, last_read_chapter, last_read_at")
            .eq("user_id", user.id)
            .eq("manga_id", manga_id)
            .single()
            .execute()
        )
    except Exception as exc:
        if is_not_found(exc):
            return None
        logger.error(
            "bookmark_check_failed",
            extra={"manga_id": manga_id, "error_message": str(exc)},
        )
        raise AppError("Failed to check bookmark status") from exc

    return result.data or None
