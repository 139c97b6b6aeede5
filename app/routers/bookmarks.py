"""Bookmark endpoints under /api/bookmarks (all require authentication)."""

from __future__ import annotations

from typing import Any
from uuid import UUID

from fastapi import APIRouter, Query

from app.core.constants import (
    BOOKMARK_DEFAULT_LIMIT,
    BOOKMARK_MAX_LIMIT,
    BOOKMARK_SORT_COLUMNS,
)
from app.core.errors import ValidationError
from app.core.security import Clients, CurrentUser
from app.models.bookmark import (
    BookmarkCreate,
    BookmarkUpdate,
    ReadingProgressUpdate,
    ReadingStatusUpdate,
)
from app.models.enums import ReadingStatus, SortOrder
from app.services import bookmarks as bookmark_service

router = APIRouter()


@router.get("")
def get_bookmarks(
    user: CurrentUser,
    clients: Clients,
    page: int = Query(1, ge=1),
    limit: int = Query(BOOKMARK_DEFAULT_LIMIT, ge=1, le=BOOKMARK_MAX_LIMIT),
    sort: str = Query("updated_at"),
    order: SortOrder = Query(SortOrder.desc),
    reading_status: ReadingStatus | None = Query(None),
) -> dict[str, Any]:
    """List the caller's bookmarks, paginated and optionally filtered."""
    if sort not in BOOKMARK_SORT_COLUMNS:
        raise ValidationError(
            "Validation error",
            errors=[
                {
                    "field": "sort",
                    "message": f"Sort must be one of: {', '.join(sorted(BOOKMARK_SORT_COLUMNS))}",
                }
            ],
        )

    bookmarks, pagination = bookmark_service.list_bookmarks(
        clients.admin, user, page, limit, sort, order, reading_status
    )
    return {
        "success": True,
        "data": [bookmark.model_dump(mode="json") for bookmark in bookmarks],
        "pagination": pagination.model_dump(),
    }


@router.post("", status_code=201)
def add_bookmark(
    body: BookmarkCreate, user: CurrentUser, clients: Clients
) -> dict[str, Any]:
    bookmark = bookmark_service.add_bookmark(clients.admin, user, body)
    return {
        "success": True,
        "message": "Bookmark added successfully",
        "data": bookmark.model_dump(mode="json"),
    }


@router.get("/check/{manga_id}")
def check_bookmark(manga_id: str, user: CurrentUser, clients: Clients) -> dict[str, Any]:
    data = bookmark_service.check_bookmark(clients.admin, user, manga_id)
    return {"success": True, "isBookmarked": data is not None, "bookmarkData": data}


@router.put("/{bookmark_id}")
def update_bookmark(
    bookmark_id: UUID, body: BookmarkUpdate, user: CurrentUser, clients: Clients
) -> dict[str, Any]:
    bookmark = bookmark_service.patch_progress(
        clients.admin, user, str(bookmark_id), body
    )
    return {
        "success": True,
        "message": "Bookmark updated successfully",
        "data": bookmark.model_dump(mode="json"),
    }


@router.put("/{bookmark_id}/progress")
def update_reading_progress(
    bookmark_id: UUID,
    body: ReadingProgressUpdate,
    user: CurrentUser,
    clients: Clients,
) -> dict[str, Any]:
    bookmark = bookmark_service.record_progress(
        clients.admin,
        user,
        str(bookmark_id),
        body.last_read_chapter,
        body.last_read_chapter_hid,
        action="update reading progress",
    )
    return {
        "success": True,
        "message": "Reading progress updated successfully",
        "data": bookmark.model_dump(mode="json"),
    }


@router.put("/{bookmark_id}/status")
def update_reading_status(
    bookmark_id: UUID,
    body: ReadingStatusUpdate,
    user: CurrentUser,
    clients: Clients,
) -> dict[str, Any]:
    bookmark = bookmark_service.set_reading_status(
        clients.admin, user, str(bookmark_id), body.reading_status
    )
    return {
        "success": True,
        "message": "Reading status updated successfully",
        "data": bookmark.model_dump(mode="json"),
    }


@router.delete("/{bookmark_id}")
def remove_bookmark(
    bookmark_id: UUID, user: CurrentUser, clients: Clients
) -> dict[str, Any]:
    bookmark_service.remove_bookmark(clients.admin, user, str(bookmark_id))
    return {"success": True, "message": "Bookmark removed successfully"}
