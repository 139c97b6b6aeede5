"""Chapter comment reads and writes.

Reads fetch the chapter's comments newest first, look up the authors'
profiles in a single ``in_`` query and hand both to
``build_comment_threads``.  Writes are restricted to the authenticated
caller: anyone may reply, only the author may delete.
"""

from __future__ import annotations

import logging
from typing import Any

from supabase import Client

from app.core.constants import COMMENT_COLUMNS, COMMENTS_TABLE, PROFILES_TABLE
from app.core.errors import AppError, ForbiddenError, NotFoundError
from app.db.supabase import is_not_found
from app.models.auth import AuthUser
from app.models.comment import AuthorInfo, Comment, CommentCreate
from app.services.comment_threads import (
    build_comment_threads,
    enrich_comment,
    index_authors,
)

logger = logging.getLogger(__name__)


def _fetch_authors(client: Client, user_ids: list[str]) -> dict[str, AuthorInfo]:
    result = (
        client.table(PROFILES_TABLE)
        .select("id, username, avatar_url")
        .in_("id", user_ids)
        .execute()
    )
    return index_authors(result.data or [])


def get_chapter_comments(
    client: Client, manga_id: str, chapter_hid: str
) -> list[Comment]:
    """Return the threaded comments of one chapter."""
    try:
        result = (
            client.table(COMMENTS_TABLE)
            .select(COMMENT_COLUMNS)
            .eq("manga_id", manga_id)
            .eq("chapter_hid", chapter_hid)
            .order("created_at", desc=True)
            .execute()
        )
    except Exception as exc:
        logger.error(
            "comments_fetch_failed",
            extra={
                "manga_id": manga_id,
                "chapter_hid": chapter_hid,
                "error_message": str(exc),
            },
        )
        raise AppError("Failed to fetch comments") from exc

    rows: list[dict[str, Any]] = result.data or []
    if not rows:
        return []

    user_ids = list(dict.fromkeys(row["user_id"] for row in rows))
    try:
        authors = _fetch_authors(client, user_ids)
    except Exception as exc:
        logger.error(
            "comment_authors_fetch_failed",
            extra={"user_count": len(user_ids), "error_message": str(exc)},
        )
        raise AppError("Failed to fetch user profiles") from exc

    return build_comment_threads(rows, authors)


def _ensure_parent_exists(client: Client, parent_id: str) -> None:
    try:
        result = (
            client.table(COMMENTS_TABLE)
            .select("id")
            .eq("id", parent_id)
            .single()
            .execute()
        )
    except Exception as exc:
        if not is_not_found(exc):
            logger.warning(
                "parent_comment_lookup_failed",
                extra={"parent_id": parent_id, "error_message": str(exc)},
            )
        raise NotFoundError("Parent comment not found") from exc

    if not result.data:
        raise NotFoundError("Parent comment not found")


def add_comment(client: Client, user: AuthUser, payload: CommentCreate) -> Comment:
    """Insert a comment authored by *user* and return it enriched."""
    parent_id = str(payload.parent_id) if payload.parent_id else None
    if parent_id:
        _ensure_parent_exists(client, parent_id)

    try:
        result = (
            client.table(COMMENTS_TABLE)
            .insert(
                {
                    "user_id": user.id,
                    "manga_id": payload.manga_id,
                    "chapter_hid": payload.chapter_hid,
                    "content": payload.content,
                    "parent_id": parent_id,
                }
            )
            .execute()
        )
    except Exception as exc:
        logger.error(
            "comment_insert_failed",
            extra={"user_id": user.id, "error_message": str(exc)},
        )
        raise AppError("Failed to add comment") from exc

    if not result.data:
        raise AppError("Failed to add comment")

    # A missing author profile only degrades the display fields
    authors: dict[str, AuthorInfo] = {}
    try:
        authors = _fetch_authors(client, [user.id])
    except Exception as exc:
        logger.error(
            "comment_author_fetch_failed",
            extra={"user_id": user.id, "error_message": str(exc)},
        )

    comment = enrich_comment(result.data[0], authors)
    logger.info(
        "comment_added",
        extra={"comment_id": comment.id, "parent_id": parent_id},
    )
    return comment


def delete_comment(client: Client, user: AuthUser, comment_id: str) -> None:
    """Delete *comment_id* if *user* wrote it."""
    try:
        result = (
            client.table(COMMENTS_TABLE)
            .select("user_id")
            .eq("id", comment_id)
            .single()
            .execute()
        )
    except Exception as exc:
        if not is_not_found(exc):
            logger.warning(
                "comment_lookup_failed",
                extra={"comment_id": comment_id, "error_message": str(exc)},
            )
        raise NotFoundError("Comment not found") from exc

    if not result.data:
        raise NotFoundError("Comment not found")

    if result.data["user_id"] != user.id:
        raise ForbiddenError("Not authorized to delete this comment")

    try:
        client.table(COMMENTS_TABLE).delete().eq("id", comment_id).execute()
    except Exception as exc:
        logger.error(
            "comment_delete_failed",
            extra={"comment_id": comment_id, "error_message": str(exc)},
        )
        raise AppError("Failed to delete comment") from exc

    logger.info("comment_deleted", extra={"comment_id": comment_id})
