"""Chapter comment endpoints.

GET  /manga/{manga_id}/chapter/{chapter_hid} -- public, threaded.
POST /                                       -- add a comment or reply.
DELETE /{comment_id}                         -- author only.
"""

from __future__ import annotations

from typing import Annotated, Any
from uuid import UUID

from fastapi import APIRouter, Path

from app.core.security import Clients, CurrentUser
from app.models.comment import CommentCreate
from app.services import comments as comment_service

router = APIRouter()

PathId = Annotated[str, Path(min_length=1)]


@router.get("/manga/{manga_id}/chapter/{chapter_hid}")
def get_comments(
    manga_id: PathId, chapter_hid: PathId, clients: Clients
) -> dict[str, Any]:
    threads = comment_service.get_chapter_comments(
        clients.admin, manga_id, chapter_hid
    )
    return {
        "success": True,
        "data": [comment.model_dump(mode="json") for comment in threads],
    }


@router.post("", status_code=201)
def add_comment(
    body: CommentCreate, user: CurrentUser, clients: Clients
) -> dict[str, Any]:
    comment = comment_service.add_comment(clients.admin, user, body)
    return {
        "success": True,
        "message": "Comment added successfully",
        "comment": comment.model_dump(mode="json"),
    }


@router.delete("/{comment_id}")
def delete_comment(
    comment_id: UUID, user: CurrentUser, clients: Clients
) -> dict[str, Any]:
    comment_service.delete_comment(clients.admin, user, str(comment_id))
    return {"success": True, "message": "Comment deleted successfully"}
