"""Comment thread assembly.

Turns the flat list of comments stored for one chapter into the two-level
shape the reader UI renders: top-level comments, each carrying its direct
replies.  Only one level of nesting is materialized.  A reply whose parent
is itself a reply (or is absent from the fetched set) is dropped rather
than promoted or nested deeper.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Mapping
from typing import Any

from app.core.constants import ANONYMOUS_USERNAME
from app.models.comment import AuthorInfo, Comment, CommentRecord


def index_authors(profile_rows: Iterable[Mapping[str, Any]]) -> dict[str, AuthorInfo]:
    """Map ``profiles`` rows (``id, username, avatar_url``) by user id."""
    return {
        str(row["id"]): AuthorInfo(
            username=row.get("username"),
            avatar_url=row.get("avatar_url"),
        )
        for row in profile_rows
    }


def enrich_comment(
    record: CommentRecord | Mapping[str, Any],
    authors_by_id: Mapping[str, AuthorInfo],
) -> Comment:
    """Attach author display fields to a stored comment.

    Missing authors (or blank usernames / avatar URLs) fall back to
    ``"Anonymous"`` and ``None``.
    """
    if not isinstance(record, CommentRecord):
        record = CommentRecord.model_validate(record)
    author = authors_by_id.get(record.user_id)
    return Comment(
        **record.model_dump(),
        username=(author.username if author else None) or ANONYMOUS_USERNAME,
        avatar_url=(author.avatar_url if author else None) or None,
    )


def build_comment_threads(
    comments: Iterable[CommentRecord | Mapping[str, Any]],
    authors_by_id: Mapping[str, AuthorInfo],
) -> list[Comment]:
    """Assemble *comments* into top-level threads with sorted replies.

    Top-level comments keep the order they were given in (the caller
    fetches them newest first).  Each one's ``replies`` holds the comments
    whose ``parent_id`` is its ``id``, oldest first; ties keep their input
    order.
    """
    top_level: list[Comment] = []
    by_parent: defaultdict[str, list[Comment]] = defaultdict(list)

    for record in comments:
        comment = enrich_comment(record, authors_by_id)
        if comment.parent_id:
            by_parent[comment.parent_id].append(comment)
        else:
            top_level.append(comment)

    for comment in top_level:
        comment.replies = sorted(
            by_parent.get(comment.id, []), key=lambda reply: reply.created_at
        )

    return top_level
