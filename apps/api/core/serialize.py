"""Helpers to serialize Hasura rows to API schema dicts."""

from __future__ import annotations

from typing import Any

from fastapi import status

from .deps import api_error


def _split_palates(raw: Any) -> list[str]:
    if not raw:
        return []
    if isinstance(raw, str):
        return [p.strip() for p in raw.split("|") if p.strip()]
    return [str(p) for p in raw]


def serialize_review(row: dict, liked_ids: set[int] | None = None) -> dict:
    author = row.get("author") or {}
    parent_id = row.get("parent_review_id")
    return {
        "id": str(row["id"]),
        "title": row.get("title"),
        "content": row.get("content") or "",
        "authorId": str(row["author_id"]) if row.get("author_id") is not None else None,
        "authorName": author.get("display_name"),
        "authorImage": author.get("image"),
        "likesCount": max(0, int(row.get("likes_count") or 0)),
        "userLiked": bool(liked_ids and row["id"] in liked_ids),
        "createdAt": row.get("created_at"),
        "parentId": str(parent_id) if parent_id is not None else None,
    }


def serialize_follow_user(row: dict, followed_ids: set[int] | None = None) -> dict:
    return {
        "id": str(row["id"]),
        "name": row.get("display_name") or "",
        "image": row.get("image"),
        "palates": _split_palates(row.get("palates")),
        "isFollowing": bool(followed_ids and row["id"] in followed_ids),
    }


def parse_cursor(cursor: str | None) -> int:
    """Cursors are stringified row offsets."""
    if cursor is None or cursor == "":
        return 0
    try:
        offset = int(cursor)
    except ValueError:
        offset = -1
    if offset < 0:
        raise api_error(status.HTTP_400_BAD_REQUEST, "invalid_cursor", "Invalid cursor")
    return offset


def page_payload(items: list[dict], limit: int, offset: int) -> dict:
    """Build a page from ``limit + 1`` fetched items; the extra one signals more."""
    has_more = len(items) > limit
    items = items[:limit]
    return {
        "items": items,
        "nextCursor": str(offset + len(items)) if has_more else None,
        "hasMore": has_more,
    }
