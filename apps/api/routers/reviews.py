from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Query, status
from pydantic import TypeAdapter

from ..core import queries
from ..core.config import settings
from ..core.deps import api_error, get_current_user_id, get_hasura, get_optional_user_id
from ..core.hasura import HasuraClient
from ..core.serialize import page_payload, parse_cursor, serialize_review
from ..schemas.review import CommentOut, CreateCommentRequest, LikeStateOut, ReviewOut, ReviewPageOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reviews", tags=["reviews"])

_TIMESTAMP = TypeAdapter(datetime)


async def _get_review_or_404(hasura: HasuraClient, review_id: int) -> dict:
    data = await hasura.execute(queries.REVIEW_EXISTS, {"reviewId": review_id})
    review = data.get("restaurant_reviews_by_pk")
    if review is None:
        raise api_error(status.HTTP_404_NOT_FOUND, "review_not_found", "Review not found")
    return review


async def _like_state(hasura: HasuraClient, review_id: int, user_id: int) -> dict:
    data = await hasura.execute(queries.LIKE_STATE, {"reviewId": review_id, "userId": user_id})
    count = data["total"]["aggregate"]["count"]
    await hasura.execute(queries.UPDATE_LIKES_COUNT, {"reviewId": review_id, "count": count})
    return {"userLiked": bool(data["mine"]), "likesCount": count}


async def liked_review_ids(
    hasura: HasuraClient, user_id: int | None, rows: list[dict]
) -> set[int]:
    if user_id is None or not rows:
        return set()
    data = await hasura.execute(
        queries.LIKED_REVIEW_IDS,
        {"userId": user_id, "reviewIds": [row["id"] for row in rows]},
    )
    return {like["review_id"] for like in data.get("restaurant_review_likes", [])}


def _page_limit(limit: int) -> int:
    return min(limit, settings.MAX_PAGE_SIZE)


@router.get("", response_model=ReviewPageOut)
async def list_reviews(
    limit: int = Query(16, ge=1),
    cursor: str | None = Query(None),
    user_id: int | None = Depends(get_optional_user_id),
    hasura: HasuraClient = Depends(get_hasura),
):
    limit = _page_limit(limit)
    offset = parse_cursor(cursor)
    data = await hasura.execute(
        queries.TOP_LEVEL_REVIEWS, {"limit": limit + 1, "offset": offset}
    )
    rows = data.get("restaurant_reviews", [])
    liked = await liked_review_ids(hasura, user_id, rows)
    return page_payload([serialize_review(r, liked) for r in rows], limit, offset)


@router.post("/{review_id}/likes", response_model=LikeStateOut)
async def like_review(
    review_id: int,
    user_id: int = Depends(get_current_user_id),
    hasura: HasuraClient = Depends(get_hasura),
):
    await _get_review_or_404(hasura, review_id)
    await hasura.execute(queries.INSERT_LIKE, {"reviewId": review_id, "userId": user_id})
    return await _like_state(hasura, review_id, user_id)


@router.delete("/{review_id}/likes", response_model=LikeStateOut)
async def unlike_review(
    review_id: int,
    user_id: int = Depends(get_current_user_id),
    hasura: HasuraClient = Depends(get_hasura),
):
    await _get_review_or_404(hasura, review_id)
    await hasura.execute(queries.DELETE_LIKE, {"reviewId": review_id, "userId": user_id})
    return await _like_state(hasura, review_id, user_id)


@router.get("/{review_id}/replies", response_model=list[ReviewOut])
async def get_replies(
    review_id: int,
    user_id: int | None = Depends(get_optional_user_id),
    hasura: HasuraClient = Depends(get_hasura),
):
    data = await hasura.execute(queries.REPLIES, {"parentId": review_id})
    rows = data.get("restaurant_reviews", [])
    liked = await liked_review_ids(hasura, user_id, rows)
    return [serialize_review(r, liked) for r in rows]


def _seconds_since(timestamp: str | None) -> float | None:
    if not timestamp:
        return None
    created = _TIMESTAMP.validate_python(timestamp)
    if created.tzinfo is None:
        created = created.replace(tzinfo=timezone.utc)
    return (datetime.now(timezone.utc) - created).total_seconds()


@router.post(
    "/{review_id}/comments",
    response_model=CommentOut,
    status_code=status.HTTP_201_CREATED,
)
async def add_comment(
    review_id: int,
    body: CreateCommentRequest,
    user_id: int = Depends(get_current_user_id),
    hasura: HasuraClient = Depends(get_hasura),
):
    content = body.content.strip()
    if not content:
        raise api_error(status.HTTP_400_BAD_REQUEST, "validation_error", "Comment is required")
    if len(content) > settings.COMMENT_MAX_LENGTH:
        raise api_error(
            status.HTTP_400_BAD_REQUEST,
            "validation_error",
            f"Comment cannot exceed {settings.COMMENT_MAX_LENGTH} characters",
        )

    context = await hasura.execute(
        queries.COMMENT_CONTEXT, {"parentId": review_id, "authorId": user_id}
    )
    parent = context.get("parent")
    if parent is None:
        raise api_error(status.HTTP_404_NOT_FOUND, "review_not_found", "Review not found")

    own_replies = context.get("own_replies", [])
    if any((r.get("content") or "").strip() == content for r in own_replies):
        raise api_error(
            status.HTTP_409_CONFLICT, "comment_duplicate", "Duplicate comment detected"
        )
    if len(own_replies) >= settings.COMMENT_MAX_REPLIES:
        raise api_error(
            status.HTTP_403_FORBIDDEN,
            "reply_limit",
            f"You can only post {settings.COMMENT_MAX_REPLIES} replies per review",
        )

    latest = context.get("latest") or []
    elapsed = _seconds_since(latest[0].get("created_at")) if latest else None
    if elapsed is not None and elapsed < settings.COMMENT_FLOOD_SECONDS:
        logger.info(f"Comment flood from user {user_id} on review {review_id}")
        raise api_error(
            status.HTTP_429_TOO_MANY_REQUESTS, "comment_flood", "You are commenting too fast"
        )

    data = await hasura.execute(
        queries.INSERT_REPLY,
        {
            "parentId": review_id,
            "restaurantId": parent.get("restaurant_id"),
            "authorId": user_id,
            "content": content,
        },
    )
    row = data["insert_restaurant_reviews_one"]
    return {**serialize_review(row), "status": row.get("status") or "approved"}
