from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query, status

from ..core import queries
from ..core.config import settings
from ..core.deps import api_error, get_current_user_id, get_hasura, get_optional_user_id
from ..core.hasura import HasuraClient
from ..core.serialize import page_payload, parse_cursor, serialize_follow_user, serialize_review
from ..schemas.review import ReviewPageOut
from ..schemas.user import FollowCountsOut, FollowResultOut, FollowStatusOut, FollowUserPageOut
from .reviews import liked_review_ids

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


def _reject_self(user_id: int, target_id: int) -> None:
    if user_id == target_id:
        raise api_error(status.HTTP_400_BAD_REQUEST, "self_follow", "You cannot follow yourself")


async def _ensure_user(hasura: HasuraClient, user_id: int) -> None:
    data = await hasura.execute(queries.USER_EXISTS, {"userId": user_id})
    if data.get("restaurant_users_by_pk") is None:
        raise api_error(status.HTTP_404_NOT_FOUND, "user_not_found", "User not found")


async def _followed_ids(
    hasura: HasuraClient, viewer_id: int | None, people: list[dict]
) -> set[int]:
    if viewer_id is None or not people:
        return set()
    data = await hasura.execute(
        queries.FOLLOWED_IDS,
        {"followerId": viewer_id, "userIds": [p["id"] for p in people]},
    )
    return {row["user_id"] for row in data.get("restaurant_user_follows", [])}


async def _follow_page(
    hasura: HasuraClient,
    query: str,
    user_id: int,
    viewer_id: int | None,
    limit: int,
    cursor: str | None,
) -> dict:
    limit = min(limit, settings.MAX_PAGE_SIZE)
    offset = parse_cursor(cursor)
    data = await hasura.execute(query, {"userId": user_id, "limit": limit + 1, "offset": offset})
    people = [row["person"] for row in data.get("restaurant_user_follows", []) if row.get("person")]
    followed = await _followed_ids(hasura, viewer_id, people)
    return page_payload([serialize_follow_user(p, followed) for p in people], limit, offset)


@router.post("/{user_id}/follow", response_model=FollowResultOut)
async def follow_user(
    user_id: int,
    current_user_id: int = Depends(get_current_user_id),
    hasura: HasuraClient = Depends(get_hasura),
):
    _reject_self(current_user_id, user_id)
    await _ensure_user(hasura, user_id)
    await hasura.execute(
        queries.INSERT_FOLLOW, {"followerId": current_user_id, "userId": user_id}
    )
    logger.info(f"User {current_user_id} followed {user_id}")
    return {"status": "success", "isFollowing": True}


@router.delete("/{user_id}/follow", response_model=FollowResultOut)
async def unfollow_user(
    user_id: int,
    current_user_id: int = Depends(get_current_user_id),
    hasura: HasuraClient = Depends(get_hasura),
):
    _reject_self(current_user_id, user_id)
    data = await hasura.execute(
        queries.DELETE_FOLLOW, {"followerId": current_user_id, "userId": user_id}
    )
    if not data["delete_restaurant_user_follows"]["affected_rows"]:
        raise api_error(status.HTTP_400_BAD_REQUEST, "not_following", "Not following this user")
    logger.info(f"User {current_user_id} unfollowed {user_id}")
    return {"status": "success", "isFollowing": False}


@router.get("/{user_id}/follow-status", response_model=FollowStatusOut)
async def follow_status(
    user_id: int,
    current_user_id: int = Depends(get_current_user_id),
    hasura: HasuraClient = Depends(get_hasura),
):
    data = await hasura.execute(
        queries.FOLLOW_STATUS, {"followerId": current_user_id, "userId": user_id}
    )
    return {"isFollowing": bool(data.get("restaurant_user_follows"))}


@router.get("/{user_id}/followers", response_model=FollowUserPageOut)
async def get_followers(
    user_id: int,
    limit: int = Query(16, ge=1),
    cursor: str | None = Query(None),
    viewer_id: int | None = Depends(get_optional_user_id),
    hasura: HasuraClient = Depends(get_hasura),
):
    return await _follow_page(hasura, queries.FOLLOWERS, user_id, viewer_id, limit, cursor)


@router.get("/{user_id}/following", response_model=FollowUserPageOut)
async def get_following(
    user_id: int,
    limit: int = Query(16, ge=1),
    cursor: str | None = Query(None),
    viewer_id: int | None = Depends(get_optional_user_id),
    hasura: HasuraClient = Depends(get_hasura),
):
    return await _follow_page(hasura, queries.FOLLOWING, user_id, viewer_id, limit, cursor)


@router.get("/{user_id}/reviews", response_model=ReviewPageOut)
async def get_user_reviews(
    user_id: int,
    limit: int = Query(16, ge=1),
    cursor: str | None = Query(None),
    viewer_id: int | None = Depends(get_optional_user_id),
    hasura: HasuraClient = Depends(get_hasura),
):
    limit = min(limit, settings.MAX_PAGE_SIZE)
    offset = parse_cursor(cursor)
    data = await hasura.execute(
        queries.USER_REVIEWS, {"authorId": user_id, "limit": limit + 1, "offset": offset}
    )
    rows = data.get("restaurant_reviews", [])
    liked = await liked_review_ids(hasura, viewer_id, rows)
    return page_payload([serialize_review(r, liked) for r in rows], limit, offset)


@router.get("/{user_id}/follow-counts", response_model=FollowCountsOut)
async def follow_counts(
    user_id: int,
    hasura: HasuraClient = Depends(get_hasura),
):
    data = await hasura.execute(queries.FOLLOW_COUNTS, {"userId": user_id})
    return {
        "followersCount": data["followers"]["aggregate"]["count"],
        "followingCount": data["following"]["aggregate"]["count"],
    }
