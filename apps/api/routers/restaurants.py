from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status

from ..core import queries
from ..core.deps import api_error, get_current_user_id, get_hasura
from ..core.hasura import HasuraClient
from ..schemas.restaurant import FavoriteResultOut, FavoriteStatusOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/restaurants", tags=["restaurants"])


async def _restaurant_id_or_404(hasura: HasuraClient, slug: str) -> int:
    data = await hasura.execute(queries.RESTAURANT_BY_SLUG, {"slug": slug})
    rows = data.get("restaurants") or []
    if not rows:
        raise api_error(status.HTTP_404_NOT_FOUND, "restaurant_not_found", "Restaurant not found")
    return rows[0]["id"]


@router.get("/{slug}/favorite", response_model=FavoriteStatusOut)
async def favorite_status(
    slug: str,
    user_id: int = Depends(get_current_user_id),
    hasura: HasuraClient = Depends(get_hasura),
):
    restaurant_id = await _restaurant_id_or_404(hasura, slug)
    data = await hasura.execute(
        queries.FAVORITE_STATUS, {"userId": user_id, "restaurantId": restaurant_id}
    )
    return {"saved": bool(data.get("user_favorites"))}


@router.post("/{slug}/favorite", response_model=FavoriteResultOut)
async def save_restaurant(
    slug: str,
    user_id: int = Depends(get_current_user_id),
    hasura: HasuraClient = Depends(get_hasura),
):
    restaurant_id = await _restaurant_id_or_404(hasura, slug)
    await hasura.execute(
        queries.INSERT_FAVORITE, {"userId": user_id, "restaurantId": restaurant_id}
    )
    logger.info(f"User {user_id} saved {slug}")
    return {"status": "saved"}


@router.delete("/{slug}/favorite", response_model=FavoriteResultOut)
async def unsave_restaurant(
    slug: str,
    user_id: int = Depends(get_current_user_id),
    hasura: HasuraClient = Depends(get_hasura),
):
    restaurant_id = await _restaurant_id_or_404(hasura, slug)
    await hasura.execute(
        queries.DELETE_FAVORITE, {"userId": user_id, "restaurantId": restaurant_id}
    )
    logger.info(f"User {user_id} removed {slug} from their wishlist")
    return {"status": "unsaved"}
