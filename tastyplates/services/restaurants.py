"""Wishlist endpoints of the platform."""

from __future__ import annotations

import logging

from tastyplates.http.client import HttpResponse
from tastyplates.http.errors import ApiError

from .base import BaseService
from .outcome import Outcome, decode_outcome
from .schemas import FavoriteState

logger = logging.getLogger(__name__)


class RestaurantService(BaseService):
    """Façade over the save/unsave restaurant endpoints."""

    async def save_restaurant(self, slug: str, token: str) -> Outcome:
        response = await self.http.post(f"/restaurants/{slug}/favorite", token=token)
        return self._favorite_outcome(response)

    async def unsave_restaurant(self, slug: str, token: str) -> Outcome:
        response = await self.http.delete(f"/restaurants/{slug}/favorite", token=token)
        return self._favorite_outcome(response)

    @staticmethod
    def _favorite_outcome(response: HttpResponse) -> Outcome:
        # "saved"/"unsaved" are answers, not moderation states.
        if response.ok:
            return Outcome.accept(FavoriteState.model_validate(response.body))
        return decode_outcome(response)

    async def is_saved(self, slug: str, token: str | None) -> bool:
        """Return whether the token's owner saved ``slug``; False on any failure."""
        if not token:
            return False
        try:
            response = await self.http.get(f"/restaurants/{slug}/favorite", token=token)
        except ApiError:
            logger.exception(f"Wishlist status check for {slug} failed")
            return False
        if not response.ok or not isinstance(response.body, dict):
            return False
        return bool(response.body.get("saved"))
