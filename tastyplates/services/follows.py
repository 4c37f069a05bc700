"""Follow endpoints of the platform."""

from __future__ import annotations

import logging

from tastyplates.http.client import error_code
from tastyplates.http.errors import ApiError

from .base import BaseService
from .outcome import Outcome, decode_outcome
from .schemas import FollowCounts, FollowStatus, FollowUser, Page

logger = logging.getLogger(__name__)

NOT_FOLLOWING_CODE = "not_following"


class FollowService(BaseService):
    """Façade over follow/unfollow and follower list endpoints."""

    async def follow_user(self, user_id: str, token: str) -> Outcome:
        if not token:
            raise ValueError("Authentication token is required")
        response = await self.http.post(f"/users/{user_id}/follow", token=token)
        return decode_outcome(response)

    async def unfollow_user(self, user_id: str, token: str) -> Outcome:
        """Unfollow ``user_id``.

        Unfollowing someone already not followed is the desired end state, so
        the server's ``not_following`` refusal is reported as accepted.
        """
        if not token:
            raise ValueError("Authentication token is required")
        response = await self.http.delete(f"/users/{user_id}/follow", token=token)
        if error_code(response.body) == NOT_FOLLOWING_CODE:
            logger.debug(f"Unfollow of {user_id}: already not following")
            return Outcome.accept(response.body)
        return decode_outcome(response)

    async def is_following_user(self, user_id: str, token: str | None) -> bool:
        """Return whether the token's owner follows ``user_id``; False on any failure."""
        if not token:
            return False
        try:
            response = await self.http.get(f"/users/{user_id}/follow-status", token=token)
        except ApiError:
            logger.exception(f"Follow status check for {user_id} failed")
            return False
        if not response.ok or not isinstance(response.body, dict):
            return False
        return FollowStatus.model_validate(response.body).is_following

    async def get_follow_counts(self, user_id: str, token: str | None = None) -> FollowCounts:
        response = await self.http.get(f"/users/{user_id}/follow-counts", token=token)
        self._raise_for_status(response)
        return FollowCounts.model_validate(response.body)

    async def get_following_list(
        self,
        user_id: str,
        token: str | None = None,
        cursor: str | None = None,
        limit: int = 16,
    ) -> Page[FollowUser]:
        return await self._fetch_list(f"/users/{user_id}/following", token, cursor, limit)

    async def get_followers_list(
        self,
        user_id: str,
        token: str | None = None,
        cursor: str | None = None,
        limit: int = 16,
    ) -> Page[FollowUser]:
        return await self._fetch_list(f"/users/{user_id}/followers", token, cursor, limit)

    async def _fetch_list(
        self, endpoint: str, token: str | None, cursor: str | None, limit: int
    ) -> Page[FollowUser]:
        response = await self.http.get(
            endpoint, token=token, params=self._page_params(cursor, limit)
        )
        self._raise_for_status(response)
        return Page[FollowUser].model_validate(response.body)
