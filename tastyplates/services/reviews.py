"""Review, reply and like endpoints of the platform."""

from __future__ import annotations

import logging
import threading

from cachetools import TTLCache

from tastyplates.http.client import HttpClient

from .base import BaseService
from .outcome import Outcome, decode_outcome
from .schemas import CommentPayload, LikeState, Page, Reply, Review

logger = logging.getLogger(__name__)


class ReviewService(BaseService):
    """Façade over the review endpoints.

    Reply lists are cached for ``replies_ttl`` seconds; a successful comment
    post drops the cached lists of its parent so the next fetch is fresh.
    """

    def __init__(self, http: HttpClient, replies_ttl: float = 120.0):
        super().__init__(http)
        self._replies_cache: TTLCache = TTLCache(maxsize=512, ttl=replies_ttl)
        self._cache_lock = threading.Lock()

    async def like_comment(self, review_id: str, token: str) -> LikeState:
        response = await self.http.post(f"/reviews/{review_id}/likes", token=token)
        self._raise_for_status(response)
        return LikeState.model_validate(response.body)

    async def unlike_comment(self, review_id: str, token: str) -> LikeState:
        response = await self.http.delete(f"/reviews/{review_id}/likes", token=token)
        self._raise_for_status(response)
        return LikeState.model_validate(response.body)

    async def post_comment(self, payload: CommentPayload, token: str) -> Outcome:
        """Post a reply under ``payload.parent_id``.

        Business refusals (duplicate, flood, reply limit) come back as a
        rejected ``Outcome``; only transport failures raise.
        """
        body = {"content": payload.content}
        if payload.restaurant_id is not None:
            body["restaurantId"] = payload.restaurant_id
        response = await self.http.post(
            f"/reviews/{payload.parent_id}/comments", token=token, json=body
        )
        outcome = decode_outcome(response)
        if outcome.accepted:
            self.invalidate_replies(payload.parent_id)
        else:
            logger.info(f"Comment on {payload.parent_id} rejected: {outcome.reason.value}")
        return outcome

    async def fetch_comment_replies(
        self,
        parent_id: str,
        token: str | None = None,
        use_cache: bool = True,
    ) -> list[Reply]:
        key = (parent_id, token)
        if use_cache:
            with self._cache_lock:
                cached = self._replies_cache.get(key)
            if cached is not None:
                return list(cached)

        response = await self.http.get(f"/reviews/{parent_id}/replies", token=token)
        self._raise_for_status(response)
        replies = [Reply.model_validate(item) for item in self._items(response.body)]

        with self._cache_lock:
            self._replies_cache[key] = replies
        return list(replies)

    def invalidate_replies(self, parent_id: str) -> None:
        with self._cache_lock:
            for key in [k for k in self._replies_cache.keys() if k[0] == parent_id]:
                self._replies_cache.pop(key, None)

    async def fetch_all_reviews(
        self,
        cursor: str | None = None,
        limit: int = 16,
        token: str | None = None,
    ) -> Page[Review]:
        response = await self.http.get(
            "/reviews", token=token, params=self._page_params(cursor, limit)
        )
        self._raise_for_status(response)
        return Page[Review].model_validate(response.body)

    async def fetch_user_reviews(
        self,
        user_id: str,
        cursor: str | None = None,
        limit: int = 16,
        token: str | None = None,
    ) -> Page[Review]:
        response = await self.http.get(
            f"/users/{user_id}/reviews",
            token=token,
            params=self._page_params(cursor, limit),
        )
        self._raise_for_status(response)
        return Page[Review].model_validate(response.body)
