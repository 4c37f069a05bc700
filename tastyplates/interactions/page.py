"""Wiring for one page session: shared services, registry and factories."""

from __future__ import annotations

import logging
from typing import Optional

from tastyplates.http.client import HttpClient
from tastyplates.http.config import HttpConfig, InteractionConfig
from tastyplates.services.follows import FollowService
from tastyplates.services.restaurants import RestaurantService
from tastyplates.services.reviews import ReviewService
from tastyplates.services.schemas import FollowUser, Review
from tastyplates.session.auth import AuthContext

from .comments import CommentComposer
from .follow_registry import FollowCountRegistry, FollowStateRegistry
from .follows import FollowController
from .lifetime import Lifetime
from .likes import LikeableEntity, LikeToggle
from .notifications import LoggingNotifier, Notifier
from .optimistic import InFlightGuard
from .pagination import PaginatedList
from .wishlist import WishlistRegistry, WishlistToggle

logger = logging.getLogger(__name__)


class PageSession:
    """State shared by every component mounted in one page session.

    The follow, count and wishlist registries start empty here and die with
    the session; nothing is persisted.
    """

    def __init__(
        self,
        auth: Optional[AuthContext] = None,
        notifier: Optional[Notifier] = None,
        http: Optional[HttpClient] = None,
        http_config: Optional[HttpConfig] = None,
        config: Optional[InteractionConfig] = None,
    ):
        if config is None:
            config = InteractionConfig.from_env()
        config.validate()

        self.config = config
        self.auth = auth or AuthContext()
        self.notifier = notifier or LoggingNotifier()
        if http is None:
            http = HttpClient(http_config, on_session_terminated=self.auth.force_sign_out)
        elif http.on_session_terminated is None:
            http.on_session_terminated = self.auth.force_sign_out
        self.http = http

        self.reviews = ReviewService(self.http, replies_ttl=config.replies_ttl)
        self.follows = FollowService(self.http)
        self.restaurants = RestaurantService(self.http)
        self.registry = FollowStateRegistry()
        self.counts = FollowCountRegistry()
        self.wishlist = WishlistRegistry()
        self.guard = InFlightGuard()
        self.follow_controller = FollowController(
            self.registry,
            self.follows,
            self.auth,
            self.notifier,
            guard=self.guard,
            list_ttl=config.follow_list_ttl,
            counts=self.counts,
        )

    def like_toggle(
        self, entity: LikeableEntity, lifetime: Optional[Lifetime] = None
    ) -> LikeToggle:
        return LikeToggle(
            entity, self.reviews, self.auth, self.notifier, guard=self.guard, lifetime=lifetime
        )

    def wishlist_toggle(
        self, slug: str, lifetime: Optional[Lifetime] = None
    ) -> WishlistToggle:
        return WishlistToggle(
            slug,
            self.wishlist,
            self.restaurants,
            self.auth,
            self.notifier,
            guard=self.guard,
            lifetime=lifetime,
        )

    def comment_composer(
        self,
        parent_id: str,
        cooldown_seconds: Optional[int] = None,
        lifetime: Optional[Lifetime] = None,
    ) -> CommentComposer:
        return CommentComposer(
            parent_id,
            self.reviews,
            self.auth,
            self.notifier,
            cooldown_seconds=(
                self.config.comment_cooldown if cooldown_seconds is None else cooldown_seconds
            ),
            max_length=self.config.comment_max_length,
            lifetime=lifetime,
        )

    def _token(self) -> Optional[str]:
        user = self.auth.current_user
        return user.access_token if user else None

    def user_reviews(
        self, user_id: str, lifetime: Optional[Lifetime] = None
    ) -> PaginatedList[Review]:
        async def fetch(context_id, cursor):
            return await self.reviews.fetch_user_reviews(
                context_id, cursor, limit=self.config.page_size, token=self._token()
            )

        return PaginatedList(fetch, user_id, notifier=self.notifier, lifetime=lifetime)

    def followers(
        self, user_id: str, lifetime: Optional[Lifetime] = None
    ) -> PaginatedList[FollowUser]:
        async def fetch(context_id, cursor):
            return await self.follows.get_followers_list(
                context_id, self._token(), cursor, limit=self.config.page_size
            )

        return PaginatedList(fetch, user_id, lifetime=lifetime)

    def following(
        self, user_id: str, lifetime: Optional[Lifetime] = None
    ) -> PaginatedList[FollowUser]:
        async def fetch(context_id, cursor):
            return await self.follows.get_following_list(
                context_id, self._token(), cursor, limit=self.config.page_size
            )

        return PaginatedList(fetch, user_id, lifetime=lifetime)

    async def aclose(self) -> None:
        await self.http.aclose()
