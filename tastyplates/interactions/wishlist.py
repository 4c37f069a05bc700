"""Optimistic save/unsave of a restaurant to the viewer's wishlist."""

from __future__ import annotations

import logging
from typing import Any, Optional

from tastyplates.http.errors import SessionTerminatedError
from tastyplates.services.outcome import Outcome, requires_sign_in
from tastyplates.services.restaurants import RestaurantService
from tastyplates.session.auth import AuthContext

from . import messages
from .lifetime import Lifetime
from .notifications import Notifier
from .optimistic import CommandResult, InFlightGuard, OptimisticCommand, OptimisticRunner
from .registry import FlagRegistry

logger = logging.getLogger(__name__)


class WishlistRegistry(FlagRegistry):
    """Saved state per restaurant slug; every card showing a slug reads it."""


class WishlistToggle:
    """Heart button of one restaurant card."""

    def __init__(
        self,
        slug: str,
        registry: WishlistRegistry,
        restaurants: RestaurantService,
        auth: AuthContext,
        notifier: Notifier,
        guard: Optional[InFlightGuard] = None,
        lifetime: Optional[Lifetime] = None,
    ):
        self.slug = slug
        self.registry = registry
        self.restaurants = restaurants
        self.auth = auth
        self.notifier = notifier
        self.runner = OptimisticRunner(guard, lifetime)

    @property
    def key(self) -> tuple:
        return ("wishlist", self.slug)

    @property
    def saved(self) -> bool:
        return self.registry.get(self.slug)

    @property
    def busy(self) -> bool:
        return self.runner.guard.is_busy(self.key)

    async def refresh(self) -> bool:
        user = self.auth.current_user
        if user is None:
            return False
        saved = await self.restaurants.is_saved(self.slug, user.access_token)
        if self.runner.live:
            self.registry.set(self.slug, saved)
        return saved

    async def toggle(self) -> CommandResult:
        user = self.auth.require_user()
        if user is None:
            return CommandResult.SKIPPED_UNAUTHENTICATED

        async def remote_call(was_saved: bool) -> Outcome:
            if was_saved:
                return await self.restaurants.unsave_restaurant(self.slug, user.access_token)
            return await self.restaurants.save_restaurant(self.slug, user.access_token)

        command = OptimisticCommand(
            key=self.key,
            snapshot=lambda: self.registry.get(self.slug),
            apply=lambda was_saved: self.registry.set(self.slug, not was_saved),
            remote_call=remote_call,
            on_success=self._reconcile,
            on_failure=self._revert,
            accepts=lambda outcome: outcome.accepted,
            shared=True,
        )
        return await self.runner.run(command)

    def _reconcile(self, outcome: Outcome) -> None:
        saved = outcome.data.saved
        self.registry.set(self.slug, saved)
        if self.runner.live:
            self.notifier.success(
                messages.SAVED_TO_WISHLIST if saved else messages.REMOVED_FROM_WISHLIST
            )

    def _revert(self, was_saved: bool, cause: Any) -> None:
        self.registry.set(self.slug, was_saved)
        if not self.runner.live or isinstance(cause, SessionTerminatedError):
            return
        if requires_sign_in(cause):
            self.auth.prompt_sign_in()
            return
        self.notifier.error(messages.WISHLIST_FAILED)
