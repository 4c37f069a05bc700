"""Optimistic follow/unfollow backed by the shared follow registry."""

from __future__ import annotations

import logging
import threading
from typing import Any, Hashable, Optional

from cachetools import TTLCache

from tastyplates.http.errors import ApiError, SessionTerminatedError
from tastyplates.services.follows import FollowService
from tastyplates.services.outcome import Outcome, requires_sign_in
from tastyplates.services.schemas import FollowCounts, FollowUser
from tastyplates.session.auth import AuthContext

from . import messages
from .follow_registry import FollowCountRegistry, FollowStateRegistry
from .lifetime import Lifetime
from .notifications import Notifier
from .optimistic import CommandResult, InFlightGuard, OptimisticCommand, OptimisticRunner

logger = logging.getLogger(__name__)

FOLLOWING = "following"
FOLLOWERS = "followers"


class FollowController:
    """Follow buttons, follower counts and follow lists for one page session.

    Following someone moves their follower count and the viewer's following
    count by one, for users whose counts were loaded.

    Follower/following list snapshots are cached for ``list_ttl`` seconds and
    dropped whenever the viewer's follow edges change.
    """

    def __init__(
        self,
        registry: FollowStateRegistry,
        follows: FollowService,
        auth: AuthContext,
        notifier: Notifier,
        guard: Optional[InFlightGuard] = None,
        lifetime: Optional[Lifetime] = None,
        list_ttl: float = 300.0,
        list_limit: int = 50,
        counts: Optional[FollowCountRegistry] = None,
    ):
        self.registry = registry
        self.counts = counts if counts is not None else FollowCountRegistry()
        self.follows = follows
        self.auth = auth
        self.notifier = notifier
        self.runner = OptimisticRunner(guard, lifetime)
        self.list_limit = list_limit
        self._lists: TTLCache = TTLCache(maxsize=256, ttl=list_ttl)
        self._lists_lock = threading.Lock()

    def can_follow(self, target_id: Optional[Hashable]) -> bool:
        """Whether a follow control should be shown for ``target_id`` at all."""
        if target_id is None or str(target_id) == "":
            return False
        user = self.auth.current_user
        return user is None or str(user.id) != str(target_id)

    def is_following(self, target_id: Hashable) -> bool:
        return self.registry.get(target_id)

    async def set_follow(self, target_id: Hashable, desired: bool) -> bool:
        """Follow (``desired=True``) or unfollow ``target_id``.

        Returns True when the server accepted the change. Self-follow and a
        missing target are silent no-ops.
        """
        if not self.can_follow(target_id):
            logger.debug(f"Follow control not available for {target_id!r}")
            return False
        user = self.auth.require_user()
        if user is None:
            return False

        target = str(target_id)
        applied = {"target": (0, 0), "viewer": (0, 0)}

        def apply(_: bool) -> None:
            self.registry.set(target, desired)
            step = 1 if desired else -1
            applied["target"] = self.counts.adjust(target, followers=step)
            applied["viewer"] = self.counts.adjust(user.id, following=step)

        async def remote_call(_: bool) -> Outcome:
            if desired:
                return await self.follows.follow_user(target, user.access_token)
            return await self.follows.unfollow_user(target, user.access_token)

        def on_failure(_: bool, cause: Any) -> None:
            self.registry.set(target, not desired)
            self.counts.adjust(target, followers=-applied["target"][0])
            self.counts.adjust(user.id, following=-applied["viewer"][1])
            if not self.runner.live or isinstance(cause, SessionTerminatedError):
                return
            if requires_sign_in(cause):
                self.auth.prompt_sign_in()
                return
            self.notifier.error(
                messages.FOLLOW_FAILED if desired else messages.UNFOLLOW_FAILED
            )

        # Registry and counts outlive this control; settle them regardless.
        command = OptimisticCommand(
            key=("follow", target),
            snapshot=lambda: self.registry.get(target),
            apply=apply,
            remote_call=remote_call,
            on_success=lambda _: self._invalidate_lists(user.id, target),
            on_failure=on_failure,
            accepts=lambda outcome: outcome.accepted,
            shared=True,
        )
        return await self.runner.run(command) is CommandResult.APPLIED

    async def refresh(self, target_id: Hashable) -> bool:
        """Seed the registry from the server for ``target_id``."""
        user = self.auth.current_user
        if user is None or not self.can_follow(target_id):
            return False
        following = await self.follows.is_following_user(str(target_id), user.access_token)
        if self.runner.live:
            self.registry.set(target_id, following)
        return following

    async def refresh_counts(self, user_id: Hashable) -> Optional[FollowCounts]:
        """Load the follower/following counts of ``user_id`` into the count registry."""
        user = self.auth.current_user
        token = user.access_token if user else None
        try:
            counts = await self.follows.get_follow_counts(str(user_id), token)
        except ApiError:
            logger.exception(f"Loading follow counts of {user_id} failed")
            return None
        if self.runner.live:
            self.counts.seed(user_id, counts)
        return counts

    async def following_snapshot(self, user_id: Hashable) -> list[FollowUser]:
        return await self._snapshot(FOLLOWING, str(user_id))

    async def followers_snapshot(self, user_id: Hashable) -> list[FollowUser]:
        return await self._snapshot(FOLLOWERS, str(user_id))

    async def _snapshot(self, kind: str, user_id: str) -> list[FollowUser]:
        key = (kind, user_id)
        with self._lists_lock:
            cached = self._lists.get(key)
        if cached is not None:
            return list(cached)

        user = self.auth.current_user
        token = user.access_token if user else None
        fetch = (
            self.follows.get_following_list if kind == FOLLOWING
            else self.follows.get_followers_list
        )
        try:
            page = await fetch(user_id, token, limit=self.list_limit)
        except ApiError:
            logger.exception(f"Loading {kind} of {user_id} failed")
            return []

        users = list(page.items)
        with self._lists_lock:
            self._lists[key] = users
        if kind == FOLLOWING and user is not None and str(user.id) == user_id:
            for entry in users:
                self.registry.set(entry.id, True)
        return list(users)

    def _invalidate_lists(self, actor_id: str, target_id: str) -> None:
        with self._lists_lock:
            for key in (
                (FOLLOWING, str(actor_id)),
                (FOLLOWERS, str(actor_id)),
                (FOLLOWERS, target_id),
            ):
                self._lists.pop(key, None)
