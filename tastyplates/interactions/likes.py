"""Optimistic like/unlike of a review or reply."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional, Tuple

from tastyplates.http.errors import InvalidResponseError, SessionTerminatedError
from tastyplates.services.outcome import requires_sign_in
from tastyplates.services.reviews import ReviewService
from tastyplates.services.schemas import LikeState
from tastyplates.session.auth import AuthContext

from . import messages
from .lifetime import Lifetime
from .notifications import Notifier
from .optimistic import CommandResult, InFlightGuard, OptimisticCommand, OptimisticRunner

logger = logging.getLogger(__name__)

LikeSnapshot = Tuple[bool, int]


@dataclass
class LikeableEntity:
    """Local like state of one review or reply, as seen by the current viewer."""

    id: str
    like_count: int = 0
    liked_by_current_user: bool = False

    def __post_init__(self):
        self.like_count = max(0, self.like_count)


class LikeToggle:
    """Like button behaviour for one entity."""

    def __init__(
        self,
        entity: LikeableEntity,
        reviews: ReviewService,
        auth: AuthContext,
        notifier: Notifier,
        guard: Optional[InFlightGuard] = None,
        lifetime: Optional[Lifetime] = None,
    ):
        self.entity = entity
        self.reviews = reviews
        self.auth = auth
        self.notifier = notifier
        self.runner = OptimisticRunner(guard, lifetime)

    @property
    def key(self) -> tuple:
        return ("like", self.entity.id)

    @property
    def busy(self) -> bool:
        return self.runner.guard.is_busy(self.key)

    async def toggle(self) -> CommandResult:
        user = self.auth.require_user()
        if user is None:
            return CommandResult.SKIPPED_UNAUTHENTICATED

        async def remote_call(before: LikeSnapshot) -> LikeState:
            was_liked, _ = before
            if was_liked:
                return await self.reviews.unlike_comment(self.entity.id, user.access_token)
            return await self.reviews.like_comment(self.entity.id, user.access_token)

        command = OptimisticCommand(
            key=self.key,
            snapshot=self._snapshot,
            apply=self._apply_flip,
            remote_call=remote_call,
            on_success=self._reconcile,
            on_failure=self._revert,
        )
        return await self.runner.run(command)

    def _snapshot(self) -> LikeSnapshot:
        return (self.entity.liked_by_current_user, self.entity.like_count)

    def _apply_flip(self, before: LikeSnapshot) -> None:
        was_liked, count = before
        self.entity.liked_by_current_user = not was_liked
        self.entity.like_count = max(0, count - 1) if was_liked else count + 1

    def _reconcile(self, state: LikeState) -> None:
        self.entity.liked_by_current_user = state.user_liked
        self.entity.like_count = state.likes_count

    def _revert(self, before: LikeSnapshot, cause: Any) -> None:
        self.entity.liked_by_current_user, self.entity.like_count = before
        if isinstance(cause, SessionTerminatedError):
            return
        if requires_sign_in(cause):
            self.auth.prompt_sign_in()
            return
        if isinstance(cause, InvalidResponseError):
            self.notifier.error(messages.UPDATE_LIKE_FAILED_RETRY)
        else:
            self.notifier.error(messages.UPDATE_LIKE_FAILED)
