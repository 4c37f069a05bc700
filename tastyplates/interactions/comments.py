"""Reply box with optimistic insertion and a post-submit cooldown."""

from __future__ import annotations

import asyncio
import logging
import uuid
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from tastyplates.http.errors import SessionTerminatedError
from tastyplates.services.outcome import RejectionReason, requires_sign_in
from tastyplates.services.reviews import ReviewService
from tastyplates.services.schemas import CommentPayload, Reply
from tastyplates.session.auth import AuthContext, CurrentUser

from . import messages
from .cooldown import CooldownTimer
from .lifetime import Lifetime
from .notifications import Notifier

logger = logging.getLogger(__name__)


def merge_replies(server: Iterable[Reply], local: Iterable[Reply]) -> List[Reply]:
    """Merge a freshly fetched reply list with what is on screen.

    Still-pending optimistic replies stay at the head, then the server's
    list, then any confirmed local reply the server did not return. Ids are
    never repeated.
    """
    server = list(server)
    local = list(local)
    merged: List[Reply] = []
    seen: set[str] = set()

    pending = [r for r in local if r.is_optimistic]
    confirmed = [r for r in local if not r.is_optimistic]
    for reply in (*pending, *server, *confirmed):
        if reply.id in seen:
            continue
        seen.add(reply.id)
        merged.append(reply)
    return merged


class CommentComposer:
    """Comment box under one review.

    ``error`` carries the inline validation message; toasts are only used
    for results coming back from the server.
    """

    def __init__(
        self,
        parent_id: str,
        reviews: ReviewService,
        auth: AuthContext,
        notifier: Notifier,
        cooldown_seconds: int = 5,
        max_length: int = 500,
        cooldown: Optional[CooldownTimer] = None,
        lifetime: Optional[Lifetime] = None,
    ):
        self.parent_id = str(parent_id)
        self.reviews = reviews
        self.auth = auth
        self.notifier = notifier
        self.cooldown_seconds = cooldown_seconds
        self.max_length = max_length
        self.cooldown = cooldown or CooldownTimer()
        self.lifetime = lifetime

        self.text = ""
        self.replies: List[Reply] = []
        self.error: Optional[str] = None
        self.submitting = False

    def _live(self) -> bool:
        return self.lifetime is None or self.lifetime.alive

    @property
    def placeholder(self) -> str:
        remaining = self.cooldown.remaining
        if remaining > 0:
            return messages.cooldown_wait(remaining)
        return messages.COMMENT_PLACEHOLDER

    @property
    def can_submit(self) -> bool:
        return not self.submitting and not self.cooldown.active and bool(self.text.strip())

    async def load_replies(self) -> List[Reply]:
        user = self.auth.current_user
        token = user.access_token if user else None
        try:
            fetched = await self.reviews.fetch_comment_replies(self.parent_id, token)
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception(f"Loading replies of {self.parent_id} failed")
            return self.replies
        if self._live():
            self.replies = merge_replies(fetched, self.replies)
        return self.replies

    def _validate(self, text: str) -> Optional[str]:
        if len(text) > self.max_length:
            return messages.maximum_comment_length(self.max_length)
        if self.cooldown.active:
            return messages.cooldown_wait(self.cooldown.remaining)
        return None

    def _pending_reply(self, user: CurrentUser, text: str) -> Reply:
        return Reply(
            id=f"optimistic-{uuid.uuid4().hex}",
            content=text,
            author_id=user.id,
            author_name=user.name,
            author_image=user.image,
            parent_id=self.parent_id,
            created_at=datetime.now(timezone.utc).isoformat(),
            is_optimistic=True,
        )

    def _discard(self, pending: Reply) -> None:
        self.replies = [r for r in self.replies if r is not pending]

    async def submit(self) -> bool:
        """Submit the typed text. Returns True when the server accepted it."""
        text = self.text.strip()
        if self.submitting or not text:
            return False
        self.error = self._validate(text)
        if self.error is not None:
            return False
        user = self.auth.require_user()
        if user is None:
            return False

        pending = self._pending_reply(user, text)
        self.replies.insert(0, pending)
        self.text = ""
        self.submitting = True
        try:
            outcome = await self.reviews.post_comment(
                CommentPayload(parent_id=self.parent_id, content=text), user.access_token
            )
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.exception(f"Posting comment on {self.parent_id} failed")
            if self._live():
                self._discard(pending)
                if not isinstance(e, SessionTerminatedError):
                    self.notifier.error(messages.ERROR_OCCURRED)
            return False
        finally:
            self.submitting = False

        if not self._live():
            return outcome.accepted

        self._discard(pending)
        if requires_sign_in(outcome):
            self.auth.prompt_sign_in()
            return False
        if not outcome.accepted:
            self.notifier.error(messages.comment_rejected(outcome.reason))
            if outcome.reason is RejectionReason.RATE_LIMITED:
                self.cooldown.start(self.cooldown_seconds)
            return False

        self.notifier.success(messages.COMMENTED_SUCCESS)
        self.cooldown.start(self.cooldown_seconds)
        await self._refetch(user.access_token)
        return True

    async def _refetch(self, token: str) -> None:
        try:
            fresh = await self.reviews.fetch_comment_replies(
                self.parent_id, token, use_cache=False
            )
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception(f"Refreshing replies of {self.parent_id} failed")
            return
        if self._live():
            self.replies = merge_replies(fresh, self.replies)
