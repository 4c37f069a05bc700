"""Page-session follow state, shared by every follow button and counter."""

from __future__ import annotations

from typing import Hashable, Optional, Tuple

from tastyplates.services.schemas import FollowCounts

from .registry import FlagRegistry, ObservableStore


class FollowStateRegistry(FlagRegistry):
    """Single source of truth for "does the viewer follow this author?"."""


class FollowCountRegistry(ObservableStore[FollowCounts]):
    """Follower and following counts per user.

    Only users whose counts were seeded are adjusted; a count never drops
    below zero.
    """

    def get(self, user_id: Hashable) -> Optional[FollowCounts]:
        return self._lookup(user_id)

    def seed(self, user_id: Hashable, counts: FollowCounts) -> None:
        self._write(user_id, counts)

    def adjust(self, user_id: Hashable, followers: int = 0, following: int = 0) -> Tuple[int, int]:
        """Shift the counts of ``user_id`` and return the deltas actually applied."""
        current = self._lookup(user_id)
        if current is None:
            return 0, 0
        new_followers = max(0, current.followers_count + followers)
        new_following = max(0, current.following_count + following)
        self._write(
            user_id,
            FollowCounts(followers_count=new_followers, following_count=new_following),
        )
        return (
            new_followers - current.followers_count,
            new_following - current.following_count,
        )
