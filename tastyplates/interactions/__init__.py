"""Optimistic interactions: likes, follows, comments and paginated lists.

Example:
    >>> from tastyplates.interactions import PageSession, LikeableEntity
    >>> page = PageSession()
    >>> toggle = page.like_toggle(LikeableEntity(id="42", like_count=3))
"""

from .comments import CommentComposer, merge_replies
from .cooldown import CooldownTimer
from .follow_registry import FollowCountRegistry, FollowStateRegistry
from .follows import FollowController
from .lifetime import Lifetime
from .likes import LikeableEntity, LikeToggle
from .notifications import LoggingNotifier, Notifier, RecordingNotifier, Toast, ToastKind
from .optimistic import CommandResult, InFlightGuard, OptimisticCommand, OptimisticRunner
from .page import PageSession
from .pagination import PaginatedList
from .registry import FlagRegistry, ObservableStore
from .wishlist import WishlistRegistry, WishlistToggle

__all__ = [
    # Optimistic core
    "CommandResult",
    "InFlightGuard",
    "OptimisticCommand",
    "OptimisticRunner",
    "Lifetime",
    "ObservableStore",
    "FlagRegistry",
    # Interactions
    "LikeableEntity",
    "LikeToggle",
    "FollowStateRegistry",
    "FollowCountRegistry",
    "FollowController",
    "WishlistRegistry",
    "WishlistToggle",
    "CommentComposer",
    "CooldownTimer",
    "merge_replies",
    "PaginatedList",
    "PageSession",
    # Notifications
    "Notifier",
    "RecordingNotifier",
    "LoggingNotifier",
    "Toast",
    "ToastKind",
]
