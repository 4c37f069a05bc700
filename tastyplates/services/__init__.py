"""Service façades over the review platform's REST endpoints."""

from .follows import FollowService
from .outcome import (
    Outcome,
    RejectionReason,
    decode_outcome,
    is_accepted_status,
    requires_sign_in,
)
from .restaurants import RestaurantService
from .reviews import ReviewService
from .schemas import (
    CommentPayload,
    FavoriteState,
    FollowCounts,
    FollowStatus,
    FollowUser,
    LikeState,
    Page,
    Reply,
    Review,
)

__all__ = [
    "FollowService",
    "RestaurantService",
    "ReviewService",
    "Outcome",
    "RejectionReason",
    "decode_outcome",
    "is_accepted_status",
    "requires_sign_in",
    "CommentPayload",
    "FavoriteState",
    "FollowCounts",
    "FollowStatus",
    "FollowUser",
    "LikeState",
    "Page",
    "Reply",
    "Review",
]
