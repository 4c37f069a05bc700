"""User-facing notification and inline messages."""

from tastyplates.services.outcome import RejectionReason

ERROR_OCCURRED = "Something went wrong. Please try again."
UPDATE_LIKE_FAILED = "Failed to update like"
UPDATE_LIKE_FAILED_RETRY = "Failed to update like. Please try again."
FOLLOW_FAILED = "Failed to follow user"
UNFOLLOW_FAILED = "Failed to unfollow user"
COMMENTED_SUCCESS = "Comment posted"
COMMENT_DUPLICATE = "Duplicate comment detected; it looks as though you've already said that!"
COMMENT_DUPLICATE_WEEK = "You have already posted this within the past week"
COMMENT_FLOOD = "You are posting comments too quickly. Slow down."
SAVED_TO_WISHLIST = "Saved to wishlist"
REMOVED_FROM_WISHLIST = "Removed from wishlist"
WISHLIST_FAILED = "Failed to update wishlist"
LOAD_FAILED = "Failed to load more items"
COMMENT_PLACEHOLDER = "Add a comment..."


def maximum_comment_length(limit: int) -> str:
    return f"Comments are limited to {limit} characters"


def maximum_comment_replies(limit: int) -> str:
    return f"You can only reply {limit} times to a review"


def cooldown_wait(seconds: int) -> str:
    return f"Please wait {seconds}s before commenting again..."


_REJECTION_MESSAGES = {
    RejectionReason.DUPLICATE: COMMENT_DUPLICATE,
    RejectionReason.DUPLICATE_WEEK: COMMENT_DUPLICATE_WEEK,
    RejectionReason.RATE_LIMITED: COMMENT_FLOOD,
}


def comment_rejected(reason: RejectionReason, reply_limit: int = 5) -> str:
    if reason is RejectionReason.REPLY_LIMIT:
        return maximum_comment_replies(reply_limit)
    return _REJECTION_MESSAGES.get(reason, ERROR_OCCURRED)
