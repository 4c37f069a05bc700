"""Decoding of mutating-call results into accepted/rejected outcomes.

Servers answer with numeric HTTP statuses and, for comments, with moderation
strings such as ``"approved"``. Both are decoded here, once, so the rest of
the code only ever looks at an ``Outcome``.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union

from tastyplates.http.client import HttpResponse, error_code, error_message
from tastyplates.http.errors import HttpStatusError

ACCEPTED_STATUS_STRINGS = frozenset({"approved", "success", "created", "ok"})


class RejectionReason(str, Enum):
    """Why the server refused a mutation."""

    DUPLICATE = "duplicate"
    DUPLICATE_WEEK = "duplicate_week"
    RATE_LIMITED = "rate_limited"
    REPLY_LIMIT = "reply_limit"
    UNAUTHENTICATED = "unauthenticated"
    VALIDATION = "validation"
    GENERIC = "generic"


_REASON_BY_CODE = {
    "comment_duplicate": RejectionReason.DUPLICATE,
    "duplicate_comment": RejectionReason.DUPLICATE,
    "comment_duplicate_week": RejectionReason.DUPLICATE_WEEK,
    "comment_flood": RejectionReason.RATE_LIMITED,
    "rate_limited": RejectionReason.RATE_LIMITED,
    "reply_limit": RejectionReason.REPLY_LIMIT,
    "not_authenticated": RejectionReason.UNAUTHENTICATED,
    "validation_error": RejectionReason.VALIDATION,
}

# Status codes the comment endpoint uses for business refusals.
_REASON_BY_STATUS = {
    400: RejectionReason.RATE_LIMITED,
    401: RejectionReason.UNAUTHENTICATED,
    403: RejectionReason.REPLY_LIMIT,
    409: RejectionReason.DUPLICATE,
    422: RejectionReason.DUPLICATE_WEEK,
    429: RejectionReason.RATE_LIMITED,
}


@dataclass(frozen=True)
class Outcome:
    """Result of a mutating call: accepted with data, or rejected with a reason."""

    accepted: bool
    reason: Optional[RejectionReason] = None
    message: str = ""
    data: Any = None

    @classmethod
    def accept(cls, data: Any = None) -> "Outcome":
        return cls(accepted=True, data=data)

    @classmethod
    def reject(cls, reason: RejectionReason, message: str = "") -> "Outcome":
        return cls(accepted=False, reason=reason, message=message)


def is_accepted_status(status: Union[int, str, None]) -> bool:
    """True for 2xx codes and the moderation strings meaning "accepted"."""
    if isinstance(status, bool) or status is None:
        return False
    if isinstance(status, int):
        return 200 <= status < 300
    if isinstance(status, str):
        return status.strip().lower() in ACCEPTED_STATUS_STRINGS
    return False


def decode_outcome(response: HttpResponse) -> Outcome:
    body = response.body
    if response.ok:
        moderation = body.get("status") if isinstance(body, dict) else None
        if isinstance(moderation, str) and not is_accepted_status(moderation):
            return Outcome.reject(
                RejectionReason.GENERIC, f"Held by moderation: {moderation}"
            )
        return Outcome.accept(body)

    code = error_code(body)
    reason = _REASON_BY_CODE.get(code) if code else None
    if reason is None:
        reason = _REASON_BY_STATUS.get(response.status_code, RejectionReason.GENERIC)
    return Outcome.reject(reason, error_message(body))


def requires_sign_in(cause: Any) -> bool:
    """True when a failed mutation should open the sign-in prompt instead of a toast."""
    if isinstance(cause, Outcome):
        return cause.reason is RejectionReason.UNAUTHENTICATED
    return isinstance(cause, HttpStatusError) and cause.status_code == 401
