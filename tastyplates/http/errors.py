"""Exceptions raised by the platform HTTP client."""

from typing import Any, Optional


class ApiError(Exception):
    """Base exception for platform API errors."""
    pass


class NetworkError(ApiError):
    """Raised when the platform cannot be reached."""
    pass


class RequestTimeoutError(NetworkError):
    """Raised when a request exceeds the configured timeout."""
    pass


class InvalidResponseError(ApiError):
    """Raised when a successful response does not carry a JSON body."""
    pass


class HttpStatusError(ApiError):
    """Raised by services when a non-2xx response has no business meaning."""

    def __init__(
        self,
        status_code: int,
        message: str = "",
        code: Optional[str] = None,
        body: Any = None,
    ):
        super().__init__(f"HTTP {status_code}: {message or 'request failed'}")
        self.status_code = status_code
        self.message = message
        self.code = code
        self.body = body


class SessionTerminatedError(ApiError):
    """Raised after the server rejected the session token and the user was signed out."""

    def __init__(self, code: str):
        super().__init__(f"Session terminated by server ({code})")
        self.code = code
