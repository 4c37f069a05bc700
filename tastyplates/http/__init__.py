"""HTTP access to the review platform.

Example:
    >>> from tastyplates.http import HttpClient, HttpConfig
    >>> client = HttpClient(HttpConfig(base_url="https://api.example.com"))
"""

from .client import (
    HttpClient,
    HttpResponse,
    error_code,
    error_message,
    get_http_client,
    reset_client,
)
from .config import HttpConfig, InteractionConfig
from .errors import (
    ApiError,
    HttpStatusError,
    InvalidResponseError,
    NetworkError,
    RequestTimeoutError,
    SessionTerminatedError,
)

__all__ = [
    # Client
    "HttpClient",
    "HttpResponse",
    "error_code",
    "error_message",
    "get_http_client",
    "reset_client",
    # Config
    "HttpConfig",
    "InteractionConfig",
    # Errors
    "ApiError",
    "HttpStatusError",
    "InvalidResponseError",
    "NetworkError",
    "RequestTimeoutError",
    "SessionTerminatedError",
]
