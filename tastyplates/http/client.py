"""Async HTTP client for the review platform with a process-wide singleton."""

import inspect
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, Union

import httpx

from .config import HttpConfig
from .errors import (
    InvalidResponseError,
    NetworkError,
    RequestTimeoutError,
    SessionTerminatedError,
)

logger = logging.getLogger(__name__)

SessionTerminatedHook = Callable[[str], Union[None, Awaitable[None]]]

_AUTH_STATUSES = (401, 403)


@dataclass
class HttpResponse:
    """Decoded platform response."""

    status_code: int
    body: Any

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


def error_code(body: Any) -> Optional[str]:
    """Extract the machine readable error code from an error body.

    The platform answers either ``{"code": ..., "message": ...}`` or
    ``{"detail": {"code": ..., "message": ...}}``.
    """
    if not isinstance(body, dict):
        return None
    code = body.get("code")
    if code is None and isinstance(body.get("detail"), dict):
        code = body["detail"].get("code")
    return str(code) if code is not None else None


def error_message(body: Any) -> str:
    """Extract a human readable error message from an error body."""
    if not isinstance(body, dict):
        return ""
    for key in ("message", "error"):
        if isinstance(body.get(key), str):
            return body[key]
    detail = body.get("detail")
    if isinstance(detail, str):
        return detail
    if isinstance(detail, dict) and isinstance(detail.get("message"), str):
        return detail["message"]
    return ""


class HttpClient:
    """Thin wrapper over ``httpx.AsyncClient``.

    Attaches bearer tokens, enforces the timeout, decodes JSON and turns an
    auth-invalid error code into a forced sign-out. Nothing is retried.
    """

    def __init__(
        self,
        config: Optional[HttpConfig] = None,
        on_session_terminated: Optional[SessionTerminatedHook] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if config is None:
            config = HttpConfig.from_env()
        config.validate()

        self.config = config
        self.on_session_terminated = on_session_terminated
        self._client = httpx.AsyncClient(
            base_url=config.base_url,
            timeout=config.timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "HttpClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def get(self, endpoint: str, **kwargs) -> HttpResponse:
        return await self.request("GET", endpoint, **kwargs)

    async def post(self, endpoint: str, **kwargs) -> HttpResponse:
        return await self.request("POST", endpoint, **kwargs)

    async def put(self, endpoint: str, **kwargs) -> HttpResponse:
        return await self.request("PUT", endpoint, **kwargs)

    async def delete(self, endpoint: str, **kwargs) -> HttpResponse:
        return await self.request("DELETE", endpoint, **kwargs)

    async def request(
        self,
        method: str,
        endpoint: str,
        *,
        token: Optional[str] = None,
        json: Any = None,
        params: Optional[dict] = None,
    ) -> HttpResponse:
        """Send a request and decode its body.

        Raises:
            RequestTimeoutError: If the timeout elapsed
            NetworkError: If the platform could not be reached
            InvalidResponseError: If a 2xx body is not JSON
            SessionTerminatedError: If the server rejected the session token
        """
        headers = {}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        try:
            response = await self._client.request(
                method, endpoint, json=json, params=params, headers=headers
            )
        except httpx.TimeoutException as e:
            logger.warning(f"{method} {endpoint} timed out after {self.config.timeout}s")
            raise RequestTimeoutError(f"{method} {endpoint} timed out") from e
        except httpx.TransportError as e:
            logger.warning(f"{method} {endpoint} failed: {e}")
            raise NetworkError(f"{method} {endpoint} failed: {e}") from e

        body = self._decode(method, endpoint, response)

        if response.status_code in _AUTH_STATUSES:
            code = error_code(body)
            if code in self.config.invalid_token_codes:
                logger.warning(f"Session rejected by {endpoint} ({code}); signing out")
                await self._terminate_session(code)
                raise SessionTerminatedError(code)

        return HttpResponse(status_code=response.status_code, body=body)

    def _decode(self, method: str, endpoint: str, response: httpx.Response) -> Any:
        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            if response.is_success:
                logger.error(f"{method} {endpoint} returned a non-JSON body")
                raise InvalidResponseError("Invalid JSON response") from e
            return {"message": response.text[:500]}

    async def _terminate_session(self, code: str) -> None:
        if self.on_session_terminated is None:
            return
        result = self.on_session_terminated(code)
        if inspect.isawaitable(result):
            await result


# Global client instance for singleton pattern
_client_instance: Optional[HttpClient] = None


def get_http_client(
    config: Optional[HttpConfig] = None,
    on_session_terminated: Optional[SessionTerminatedHook] = None,
) -> HttpClient:
    """Get the shared HTTP client, creating it on first use.

    Args:
        config: Client configuration. If None, loads from environment.
        on_session_terminated: Forced sign-out hook for the first creation

    Returns:
        Shared HttpClient instance
    """
    global _client_instance

    if _client_instance is None:
        _client_instance = HttpClient(config, on_session_terminated=on_session_terminated)
    return _client_instance


def reset_client() -> None:
    """Forget the shared client instance.

    The caller owns closing it (``await client.aclose()``) when it was used.
    """
    global _client_instance
    _client_instance = None
