"""Minimal async GraphQL client for the Hasura engine behind the API."""

from __future__ import annotations

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class HasuraError(Exception):
    """Raised when Hasura cannot be reached or answers with errors."""


class HasuraClient:
    """Runs GraphQL documents against Hasura with the admin secret.

    The API authorises requests itself, so every call goes out with admin
    privileges and the user id passed as a plain variable.
    """

    def __init__(
        self,
        url: str,
        admin_secret: str | None = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        headers = {"Content-Type": "application/json"}
        if admin_secret:
            headers["x-hasura-admin-secret"] = admin_secret
        self._client = httpx.AsyncClient(
            headers=headers, timeout=timeout, transport=transport
        )
        self.url = url

    async def execute(self, query: str, variables: dict[str, Any] | None = None) -> dict:
        """Run ``query`` and return its ``data`` object."""
        try:
            response = await self._client.post(
                self.url, json={"query": query, "variables": variables or {}}
            )
        except httpx.HTTPError as e:
            logger.error(f"Hasura request failed: {e}")
            raise HasuraError(f"Hasura unavailable: {e}") from e

        if response.status_code >= 400:
            raise HasuraError(f"Hasura returned HTTP {response.status_code}")

        try:
            payload = response.json()
        except ValueError as e:
            raise HasuraError("Hasura returned a non-JSON body") from e

        errors = payload.get("errors")
        if errors:
            messages = "; ".join(str(err.get("message", err)) for err in errors)
            logger.error(f"Hasura GraphQL errors: {messages}")
            raise HasuraError(messages)
        return payload.get("data") or {}

    async def aclose(self) -> None:
        await self._client.aclose()
