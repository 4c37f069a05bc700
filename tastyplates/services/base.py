"""Shared plumbing for the platform service façades."""

from __future__ import annotations

from typing import Any

from tastyplates.http.client import HttpClient, HttpResponse, error_code, error_message
from tastyplates.http.errors import HttpStatusError


class BaseService:
    """Base class for services that wrap platform endpoints."""

    def __init__(self, http: HttpClient):
        self.http = http

    @staticmethod
    def _raise_for_status(response: HttpResponse) -> None:
        """Raise ``HttpStatusError`` for a non-2xx response."""
        if not response.ok:
            raise HttpStatusError(
                response.status_code,
                error_message(response.body),
                code=error_code(response.body),
                body=response.body,
            )

    @staticmethod
    def _items(body: Any) -> list:
        """List payloads arrive bare, under ``items`` or under ``data``."""
        if isinstance(body, list):
            return body
        if isinstance(body, dict):
            return body.get("items") or body.get("data") or []
        return []

    @staticmethod
    def _page_params(cursor: str | None, limit: int) -> dict:
        params: dict = {"limit": limit}
        if cursor is not None:
            params["cursor"] = cursor
        return params
