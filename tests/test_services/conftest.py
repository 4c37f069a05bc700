"""Shared fixtures for service façade tests.

A ``FakePlatform`` routes ``(method, path)`` pairs to canned responses and
records every request, so tests can assert on calls without a server.
"""

import json

import httpx
import pytest

from tastyplates.http.client import HttpClient
from tastyplates.http.config import HttpConfig


class FakePlatform:
    def __init__(self):
        self.routes = {}
        self.requests = []

    def on(self, method, path, status_code=200, body=None, text=None):
        self.routes[(method, path)] = (status_code, body, text)

    def calls(self, method=None, path=None):
        return [
            r for r in self.requests
            if (method is None or r.method == method) and (path is None or r.url.path == path)
        ]

    def json_of(self, request):
        return json.loads(request.content) if request.content else None

    def __call__(self, request):
        self.requests.append(request)
        key = (request.method, request.url.path)
        if key not in self.routes:
            return httpx.Response(404, json={"detail": "Not Found"})
        status_code, body, text = self.routes[key]
        if text is not None:
            return httpx.Response(status_code, text=text)
        if body is None:
            return httpx.Response(status_code)
        return httpx.Response(status_code, json=body)


@pytest.fixture
def platform():
    return FakePlatform()


@pytest.fixture
def http(platform):
    return HttpClient(
        HttpConfig(base_url="http://api.test"),
        transport=httpx.MockTransport(platform),
    )
