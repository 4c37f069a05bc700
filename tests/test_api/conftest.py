"""Shared fixtures for API tests.

The Hasura dependency is replaced by ``FakeHasura``, which answers each
GraphQL document with canned data and records the variables it was given.
"""

import os

os.environ.setdefault("HASURA_GRAPHQL_URL", "http://hasura.test/v1/graphql")
os.environ.setdefault("JWT_SECRET", "s" * 32)
os.environ.setdefault("CORS_ORIGINS", "http://localhost:3000")

import pytest
from fastapi.testclient import TestClient

from apps.api.core.auth import create_token
from apps.api.core.deps import get_hasura
from apps.api.main import app


class FakeHasura:
    def __init__(self):
        self.responses = {}
        self.calls = []

    def on(self, query, data):
        """Answer ``query`` with ``data``, a callable of the variables, or an exception."""
        self.responses[query] = data

    async def execute(self, query, variables=None):
        variables = variables or {}
        self.calls.append((query, variables))
        answer = self.responses.get(query, {})
        if callable(answer):
            answer = answer(variables)
        if isinstance(answer, Exception):
            raise answer
        return answer

    def executed(self, query):
        return [variables for q, variables in self.calls if q == query]


@pytest.fixture
def hasura():
    return FakeHasura()


@pytest.fixture
def client(hasura):
    app.dependency_overrides[get_hasura] = lambda: hasura
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {create_token(1, name='Viewer')}"}
