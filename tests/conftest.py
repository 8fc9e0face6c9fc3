"""
Shared test fixtures and helpers for the Nestlet test suite.
"""

import json
from typing import Any, Dict, Optional

import pytest
import pytest_asyncio

from nestlet import NestletFactory
from nestlet.controller.context import ExecutionContext
from nestlet.request import Request
from nestlet.response import Response
from nestlet.testing import TestClient, make_test_receive, make_test_scope

import cats_app


# ============================================================================
# Request Helpers
# ============================================================================

def make_request(
    method: str = "GET",
    path: str = "/",
    *,
    body: Any = b"",
    headers: Optional[Dict[str, str]] = None,
    query_string: str = "",
) -> Request:
    """Build a Request backed by an in-memory ASGI receive channel."""
    if isinstance(body, (dict, list)):
        body = json.dumps(body).encode("utf-8")
    elif isinstance(body, str):
        body = body.encode("utf-8")
    scope = make_test_scope(method, path, query_string, headers=list((headers or {}).items()))
    return Request(scope, make_test_receive(body))


def make_context(request: Optional[Request] = None, response: Optional[Response] = None, **kw) -> ExecutionContext:
    return ExecutionContext(request or make_request(), response or Response(), **kw)


def response_json(response: Response) -> Any:
    return json.loads(response.body)


class Counter:
    """Records calls by name, for asserting which stages ran."""

    def __init__(self):
        self.calls: Dict[str, int] = {}
        self.events: list = []

    def hit(self, name: str) -> None:
        self.calls[name] = self.calls.get(name, 0) + 1
        self.events.append(name)

    def __getitem__(self, name: str) -> int:
        return self.calls.get(name, 0)


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def counter():
    return Counter()


@pytest_asyncio.fixture
async def cats():
    """Bootstrapped demo application (fresh state per test)."""
    app = await NestletFactory.create(cats_app.AppModule)
    yield app
    await app.close()


@pytest_asyncio.fixture
async def client(cats):
    return TestClient(cats)


@pytest.fixture
def auth_headers():
    return {"Authorization": "Bearer valid-token"}
