"""
Nestlet Testing - in-process HTTP test client.

Requests go straight into the application's ASGI callable; nothing
listens on a socket.
"""

from __future__ import annotations

import json as stdlib_json
from typing import Any, Dict, List, Optional
from urllib.parse import urlsplit

from .utils import make_test_receive, make_test_scope


class TestResponse:
    """Response captured from the ASGI ``send`` events of one request."""

    __test__ = False

    __slots__ = ("status_code", "headers", "body", "request_method", "request_path")

    def __init__(
        self,
        status_code: int,
        headers: Dict[str, str],
        body: bytes,
        *,
        request_method: str = "",
        request_path: str = "",
    ):
        self.status_code = status_code
        self.headers = headers
        self.body = body
        self.request_method = request_method
        self.request_path = request_path

    @property
    def text(self) -> str:
        return self.body.decode("utf-8")

    def json(self) -> Any:
        return stdlib_json.loads(self.body)

    @property
    def is_success(self) -> bool:
        return self.status_code // 100 == 2

    @property
    def content_type(self) -> str:
        return self.headers.get("content-type", "").partition(";")[0].strip()

    def __repr__(self) -> str:
        return f"<TestResponse {self.status_code} for {self.request_method} {self.request_path}>"


class _SendRecorder:
    """ASGI ``send`` callable that accumulates one HTTP response."""

    def __init__(self):
        self.status_code = 500
        self.headers: Dict[str, str] = {}
        self.chunks: List[bytes] = []

    async def __call__(self, event: dict) -> None:
        kind = event["type"]
        if kind == "http.response.start":
            self.status_code = event["status"]
            self.headers.update(
                (name.decode("latin-1").lower(), value.decode("latin-1"))
                for name, value in event.get("headers", [])
            )
        elif kind == "http.response.body":
            self.chunks.append(event.get("body", b""))


class TestClient:
    """
    In-process ASGI test client.

    Example:
        ```python
        app = await NestletFactory.create(AppModule)
        client = TestClient(app)
        resp = await client.post("/cats", json={"name": "Tom"})
        assert resp.status_code == 201
        ```
    """

    __test__ = False

    def __init__(self, app: Any, *, default_headers: Optional[Dict[str, str]] = None):
        self.app = app
        self.default_headers = {k.lower(): v for k, v in (default_headers or {}).items()}

    def set_bearer_token(self, token: str) -> None:
        self.default_headers["authorization"] = "Bearer " + token

    def clear_auth(self) -> None:
        self.default_headers.pop("authorization", None)

    async def get(self, path: str, **kwargs: Any) -> TestResponse:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs: Any) -> TestResponse:
        return await self.request("POST", path, **kwargs)

    async def put(self, path: str, **kwargs: Any) -> TestResponse:
        return await self.request("PUT", path, **kwargs)

    async def patch(self, path: str, **kwargs: Any) -> TestResponse:
        return await self.request("PATCH", path, **kwargs)

    async def delete(self, path: str, **kwargs: Any) -> TestResponse:
        return await self.request("DELETE", path, **kwargs)

    async def request(
        self,
        method: str,
        path: str,
        *,
        headers: Optional[Dict[str, str]] = None,
        query_string: str = "",
        json: Any = None,
        body: bytes = b"",
    ) -> TestResponse:
        """
        Send one request through the application.

        A query string may be given inline (``"/cats?name=tom"``) or via
        ``query_string``. ``json`` is encoded and replaces ``body``.
        """
        url = urlsplit(path)
        merged = {**self.default_headers, **{k.lower(): v for k, v in (headers or {}).items()}}

        if json is not None:
            body = stdlib_json.dumps(json).encode("utf-8")
            merged.setdefault("content-type", "application/json")
        if body:
            merged["content-length"] = str(len(body))

        scope = make_test_scope(
            method,
            url.path or "/",
            query_string or url.query,
            headers=merged.items(),
        )
        recorder = _SendRecorder()
        await self.app(scope, make_test_receive(body), recorder)

        return TestResponse(
            recorder.status_code,
            recorder.headers,
            b"".join(recorder.chunks),
            request_method=method.upper(),
            request_path=url.path or "/",
        )
