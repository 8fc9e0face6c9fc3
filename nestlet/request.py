"""
Request - ASGI request wrapper.

Provides:
- Lazy, cached body reading from the ASGI receive channel
- Query parameter and header access
- JSON/text decoding and the lenient ``payload()`` used by route pipelines
"""

from __future__ import annotations

import json as stdlib_json
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional

from ._datastructures import Headers, MultiDict
from .faults import BadRequest, HTTPFault


# ============================================================================
# Request Faults
# ============================================================================

class InvalidJSON(BadRequest):
    """Request body is not valid JSON."""
    code = "INVALID_JSON"
    default_message = "Invalid JSON body"


class PayloadTooLarge(HTTPFault):
    status = 413
    code = "PAYLOAD_TOO_LARGE"
    default_message = "Payload Too Large"


class ClientDisconnect(HTTPFault):
    """Client went away before the body was fully received."""
    status = 400
    code = "CLIENT_DISCONNECT"
    default_message = "Client disconnected"


# ============================================================================
# Request
# ============================================================================

class Request:
    """
    Request object handed to guards, pipes, interceptors and handlers.

    ``params`` holds the path parameters captured by the router.
    """

    def __init__(
        self,
        scope: Mapping[str, Any],
        receive: Callable[..., Awaitable[dict]],
        *,
        max_body_size: int = 10_485_760,  # 10 MiB
    ):
        self.scope = scope
        self._receive = receive
        self.max_body_size = max_body_size

        self.params: Dict[str, str] = {}
        self.state: Dict[str, Any] = {}

        self._body: Optional[bytes] = None
        self._headers: Optional[Headers] = None
        self._query_params: Optional[MultiDict] = None

    # ========================================================================
    # Basic Properties
    # ========================================================================

    @property
    def method(self) -> str:
        return self.scope.get("method", "GET").upper()

    @property
    def path(self) -> str:
        return self.scope.get("path", "/") or "/"

    @property
    def query_string(self) -> str:
        raw = self.scope.get("query_string", b"")
        return raw.decode("latin-1") if isinstance(raw, bytes) else raw

    @property
    def url(self) -> str:
        """Path plus query string, as sent by the client."""
        qs = self.query_string
        return f"{self.path}?{qs}" if qs else self.path

    @property
    def client(self) -> Optional[tuple]:
        return self.scope.get("client")

    @property
    def query_params(self) -> MultiDict:
        if self._query_params is None:
            self._query_params = MultiDict.from_query_string(self.query_string)
        return self._query_params

    @property
    def headers(self) -> Headers:
        if self._headers is None:
            self._headers = Headers(self.scope.get("headers", []))
        return self._headers

    def header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.headers.get(name, default)

    # ========================================================================
    # Body
    # ========================================================================

    async def body(self) -> bytes:
        """
        Read full request body (idempotent).

        Raises:
            ClientDisconnect: If the client disconnects mid-body
            PayloadTooLarge: If body exceeds max_body_size
        """
        if self._body is not None:
            return self._body

        chunks = []
        total = 0
        while True:
            message = await self._receive()
            if message["type"] == "http.disconnect":
                raise ClientDisconnect()
            chunk = message.get("body", b"")
            total += len(chunk)
            if total > self.max_body_size:
                raise PayloadTooLarge(metadata={"max_body_size": self.max_body_size})
            chunks.append(chunk)
            if not message.get("more_body", False):
                break

        self._body = b"".join(chunks)
        return self._body

    async def text(self, encoding: str = "utf-8") -> str:
        return (await self.body()).decode(encoding, errors="replace")

    async def json(self) -> Any:
        """
        Parse request body as JSON.

        Raises:
            InvalidJSON: If the body is not valid JSON
        """
        try:
            return stdlib_json.loads(await self.body())
        except (ValueError, UnicodeDecodeError) as exc:
            raise InvalidJSON(metadata={"error": str(exc)}) from exc

    async def payload(self) -> Any:
        """
        Body as seen by route handlers.

        JSON when the body parses, the raw text otherwise, ``{}`` when empty.
        """
        text = await self.text()
        if not text:
            return {}
        try:
            return stdlib_json.loads(text)
        except ValueError:
            return text

    def __repr__(self) -> str:
        return f"<Request {self.method} {self.url}>"
