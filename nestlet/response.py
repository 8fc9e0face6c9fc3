"""
Response - writable HTTP response buffer.

Handlers, filters and interceptors may write to the response directly;
the pipeline only serializes the handler result when nothing has ended
the response yet. The ASGI adapter flushes the buffer afterwards.
"""

from __future__ import annotations

import json as stdlib_json
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union


def _json_default_serializer(o):
    """Default JSON serializer for non-standard types."""
    if isinstance(o, (set, tuple)):
        return list(o)
    if hasattr(o, "isoformat"):
        return o.isoformat()
    if hasattr(o, "__dict__"):
        return vars(o)
    return str(o)


def dumps(data: Any) -> str:
    return stdlib_json.dumps(data, default=_json_default_serializer, separators=(",", ":"))


class ResponseAlreadyEnded(RuntimeError):
    pass


class Response:
    """
    Buffered response with a Node-like write/end surface.

    Example:
        ```python
        response.status_code = 201
        response.json({"id": 3})
        ```
    """

    def __init__(self, status_code: int = 200, headers: Optional[Dict[str, str]] = None):
        self.status_code = status_code
        self.headers: Dict[str, str] = {k.lower(): v for k, v in (headers or {}).items()}
        self._chunks: List[bytes] = []
        self._ended = False

    @property
    def ended(self) -> bool:
        return self._ended

    @property
    def body(self) -> bytes:
        return b"".join(self._chunks)

    def set_header(self, name: str, value: str) -> None:
        self.headers[name.lower()] = value

    def get_header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.headers.get(name.lower(), default)

    def status(self, code: int) -> "Response":
        self.status_code = code
        return self

    def write(self, data: Union[bytes, str]) -> None:
        if self._ended:
            raise ResponseAlreadyEnded("write() after end()")
        if isinstance(data, str):
            data = data.encode("utf-8")
        self._chunks.append(data)

    def end(self, data: Union[bytes, str, None] = None) -> None:
        if self._ended:
            raise ResponseAlreadyEnded("end() called twice")
        if data is not None:
            self.write(data)
        self._ended = True

    def json(self, data: Any, status: Optional[int] = None) -> None:
        """Serialize ``data`` as JSON and end the response."""
        if status is not None:
            self.status_code = status
        self.set_header("content-type", "application/json")
        self.end(dumps(data))

    def text(self, data: str, status: Optional[int] = None) -> None:
        if status is not None:
            self.status_code = status
        self.set_header("content-type", "text/plain; charset=utf-8")
        self.end(data)

    # ========================================================================
    # ASGI
    # ========================================================================

    def _prepare_headers(self, body: bytes) -> List[tuple]:
        headers = dict(self.headers)
        headers["content-length"] = str(len(body))
        return [(k.encode("latin-1"), v.encode("latin-1")) for k, v in headers.items()]

    async def send_asgi(self, send: Callable[[dict], Awaitable[None]]) -> None:
        """Send the buffered response via ASGI."""
        body = self.body
        await send({
            "type": "http.response.start",
            "status": self.status_code,
            "headers": self._prepare_headers(body),
        })
        await send({"type": "http.response.body", "body": body, "more_body": False})

    def __repr__(self) -> str:
        state = "ended" if self._ended else "open"
        return f"<Response {self.status_code} {len(self.body)}B {state}>"
