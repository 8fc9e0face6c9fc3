"""
Nestlet Testing - ASGI scope and receive factories.
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Iterable, List, Optional, Tuple, Union


HeaderPairs = Iterable[Tuple[Union[str, bytes], Union[str, bytes]]]


def _latin1(value: Union[str, bytes]) -> bytes:
    return value if isinstance(value, bytes) else value.encode("latin-1")


def make_test_scope(
    method: str = "GET",
    path: str = "/",
    query_string: Union[str, bytes] = "",
    headers: Optional[HeaderPairs] = None,
    client: Optional[Tuple[str, int]] = None,
) -> dict:
    """
    ASGI ``http`` scope for one request.

    ``headers`` are ``(name, value)`` pairs given as ``str`` or ``bytes``;
    ``query_string`` excludes the leading ``?``.
    """
    if isinstance(query_string, str):
        query_string = query_string.encode("utf-8")

    return {
        "type": "http",
        "asgi": {"version": "3.0", "spec_version": "2.3"},
        "http_version": "1.1",
        "scheme": "http",
        "method": method.upper(),
        "path": path,
        "raw_path": path.encode("utf-8"),
        "root_path": "",
        "query_string": query_string,
        "headers": [(_latin1(name).lower(), _latin1(value)) for name, value in headers or ()],
        "server": ("127.0.0.1", 3000),
        "client": client or ("127.0.0.1", 12345),
    }


def make_test_receive(
    body: bytes = b"",
    *,
    chunks: Optional[List[bytes]] = None,
) -> Callable[[], Awaitable[dict]]:
    """
    ASGI receive channel that replays a request body.

    With ``chunks`` the body arrives in several ``http.request`` messages.
    Once the body is consumed every further call reports a disconnect.
    """
    parts = list(chunks) if chunks else [body]
    pending: List[dict[str, Any]] = [
        {"type": "http.request", "body": part, "more_body": index < len(parts) - 1}
        for index, part in enumerate(parts)
    ]

    async def receive() -> dict:
        if pending:
            return pending.pop(0)
        return {"type": "http.disconnect"}

    return receive
