"""ASGI response sending — writes a dispatch outcome as ASGI messages.

Routeline has no response objects: failures become a plain-text status
and message, successes carry the action's return value when it is text
or bytes.
"""

import logging
from typing import Any

from routeline._internal.asgi import Send

logger = logging.getLogger("routeline.server")


def _body_allowed(status: int) -> bool:
    """Whether an HTTP status code permits a response body."""
    # RFC: 1xx, 204, and 304 responses do not include a message body.
    return not (100 <= status < 200 or status in {204, 304})


def encode_body(value: Any) -> bytes:
    """Body bytes for an action's return value; anything but text/bytes is empty."""
    if isinstance(value, bytes):
        return value
    if isinstance(value, str):
        return value.encode("utf-8")
    return b""


async def send_text(
    send: Send,
    status: int,
    body: bytes,
    headers: tuple[tuple[str, str], ...] = (),
    content_type: str = "text/plain; charset=utf-8",
) -> None:
    """Send a complete single-body response."""
    raw_headers: list[tuple[bytes, bytes]] = [
        (b"content-type", content_type.encode("latin-1")),
    ]
    for name, value in headers:
        raw_headers.append((name.lower().encode("latin-1"), value.encode("latin-1")))

    if not _body_allowed(status):
        body = b""
    raw_headers.append((b"content-length", str(len(body)).encode("latin-1")))

    await send(
        {
            "type": "http.response.start",
            "status": status,
            "headers": raw_headers,
        }
    )
    await send(
        {
            "type": "http.response.body",
            "body": body,
        }
    )
