"""ASGI handler — translates an ASGI HTTP scope into one dispatch pass.

The only component that touches raw ASGI directly. Reads the method and
request target from the scope, dispatches synchronously, awaits the
action's value when it is a coroutine, and writes the outcome back
through ASGI send(). Only HTTP is served; websocket connections are
closed without being accepted.
"""

import inspect
import logging
from collections.abc import Mapping

from routeline._internal.asgi import HTTPScope, Receive, Scope, Send
from routeline.dispatcher import Dispatcher
from routeline.errors import HTTPError, ResolutionError
from routeline.middleware.protocol import MiddlewareUnit
from routeline.routing.table import RouteTable
from routeline.server.sender import encode_body, send_text

logger = logging.getLogger("routeline.server")


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    dispatcher: Dispatcher,
    table: RouteTable,
    middlewares: Mapping[str, MiddlewareUnit],
) -> None:
    """Process a single HTTP request through the dispatcher."""
    if scope["type"] == "websocket":
        await reject_websocket(receive, send)
        return
    if scope["type"] != "http":
        return

    http = HTTPScope.from_scope(scope)
    try:
        result = dispatcher.dispatch(table, middlewares, http.method, http.target)
    except ResolutionError as exc:
        logger.exception("Could not build controller for %s %s", http.method, http.path)
        detail = str(exc) if dispatcher.config.debug else "Internal Server Error"
        await send_text(send, 500, detail.encode("utf-8"))
        return

    if not result.ok:
        await send_text(send, result.status, result.message.encode("utf-8"), result.headers)
        return

    value = result.value
    if inspect.isawaitable(value):
        try:
            value = await value
        except HTTPError as exc:
            logger.info("Action for %s %s stopped: %s", http.method, http.path, exc)
            await send_text(send, exc.status, exc.detail.encode("utf-8"), exc.headers)
            return

    content_type = (
        "application/octet-stream" if isinstance(value, bytes) else "text/html; charset=utf-8"
    )
    await send_text(send, 200, encode_body(value), content_type=content_type)


async def reject_websocket(receive: Receive, send: Send) -> None:
    """Refuse a websocket handshake; routeline serves plain HTTP only."""
    message = await receive()
    if message["type"] == "websocket.connect":
        await send({"type": "websocket.close", "code": 1000})


async def handle_lifespan(receive: Receive, send: Send) -> None:
    """Acknowledge the ASGI lifespan protocol; routeline has no startup work."""
    while True:
        message = await receive()
        msg_type = message["type"]
        if msg_type == "lifespan.startup":
            await send({"type": "lifespan.startup.complete"})
        elif msg_type == "lifespan.shutdown":
            await send({"type": "lifespan.shutdown.complete"})
            return
