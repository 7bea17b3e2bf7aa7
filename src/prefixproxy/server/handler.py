"""ASGI handler — the per-request proxy pipeline.

Wraps ``send`` in a ResponseObserver, lets the forwarder route and relay
the request, then inspects the observed status: a gateway failure gets a
plain-text diagnostic body. The handler always sends the final body
message that closes the response.
"""

import logging

from prefixproxy._internal.asgi import Receive, Scope, Send
from prefixproxy.http.request import Request
from prefixproxy.routing.director import Director
from prefixproxy.server.errors import diagnostic_body, is_gateway_failure
from prefixproxy.server.forwarder import Forwarder
from prefixproxy.server.observer import ResponseObserver

logger = logging.getLogger("prefixproxy.server")

_TEXT_HEADERS = [(b"content-type", b"text/plain; charset=utf-8")]


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    forwarder: Forwarder,
    director: Director,
) -> None:
    """Proxy a single HTTP request."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive)
    observer = ResponseObserver(send)

    try:
        await forwarder.forward(request, observer, director)
    except Exception:
        logger.exception("500 %s %s", request.method, request.path)
        if not observer.started:
            await observer(
                {
                    "type": "http.response.start",
                    "status": 500,
                    "headers": _TEXT_HEADERS,
                }
            )
            await send(
                {
                    "type": "http.response.body",
                    "body": b"Internal Server Error",
                    "more_body": False,
                }
            )
            return
    else:
        if not observer.started:
            # Nothing was committed; answer as the unreachable-backend case.
            await observer(
                {
                    "type": "http.response.start",
                    "status": 502,
                    "headers": _TEXT_HEADERS,
                }
            )

    body = b""
    if is_gateway_failure(observer.status):
        body = diagnostic_body(observer.status)

    # Straight to the real sink: the diagnostic is not part of the relayed response.
    await send({"type": "http.response.body", "body": body, "more_body": False})
