"""The forwarder — performs the upstream HTTP exchange with httpx.

Runs the director, streams the request body to the chosen backend and
streams the backend's status, headers and body back through ``send``.
Backend failures never raise out of ``forward()``: they are committed
as a 502 or 504 status instead.

The forwarder never sends the closing ``more_body=False`` message; the
handler owns the end of the response so it can append a diagnostic.
"""

import logging
from dataclasses import replace

import httpx

from prefixproxy._internal.asgi import Send
from prefixproxy.errors import BadGateway, GatewayTimeout, UpstreamError
from prefixproxy.http.headers import Headers
from prefixproxy.http.request import OutboundRequest, Request
from prefixproxy.routing.director import Director
from prefixproxy.server.errors import is_gateway_failure

logger = logging.getLogger("prefixproxy.forwarder")

_ERROR_HEADERS = [(b"content-type", b"text/plain; charset=utf-8")]


def _with_forwarded_for(outbound: OutboundRequest, request: Request) -> OutboundRequest:
    """Append the client address to ``X-Forwarded-For`` (one combined line)."""
    if request.client is None:
        return outbound
    prior = outbound.headers.get_list("x-forwarded-for")
    chain = ", ".join([*prior, request.client[0]])
    headers = outbound.headers.without(("x-forwarded-for",)).add("X-Forwarded-For", chain)
    return replace(outbound, headers=headers)


def _has_body(request: Request) -> bool:
    return "content-length" in request.headers or "transfer-encoding" in request.headers


class Forwarder:
    """Forwards requests to backends over a shared ``httpx.AsyncClient``.

    The client (and its connection pool) lives as long as the app. Pass
    one in to control transport and limits, e.g. in tests::

        forwarder = Forwarder(httpx.AsyncClient(transport=httpx.MockTransport(handler)))
    """

    __slots__ = ("_client", "_timeout")

    def __init__(self, client: httpx.AsyncClient | None = None, *, timeout: float = 30.0) -> None:
        self._client = client
        self._timeout = timeout

    @property
    def client(self) -> httpx.AsyncClient:
        """The upstream client, created on first use."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self._timeout),
                follow_redirects=False,
                trust_env=False,
            )
        return self._client

    async def aclose(self) -> None:
        """Close the upstream client and its pooled connections."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def forward(self, request: Request, send: Send, director: Director) -> None:
        """Route *request* with *director* and relay the backend's response."""
        outbound = _with_forwarded_for(director(request), request)

        try:
            response = await self._open(outbound)
        except UpstreamError as exc:
            logger.warning("%d %s %s: %s", exc.status, request.method, request.path, exc.detail)
            await send(
                {
                    "type": "http.response.start",
                    "status": exc.status,
                    "headers": _ERROR_HEADERS,
                }
            )
            return

        try:
            await self._relay(outbound, response, send)
        finally:
            await response.aclose()

    async def _open(self, outbound: OutboundRequest) -> httpx.Response:
        """Send the upstream request and return the streaming response.

        Raises:
            BadGateway: No route matched, or the backend was unreachable.
            GatewayTimeout: The backend did not answer in time.
        """
        if not outbound.routed:
            msg = f"no route for {outbound.source.path!r}"
            raise BadGateway(msg)

        content = outbound.body() if _has_body(outbound.source) else None
        try:
            upstream = self.client.build_request(
                outbound.method,
                outbound.url,
                headers=list(outbound.headers.end_to_end().raw),
                content=content,
            )
            return await self.client.send(upstream, stream=True)
        except httpx.TimeoutException as exc:
            msg = f"{outbound.host} timed out: {exc!r}"
            raise GatewayTimeout(msg) from exc
        except (httpx.TransportError, httpx.InvalidURL) as exc:
            msg = f"{outbound.host} unreachable: {exc!r}"
            raise BadGateway(msg) from exc

    async def _relay(self, outbound: OutboundRequest, response: httpx.Response, send: Send) -> None:
        """Stream the backend's status, headers and raw body through *send*."""
        headers = Headers.from_raw(response.headers.raw).end_to_end()
        if is_gateway_failure(response.status_code):
            # The handler appends a diagnostic, so the upstream length no longer holds.
            headers = headers.without(("content-length",))

        await send(
            {
                "type": "http.response.start",
                "status": response.status_code,
                "headers": list(headers.raw),
            }
        )

        try:
            async for chunk in response.aiter_raw():
                if chunk:
                    await send({"type": "http.response.body", "body": chunk, "more_body": True})
        except httpx.HTTPError as exc:
            logger.warning("%s dropped mid-response: %r", outbound.url, exc)
