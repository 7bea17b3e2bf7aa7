"""Immutable HTTP requests, inbound and outbound.

``Request`` is what the client sent: frozen metadata with async body
access. ``OutboundRequest`` is what the director decided to send to the
backend. Routing never mutates a ``Request``; it produces a new
``OutboundRequest`` instead.
"""

from __future__ import annotations

import string
from collections.abc import AsyncGenerator
from dataclasses import dataclass, field
from urllib.parse import quote

from prefixproxy._internal.asgi import Receive, Scope
from prefixproxy.http.headers import Headers

# Printable ASCII except "#", which cannot appear in a request target
_TARGET_SAFE = string.punctuation.replace("#", "")


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable inbound HTTP request.

    Metadata (method, path, headers, etc.) is frozen at creation.
    The body is streamed once via ``.stream()``.
    """

    method: str
    path: str
    raw_path: bytes
    query_string: bytes
    headers: Headers
    http_version: str
    scheme: str
    server: tuple[str, int] | None
    client: tuple[str, int] | None

    # Private: ASGI receive callable for body streaming
    _receive: Receive = field(repr=False, compare=False)

    # -- Computed properties --

    @property
    def host(self) -> str:
        """The client-facing host: the ``Host`` header, else the server address."""
        host = self.headers.get("host")
        if host:
            return host
        if self.server is not None:
            name, port = self.server
            return f"{name}:{port}"
        return ""

    @property
    def target(self) -> str:
        """Request target as sent on the wire (raw path + query string).

        Printable ASCII passes through untouched, existing escapes
        included. Other bytes are percent-encoded, so the backend
        receives the same octets the client sent.
        """
        raw_path = self.raw_path or self.path.encode("utf-8")
        path = quote(raw_path, safe=_TARGET_SAFE)
        if self.query_string:
            return f"{path}?{quote(self.query_string, safe=_TARGET_SAFE)}"
        return path

    # -- Async body access --

    async def stream(self) -> AsyncGenerator[bytes, None]:
        """Stream the request body in chunks."""
        while True:
            message = await self._receive()
            if message["type"] == "http.disconnect":
                break
            body = message.get("body", b"")
            if body:
                yield body
            if not message.get("more_body", False):
                break

    # -- Factory --

    @classmethod
    def from_asgi(cls, scope: Scope, receive: Receive) -> Request:
        """Create a Request from an ASGI scope and receive callable."""
        server = scope.get("server")
        client = scope.get("client")
        return cls(
            method=scope["method"],
            path=scope["path"],
            raw_path=scope.get("raw_path") or b"",
            query_string=scope.get("query_string", b""),
            headers=Headers.from_raw(scope.get("headers", ())),
            http_version=scope.get("http_version", "1.1"),
            scheme=scope.get("scheme", "http"),
            server=tuple(server) if server else None,
            client=tuple(client) if client else None,
            _receive=receive,
        )


@dataclass(frozen=True, slots=True)
class OutboundRequest:
    """The request the forwarder sends to a backend.

    ``host`` is the backend authority chosen by the director, or ``""``
    when no route matched (an unroutable request).
    """

    method: str
    scheme: str
    host: str
    target: str
    headers: Headers
    source: Request = field(repr=False, compare=False)

    @property
    def routed(self) -> bool:
        """True if the director picked a backend."""
        return bool(self.host)

    @property
    def url(self) -> str:
        """Absolute URL of the upstream request."""
        return f"{self.scheme}://{self.host}{self.target}"

    def body(self) -> AsyncGenerator[bytes, None]:
        """The inbound body, streamed through unchanged."""
        return self.source.stream()

