"""The proxy application — an ASGI 3.0 callable.

Compiles the route table when constructed, so a bad backend target is
reported before any socket is bound. Owns the forwarder's upstream
client for the app's lifetime.
"""

import logging

import httpx

from prefixproxy._internal.asgi import Receive, Scope, Send
from prefixproxy.config import ProxyConfig
from prefixproxy.routing.director import make_director
from prefixproxy.routing.table import RouteTable
from prefixproxy.server.forwarder import Forwarder
from prefixproxy.server.handler import handle_request

logger = logging.getLogger("prefixproxy.server")


class ProxyApp:
    """The prefix-routing reverse proxy.

    Usage::

        app = ProxyApp(ProxyConfig(routes=(("/api", "backend:8000"),)))
        app.run()

    Or hand the instance to any ASGI server.

    Thread safety:
        The route table and director are immutable once built; every
        request reads them without locking.
    """

    __slots__ = ("config", "director", "forwarder", "table")

    def __init__(self, config: ProxyConfig | None = None, *, client: httpx.AsyncClient | None = None) -> None:
        self.config = config or ProxyConfig()
        self.table = RouteTable.from_mapping(self.config.routes)
        self.director = make_director(self.table, scheme=self.config.scheme)
        self.forwarder = Forwarder(client, timeout=self.config.upstream_timeout)

    def run(self, host: str | None = None, port: int | None = None) -> None:
        """Start serving. Blocks until the server stops."""
        from prefixproxy.server.run import run_server

        run_server(
            self,
            host=host or self.config.host,
            port=port if port is not None else self.config.port,
            log_level=self.config.log_level,
        )

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point.

        Handles the lifespan scope directly, then delegates HTTP scopes
        to the proxy pipeline. Other scopes (websocket) are not proxied.
        """
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        await handle_request(
            scope,
            receive,
            send,
            forwarder=self.forwarder,
            director=self.director,
        )

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Run the ASGI lifespan protocol.

        Opens the upstream client at startup and closes it, draining
        pooled connections, at shutdown.
        """
        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    self.forwarder.client  # noqa: B018
                    for route in self.table:
                        logger.info("Route %r -> %s", route.prefix, route.authority)
                    await send({"type": "lifespan.startup.complete"})
                except Exception as exc:
                    await send(
                        {
                            "type": "lifespan.startup.failed",
                            "message": str(exc),
                        }
                    )
                    return

            elif msg_type == "lifespan.shutdown":
                await self.forwarder.aclose()
                await send({"type": "lifespan.shutdown.complete"})
                return
