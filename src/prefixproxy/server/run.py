"""Serving the proxy with uvicorn.

The listener loop, connection handling and HTTP/1.1 framing all belong
to uvicorn; the proxy is just the ASGI callable it drives.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from prefixproxy.app import ProxyApp

logger = logging.getLogger("prefixproxy.server")


def run_server(
    app: ProxyApp,
    host: str = "0.0.0.0",
    port: int = 8080,
    *,
    log_level: str = "info",
    keep_alive_timeout: int = 5,
) -> None:
    """Run *app* until interrupted.

    Args:
        app: ProxyApp instance.
        host: Bind address (default: 0.0.0.0 for all interfaces).
        port: Bind port (default: 8080).
        log_level: uvicorn log level (debug, info, warning, error, critical).
        keep_alive_timeout: Client keep-alive timeout (whole seconds).

    A failure to bind exits the process (uvicorn logs the socket error
    and raises ``SystemExit(1)``).
    """
    import uvicorn

    config = uvicorn.Config(
        app,
        host=host,
        port=port,
        lifespan="on",
        log_level=log_level,
        timeout_keep_alive=keep_alive_timeout,
        # The proxy adds its own X-Forwarded-* headers; keep the client's as sent.
        proxy_headers=False,
        server_header=False,
    )
    server = uvicorn.Server(config)
    logger.info("Listen %s:%d...", host, port)
    server.run()
