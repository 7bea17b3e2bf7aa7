"""prefixproxy — a path-prefix HTTP reverse proxy.

Requests are routed to the backend whose configured path prefix is the
longest match for the request path. Unreachable or slow backends answer
with ``502 Bad Gateway`` / ``504 Gateway Timeout`` and a one-line
plain-text diagnostic.

Basic usage::

    from prefixproxy import ProxyApp, load_config

    app = ProxyApp(load_config("config.json"))
    app.run()

From the shell::

    prefixproxy --config /etc/stupid-proxy/config.json
"""

__version__ = "0.1.0"
__all__ = [
    "BadGateway",
    "ConfigurationError",
    "GatewayTimeout",
    "ProxyApp",
    "ProxyConfig",
    "ProxyError",
    "Route",
    "RouteTable",
    "UpstreamError",
    "load_config",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import prefixproxy`` fast while providing a clean top-level API.
    """
    if name == "ProxyApp":
        from prefixproxy.app import ProxyApp

        return ProxyApp

    if name in ("ProxyConfig", "load_config"):
        from prefixproxy import config as _config

        return getattr(_config, name)

    if name in ("Route", "RouteTable"):
        from prefixproxy import routing as _routing

        return getattr(_routing, name)

    if name in ("BadGateway", "ConfigurationError", "GatewayTimeout", "ProxyError", "UpstreamError"):
        from prefixproxy import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
