"""Proxy configuration.

ProxyConfig is a frozen dataclass — immutable after creation, no
string-key dict lookups once the file has been validated.

The on-disk format is a JSON object::

    {
        "listen": ":8080",
        "routes": {
            "/api": "http://backend-a:8000",
            "/api/v2": "backend-b:8000",
            "": "fallback:80"
        }
    }
"""

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from prefixproxy.errors import ConfigurationError

logger = logging.getLogger("prefixproxy.config")

DEFAULT_CONFIG_PATH = "/etc/stupid-proxy/config.json"
DEFAULT_LISTEN = ":8080"

_LOG_LEVELS = frozenset({"debug", "info", "warning", "error", "critical"})


@dataclass(frozen=True, slots=True)
class ProxyConfig:
    """Proxy configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = ProxyConfig(port=9000, routes=(("/api", "backend:8000"),))
    """

    # Listener
    host: str = "0.0.0.0"
    port: int = 8080

    # Routing: (prefix, backend) pairs, order irrelevant
    routes: tuple[tuple[str, str], ...] = ()

    # Forwarding
    scheme: str = "http"
    upstream_timeout: float = 30.0

    # Logging
    log_level: str = "info"

    @property
    def listen(self) -> str:
        """The listen address in ``host:port`` form."""
        if ":" in self.host:
            return f"[{self.host}]:{self.port}"
        return f"{self.host}:{self.port}"

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ProxyConfig":
        """Validate a decoded config document.

        Unknown keys are ignored. Backend values are only type-checked
        here; they are parsed into authorities when the route table is
        built.
        """
        if not isinstance(data, Mapping):
            msg = f"Config must be a JSON object, got {type(data).__name__}"
            raise ConfigurationError(msg)

        listen = data.get("listen") or DEFAULT_LISTEN
        if not isinstance(listen, str):
            msg = f"'listen' must be a string, got {type(listen).__name__}"
            raise ConfigurationError(msg)
        host, port = parse_listen(listen)

        raw_routes = data.get("routes") or {}
        if not isinstance(raw_routes, Mapping):
            msg = f"'routes' must be an object, got {type(raw_routes).__name__}"
            raise ConfigurationError(msg)
        routes: list[tuple[str, str]] = []
        for prefix, backend in raw_routes.items():
            if not isinstance(backend, str):
                msg = f"Backend for prefix {prefix!r} must be a string, got {type(backend).__name__}"
                raise ConfigurationError(msg)
            routes.append((prefix, backend))

        timeout = data.get("upstream_timeout", 30.0)
        if isinstance(timeout, bool) or not isinstance(timeout, int | float) or timeout <= 0:
            msg = f"'upstream_timeout' must be a positive number, got {timeout!r}"
            raise ConfigurationError(msg)

        log_level = data.get("log_level", "info")
        if not isinstance(log_level, str) or log_level.lower() not in _LOG_LEVELS:
            allowed = ", ".join(sorted(_LOG_LEVELS))
            msg = f"'log_level' must be one of {allowed}, got {log_level!r}"
            raise ConfigurationError(msg)

        return cls(
            host=host,
            port=port,
            routes=tuple(routes),
            upstream_timeout=float(timeout),
            log_level=log_level.lower(),
        )


def parse_listen(value: str) -> tuple[str, int]:
    """Split a listen address into ``(host, port)``.

    Accepts ``":8080"`` (all interfaces), ``"127.0.0.1:8080"`` and
    ``"[::1]:8080"``. An empty host binds every interface.
    """
    host, sep, port_str = value.strip().rpartition(":")
    if not sep:
        msg = f"Listen address {value!r} must be in host:port form"
        raise ConfigurationError(msg)
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    try:
        port = int(port_str)
    except ValueError:
        msg = f"Listen address {value!r} has a non-numeric port"
        raise ConfigurationError(msg) from None
    if not 0 <= port <= 65535:
        msg = f"Listen address {value!r} has an out-of-range port"
        raise ConfigurationError(msg)
    return host or "0.0.0.0", port


def load_config(path: str | Path = DEFAULT_CONFIG_PATH) -> ProxyConfig:
    """Read and validate a JSON config file.

    Raises:
        ConfigurationError: If the file cannot be read, is not valid
            JSON, or fails validation.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        msg = f"Cannot read config file {str(path)!r}: {exc.strerror or exc}"
        raise ConfigurationError(msg) from exc

    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        msg = f"Invalid JSON in {str(path)!r}: {exc}"
        raise ConfigurationError(msg) from exc

    config = ProxyConfig.from_mapping(data)
    logger.debug("Loaded %d route(s) from %s", len(config.routes), path)
    return config
