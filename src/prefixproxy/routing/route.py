"""Route frozen dataclass and backend target parsing."""

import logging
from dataclasses import dataclass
from urllib.parse import urlsplit

from prefixproxy.errors import ConfigurationError

logger = logging.getLogger("prefixproxy.routing")


@dataclass(frozen=True, slots=True)
class Route:
    """A prefix route: requests whose path starts with ``prefix`` go to ``authority``.

    ``authority`` is a validated ``host[:port]``. An empty ``prefix``
    matches every path (catch-all).
    """

    prefix: str
    authority: str

    def matches(self, path: str) -> bool:
        """Plain string-prefix test, no normalization."""
        return path.startswith(self.prefix)


def parse_authority(backend: str) -> str:
    """Extract and validate the ``host[:port]`` of a backend target.

    Accepts full URLs (``http://host:8000/ignored``) and bare
    authorities (``host:8000``). Any path, query or user info is
    dropped; only the authority is used for forwarding.

    Raises:
        ConfigurationError: If no host can be found or the port is
            not a valid number.
    """
    value = backend.strip()
    if not value:
        msg = "Backend target is empty"
        raise ConfigurationError(msg)
    if "://" not in value:
        value = f"http://{value}"

    try:
        parsed = urlsplit(value)
        port = parsed.port
    except ValueError as exc:
        msg = f"Invalid backend target {backend!r}: {exc}"
        raise ConfigurationError(msg) from exc

    host = parsed.hostname
    if not host:
        msg = f"Invalid backend target {backend!r}: missing host"
        raise ConfigurationError(msg)

    if parsed.scheme not in ("http", ""):
        logger.warning("Backend %r uses scheme %r; forwarding over http", backend, parsed.scheme)
    if parsed.path not in ("", "/") or parsed.query:
        logger.warning("Backend %r has a path or query; only the authority is used", backend)

    if ":" in host:
        host = f"[{host}]"
    if port is not None:
        return f"{host}:{port}"
    return host
