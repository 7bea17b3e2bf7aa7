"""prefixproxy exception hierarchy.

Shared across config loading, routing, the forwarder and the handler so
every module raises and catches the same types.
"""

from dataclasses import dataclass


class ProxyError(Exception):
    """Base for all prefixproxy-specific errors."""


class ConfigurationError(ProxyError):
    """Raised when proxy configuration is invalid.

    Covers unreadable config files, malformed JSON, wrong field types and
    backend targets that do not parse as ``host[:port]``. Always fatal:
    the proxy never starts with a partial route table.
    """


@dataclass(frozen=True, slots=True)
class UpstreamError(ProxyError):
    """The backend could not produce a response.

    Raised inside the forwarder and converted there into a status commit
    (502 or 504). Never escapes a request.
    """

    status: int
    detail: str = ""

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class BadGateway(UpstreamError):  # noqa: N818
    """502 — no route matched, or the backend was unreachable."""

    def __init__(self, detail: str = "") -> None:
        super().__init__(status=502, detail=detail)


class GatewayTimeout(UpstreamError):  # noqa: N818
    """504 — the backend did not answer in time."""

    def __init__(self, detail: str = "") -> None:
        super().__init__(status=504, detail=detail)
