"""Gateway-failure diagnostics.

After the forwarder returns, a 502 or 504 gets a one-line plain-text
body naming the status. Nothing else is ever added to a response.
"""

from http import HTTPStatus

GATEWAY_FAILURES = frozenset({HTTPStatus.BAD_GATEWAY, HTTPStatus.GATEWAY_TIMEOUT})


def is_gateway_failure(status: int) -> bool:
    """True for the statuses that get a diagnostic body."""
    return status in GATEWAY_FAILURES


def diagnostic_body(status: int) -> bytes:
    """``"<code> <reason phrase>"``, e.g. ``b"502 Bad Gateway"``."""
    return f"{status} {HTTPStatus(status).phrase}".encode("ascii")
