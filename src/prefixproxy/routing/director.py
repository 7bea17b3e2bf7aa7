"""The director: picks a backend and rewrites a request for forwarding.

A pure transform from an inbound ``Request`` to an ``OutboundRequest``.
The inbound request is never modified.
"""

from collections.abc import Callable

from prefixproxy.http.request import OutboundRequest, Request
from prefixproxy.routing.table import RouteTable

FORWARDING_SCHEME = "http"

Director = Callable[[Request], OutboundRequest]


def direct(request: Request, table: RouteTable, *, scheme: str = FORWARDING_SCHEME) -> OutboundRequest:
    """Route *request* through *table*.

    Every request gets the forwarding scheme and an appended
    ``X-Forwarded-Host`` carrying the client-facing host. A match also
    sets the destination host and appends ``X-Origin-Host``. A miss
    leaves the destination host empty.
    """
    headers = request.headers.add("X-Forwarded-Host", request.host)
    host = ""

    route = table.match(request.path)
    if route is not None:
        headers = headers.add("X-Origin-Host", route.authority)
        host = route.authority

    return OutboundRequest(
        method=request.method,
        scheme=scheme,
        host=host,
        target=request.target,
        headers=headers,
        source=request,
    )


def make_director(table: RouteTable, *, scheme: str = FORWARDING_SCHEME) -> Director:
    """Bind *table* into a one-argument director for the forwarder."""

    def director(request: Request) -> OutboundRequest:
        return direct(request, table, scheme=scheme)

    return director
