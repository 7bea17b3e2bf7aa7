"""Route table with longest-prefix-first ordering.

Built once at startup from a prefix→backend mapping and read-only
afterwards, so it is shared by every in-flight request without locking.
"""

from collections.abc import Iterable, Iterator, Mapping

from prefixproxy.routing.route import Route, parse_authority


def _sort_key(route: Route) -> tuple[int, str]:
    # Longest prefix first; equal lengths ordered by prefix for determinism.
    return (-len(route.prefix), route.prefix)


class RouteTable:
    """Ordered, immutable sequence of routes.

    Usage::

        table = RouteTable.from_mapping({"/api": "backend-a:80", "/api/v2": "backend-b:80"})
        route = table.match("/api/v2/users")   # -> Route("/api/v2", "backend-b:80")
    """

    __slots__ = ("_routes",)

    def __init__(self, routes: Iterable[Route] = ()) -> None:
        self._routes: tuple[Route, ...] = tuple(sorted(routes, key=_sort_key))

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, str] | Iterable[tuple[str, str]]) -> "RouteTable":
        """Parse every backend and build a sorted table.

        Raises:
            ConfigurationError: On the first backend that does not parse.
                No partial table is ever returned.
        """
        items = mapping.items() if isinstance(mapping, Mapping) else mapping
        return cls(Route(prefix=prefix, authority=parse_authority(backend)) for prefix, backend in items)

    def match(self, path: str) -> Route | None:
        """Return the longest route whose prefix starts *path*, or None."""
        for route in self._routes:
            if route.matches(path):
                return route
        return None

    @property
    def routes(self) -> tuple[Route, ...]:
        return self._routes

    def __iter__(self) -> Iterator[Route]:
        return iter(self._routes)

    def __len__(self) -> int:
        return len(self._routes)

    def __repr__(self) -> str:
        return f"RouteTable({list(self._routes)!r})"
