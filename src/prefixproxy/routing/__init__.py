"""Routing — longest-prefix route table and the request director.

Routes are parsed from config and compiled into an immutable, ordered
table at startup.
"""

from prefixproxy.routing.director import Director, direct, make_director
from prefixproxy.routing.route import Route, parse_authority
from prefixproxy.routing.table import RouteTable

__all__ = ["Director", "Route", "RouteTable", "direct", "make_director", "parse_authority"]
