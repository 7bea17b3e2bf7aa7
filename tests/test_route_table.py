"""Tests for prefixproxy.routing.table — longest-prefix-first route table."""

import itertools
import random

import pytest

from prefixproxy.errors import ConfigurationError
from prefixproxy.routing.route import Route
from prefixproxy.routing.table import RouteTable

PREFIXES = ["", "/", "/a", "/ab", "/api", "/api/v2", "/api/v2/users", "/b", "/static"]


class TestOrdering:
    def test_longest_first(self) -> None:
        table = RouteTable.from_mapping({"/api": "a:80", "/api/v2": "b:80", "": "c:80"})
        assert [r.prefix for r in table] == ["/api/v2", "/api", ""]

    @pytest.mark.parametrize("seed", range(20))
    def test_non_increasing_length_for_any_input_order(self, seed: int) -> None:
        prefixes = PREFIXES.copy()
        random.Random(seed).shuffle(prefixes)

        table = RouteTable.from_mapping([(p, "backend:80") for p in prefixes])

        lengths = [len(r.prefix) for r in table]
        assert lengths == sorted(lengths, reverse=True)

    def test_longer_always_before_shorter(self) -> None:
        table = RouteTable.from_mapping([(p, "backend:80") for p in PREFIXES])
        position = {r.prefix: i for i, r in enumerate(table)}

        for a, b in itertools.permutations(PREFIXES, 2):
            if len(a) > len(b):
                assert position[a] < position[b]

    def test_equal_length_ties_are_lexicographic(self) -> None:
        table = RouteTable.from_mapping({"/web": "w:80", "/api": "a:80", "/img": "i:80"})
        assert [r.prefix for r in table] == ["/api", "/img", "/web"]

    def test_order_independent_of_insertion(self) -> None:
        forward = RouteTable.from_mapping([(p, "backend:80") for p in PREFIXES])
        backward = RouteTable.from_mapping([(p, "backend:80") for p in reversed(PREFIXES)])
        assert forward.routes == backward.routes

    def test_direct_construction_sorts(self) -> None:
        table = RouteTable([Route("/a", "x:1"), Route("/abc", "y:1")])
        assert table.routes[0].prefix == "/abc"


class TestConstruction:
    def test_parses_backends(self) -> None:
        table = RouteTable.from_mapping({"/api": "http://backend-a:8000/"})
        assert table.routes == (Route(prefix="/api", authority="backend-a:8000"),)

    def test_empty_prefix_kept(self) -> None:
        table = RouteTable.from_mapping({"": "fallback:80"})
        assert len(table) == 1
        assert table.routes[0].prefix == ""

    def test_empty_mapping(self) -> None:
        table = RouteTable.from_mapping({})
        assert len(table) == 0
        assert table.match("/anything") is None

    def test_bad_backend_aborts_whole_table(self) -> None:
        with pytest.raises(ConfigurationError):
            RouteTable.from_mapping({"/ok": "good:80", "/bad": "bad:port"})


class TestMatch:
    def test_longest_prefix_wins(self) -> None:
        table = RouteTable.from_mapping({"/api": "backend-a:80", "/api/v2": "backend-b:80"})

        route = table.match("/api/v2/users")

        assert route is not None
        assert route.authority == "backend-b:80"

    def test_shorter_prefix_still_matches_its_own_paths(self) -> None:
        table = RouteTable.from_mapping({"/api": "backend-a:80", "/api/v2": "backend-b:80"})

        route = table.match("/api/v1/users")

        assert route is not None
        assert route.authority == "backend-a:80"

    def test_no_match(self) -> None:
        table = RouteTable.from_mapping({"/api": "backend-a:80"})
        assert table.match("/unmatched") is None

    def test_catch_all_has_lowest_priority(self) -> None:
        table = RouteTable.from_mapping({"": "fallback:80", "/api": "backend-a:80"})

        assert table.match("/api/x").authority == "backend-a:80"  # type: ignore[union-attr]
        assert table.match("/other").authority == "fallback:80"  # type: ignore[union-attr]

    def test_match_is_pure(self) -> None:
        table = RouteTable.from_mapping({"/api": "backend-a:80", "/api/v2": "backend-b:80"})
        assert table.match("/api/v2/x") == table.match("/api/v2/x")
        assert table.match("/api/v2/x") is table.match("/api/v2/x")

    def test_selects_configured_prefix_when_no_longer_one_matches(self) -> None:
        mapping = {p: f"b{i}:80" for i, p in enumerate(PREFIXES)}
        table = RouteTable.from_mapping(mapping)

        for prefix in PREFIXES:
            path = prefix + "~zz"
            longer = [p for p in PREFIXES if len(p) > len(prefix) and path.startswith(p)]
            if longer:
                continue
            route = table.match(path)
            assert route is not None
            assert route.prefix == prefix
