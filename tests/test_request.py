"""Tests for prefixproxy.http.request — inbound Request and OutboundRequest."""

from typing import Any

import pytest

from prefixproxy.http.headers import Headers
from prefixproxy.http.request import OutboundRequest, Request


def _make_scope(**overrides: object) -> dict[str, object]:
    """Build a minimal valid ASGI HTTP scope dict."""
    base: dict[str, object] = {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": "GET",
        "scheme": "http",
        "path": "/",
        "raw_path": b"/",
        "query_string": b"",
        "root_path": "",
        "headers": [(b"host", b"proxy.example")],
        "server": ("proxy.example", 8080),
        "client": ("10.0.0.7", 54321),
    }
    base.update(overrides)
    return base


def _receiver(*messages: dict[str, Any]):
    queue = list(messages)

    async def receive() -> dict[str, Any]:
        return queue.pop(0)

    return receive


async def _no_body() -> dict[str, Any]:
    return {"type": "http.request", "body": b"", "more_body": False}


class TestFromAsgi:
    def test_basic_fields(self) -> None:
        request = Request.from_asgi(_make_scope(method="POST", path="/api/v2/users"), _no_body)

        assert request.method == "POST"
        assert request.path == "/api/v2/users"
        assert request.http_version == "1.1"
        assert request.client == ("10.0.0.7", 54321)
        assert isinstance(request.headers, Headers)

    def test_missing_optional_keys(self) -> None:
        minimal = {"type": "http", "method": "GET", "path": "/"}
        request = Request.from_asgi(minimal, _no_body)

        assert request.raw_path == b""
        assert request.query_string == b""
        assert request.server is None
        assert request.client is None
        assert request.scheme == "http"

    def test_frozen(self) -> None:
        request = Request.from_asgi(_make_scope(), _no_body)
        with pytest.raises(AttributeError):
            request.path = "/other"  # type: ignore[misc]


class TestHost:
    def test_from_host_header(self) -> None:
        request = Request.from_asgi(_make_scope(), _no_body)
        assert request.host == "proxy.example"

    def test_falls_back_to_server(self) -> None:
        request = Request.from_asgi(_make_scope(headers=[]), _no_body)
        assert request.host == "proxy.example:8080"

    def test_empty_when_unknown(self) -> None:
        request = Request.from_asgi(_make_scope(headers=[], server=None), _no_body)
        assert request.host == ""


class TestTarget:
    def test_raw_path_preserved(self) -> None:
        scope = _make_scope(path="/files/a b", raw_path=b"/files/a%20b")
        request = Request.from_asgi(scope, _no_body)
        assert request.target == "/files/a%20b"

    def test_query_string_appended(self) -> None:
        scope = _make_scope(path="/search", raw_path=b"/search", query_string=b"q=proxy&page=2")
        request = Request.from_asgi(scope, _no_body)
        assert request.target == "/search?q=proxy&page=2"

    def test_path_used_without_raw_path(self) -> None:
        request = Request.from_asgi(_make_scope(path="/plain", raw_path=None), _no_body)
        assert request.target == "/plain"

    def test_non_ascii_raw_path_escaped_once(self) -> None:
        scope = _make_scope(path="/api/café", raw_path="/api/café".encode())
        request = Request.from_asgi(scope, _no_body)
        assert request.target == "/api/caf%C3%A9"

    def test_non_ascii_path_without_raw_path(self) -> None:
        request = Request.from_asgi(_make_scope(path="/api/café", raw_path=None), _no_body)
        assert request.target == "/api/caf%C3%A9"

    def test_non_ascii_query_escaped(self) -> None:
        scope = _make_scope(path="/search", raw_path=b"/search", query_string="q=café".encode())
        request = Request.from_asgi(scope, _no_body)
        assert request.target == "/search?q=caf%C3%A9"

    def test_reserved_characters_untouched(self) -> None:
        raw = b"/a;b=c/@x:y/%7E,!$&'()*+"
        request = Request.from_asgi(_make_scope(raw_path=raw, query_string=b"k=v&x=%2F"), _no_body)
        assert request.target == "/a;b=c/@x:y/%7E,!$&'()*+?k=v&x=%2F"


class TestStream:
    @pytest.mark.asyncio
    async def test_chunks_in_order(self) -> None:
        receive = _receiver(
            {"type": "http.request", "body": b"hello ", "more_body": True},
            {"type": "http.request", "body": b"", "more_body": True},
            {"type": "http.request", "body": b"world", "more_body": False},
        )
        request = Request.from_asgi(_make_scope(method="POST"), receive)

        chunks = [chunk async for chunk in request.stream()]

        assert chunks == [b"hello ", b"world"]

    @pytest.mark.asyncio
    async def test_stops_on_disconnect(self) -> None:
        receive = _receiver(
            {"type": "http.request", "body": b"partial", "more_body": True},
            {"type": "http.disconnect"},
        )
        request = Request.from_asgi(_make_scope(method="POST"), receive)

        chunks = [chunk async for chunk in request.stream()]

        assert chunks == [b"partial"]


class TestOutboundRequest:
    def _outbound(self, host: str) -> OutboundRequest:
        source = Request.from_asgi(_make_scope(path="/api", raw_path=b"/api"), _no_body)
        return OutboundRequest(
            method="GET",
            scheme="http",
            host=host,
            target=source.target,
            headers=source.headers,
            source=source,
        )

    def test_routed(self) -> None:
        assert self._outbound("backend:80").routed is True
        assert self._outbound("").routed is False

    def test_url(self) -> None:
        assert self._outbound("backend:80").url == "http://backend:80/api"

    @pytest.mark.asyncio
    async def test_body_streams_source(self) -> None:
        outbound = self._outbound("backend:80")
        assert [chunk async for chunk in outbound.body()] == []
