"""
Tests for the bounded fetcher and payload parser.
"""

import asyncio

import httpx
import pytest

from constellation.models.raw import ErrorKind, FetchStatus, RawFetchOutcome
from constellation.services.fetcher import fetch_json_safely, fetch_text
from constellation.services.payload_parser import parse_payload


URL = "http://feed.test/treasure/00.json"


def run_fetch(handler, url=URL, timeout_ms=1000):
    """Run fetch_text against a MockTransport handler."""
    async def go():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            return await fetch_text(client, url, timeout_ms)
    return asyncio.run(go())


class TestFetchText:
    """Tests for fetch_text outcomes."""

    def test_success_returns_body(self):
        outcome = run_fetch(lambda request: httpx.Response(200, text="[[1, 2, 3]]"))

        assert outcome.ok
        assert outcome.status is FetchStatus.SUCCESS
        assert outcome.body == "[[1, 2, 3]]"
        assert outcome.url == URL

    def test_non_2xx_is_http_error(self):
        outcome = run_fetch(lambda request: httpx.Response(404, text="missing"))

        assert not outcome.ok
        assert outcome.status is FetchStatus.HTTP_ERROR
        assert outcome.code == 404
        assert outcome.message == f"HTTP 404 from {URL}"
        assert outcome.error_kind is ErrorKind.HTTP

    def test_connection_failure_is_network_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        outcome = run_fetch(handler)

        assert outcome.status is FetchStatus.NETWORK_ERROR
        assert URL in outcome.message
        assert "connection refused" in outcome.message
        assert outcome.error_kind is ErrorKind.NETWORK

    def test_timeout_is_network_error(self):
        async def slow(request):
            await asyncio.sleep(5)
            return httpx.Response(200, text="[]")

        outcome = run_fetch(slow, timeout_ms=50)

        assert outcome.status is FetchStatus.NETWORK_ERROR
        assert "timed out after 50 ms" in outcome.message

    def test_transport_timeout_is_network_error(self):
        def handler(request):
            raise httpx.ReadTimeout("read timed out", request=request)

        outcome = run_fetch(handler)

        assert outcome.status is FetchStatus.NETWORK_ERROR
        assert "timed out" in outcome.message


class TestParsePayload:
    """Tests for JSON decoding."""

    def test_valid_json(self):
        result = parse_payload('{"a": [1, 2]}', URL)
        assert result.ok
        assert result.data == {"a": [1, 2]}
        assert result.error is None

    def test_malformed_json(self):
        """Corrupted body becomes a failure result carrying the source URL."""
        result = parse_payload("{not json", URL)

        assert not result.ok
        assert result.data is None
        assert "Invalid JSON" in result.error
        assert URL in result.error

    @pytest.mark.parametrize("text", [
        '{"lat": NaN, "lon": 2}',
        '[[1, Infinity, 3]]',
        '{"alt": -Infinity}',
    ])
    def test_non_standard_constants_rejected(self, text):
        """JSON has no NaN/Infinity literals; such bodies are corrupted."""
        result = parse_payload(text, URL)

        assert not result.ok
        assert "Invalid JSON" in result.error
        assert "Invalid JSON constant" in result.error

    def test_empty_body(self):
        result = parse_payload("", URL)
        assert not result.ok
        assert "Invalid JSON" in result.error


class TestFetchJsonSafely:
    """Tests for the combined fetch + decode helper."""

    def run(self, handler):
        async def go():
            async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
                return await fetch_json_safely(client, URL)
        return asyncio.run(go())

    def test_success(self):
        result = self.run(lambda request: httpx.Response(200, json={"current": {"us_aqi": 12}}))
        assert result.ok
        assert result.data["current"]["us_aqi"] == 12

    def test_http_error(self):
        result = self.run(lambda request: httpx.Response(503))
        assert not result.ok
        assert "HTTP 503" in result.error

    def test_bad_json(self):
        result = self.run(lambda request: httpx.Response(200, text="<html>oops</html>"))
        assert not result.ok
        assert "Invalid JSON" in result.error


class TestRawFetchOutcome:
    """Tests for outcome constructors."""

    @pytest.mark.parametrize("status", [500, 502])
    def test_http_error_message(self, status):
        outcome = RawFetchOutcome.http_error(URL, status)
        assert outcome.message.startswith(f"HTTP {status}")
