"""Tests for SearchServiceClient with the HTTP layer mocked."""

import json
from unittest.mock import patch

import httpx
import pytest

from app.core.exceptions import ExternalServiceError
from app.search.services.search_service_client import SearchServiceClient

_RealAsyncClient = httpx.AsyncClient


def mock_transport(handler):
    """Patch httpx.AsyncClient so every request goes to ``handler``."""

    def factory(*args, **kwargs):
        return _RealAsyncClient(*args, transport=httpx.MockTransport(handler), **kwargs)

    return patch("app.search.services.search_service_client.httpx.AsyncClient", side_effect=factory)


@pytest.fixture
def client():
    return SearchServiceClient(base_url="http://search.test/", api_key="secret", timeout=5)


class TestReindex:
    async def test_posts_without_payload(self, client):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers.get("Authorization")
            seen["body"] = request.content
            return httpx.Response(202, json={"status": "queued", "documents": 1200})

        with mock_transport(handler):
            result = await client.reindex()

        assert result.status_code == 202
        assert result.body == {"status": "queued", "documents": 1200}
        assert result.success
        assert seen["url"] == "http://search.test/reindex"
        assert seen["auth"] == "Bearer secret"
        assert seen["body"] == b""

    async def test_error_status_is_passed_through(self, client):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(503, json={"error": "index locked"})

        with mock_transport(handler):
            result = await client.reindex()

        assert result.status_code == 503
        assert result.body == {"error": "index locked"}
        assert not result.success


class TestClearCache:
    async def test_sends_pattern(self, client):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["payload"] = json.loads(request.content)
            return httpx.Response(200, json={"cleared": 14})

        with mock_transport(handler):
            result = await client.clear_cache("products:*")

        assert seen == {"path": "/cache/clear", "payload": {"pattern": "products:*"}}
        assert result.body == {"cleared": 14}

    async def test_without_pattern(self, client):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["payload"] = json.loads(request.content)
            return httpx.Response(204)

        with mock_transport(handler):
            result = await client.clear_cache()

        assert seen["payload"] == {"pattern": None}
        assert result.status_code == 204
        assert result.body is None


class TestFailures:
    async def test_not_configured(self):
        unconfigured = SearchServiceClient(base_url="", api_key="")

        with pytest.raises(ExternalServiceError) as exc_info:
            await unconfigured.reindex()

        assert exc_info.value.details == {"service": "search"}

    async def test_timeout(self, client):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        with mock_transport(handler), pytest.raises(ExternalServiceError, match="timed out"):
            await client.reindex()

    async def test_connection_error(self, client):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with mock_transport(handler), pytest.raises(ExternalServiceError, match="unreachable"):
            await client.clear_cache("x")

    async def test_non_json_body(self, client):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>ok</html>")

        with mock_transport(handler), pytest.raises(ExternalServiceError, match="invalid"):
            await client.reindex()
