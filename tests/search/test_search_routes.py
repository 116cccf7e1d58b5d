"""Unit tests for the admin search maintenance endpoints.

The search service client is replaced with a mock so no HTTP calls are made.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from app.core.exceptions import ExternalServiceError, register_exception_handlers
from app.core.rate_limit import limiter
from app.search.routes.search_maintenance import router
from app.search.services.search_service_client import (
    SearchServiceClient,
    SearchServiceResponse,
    get_search_service_client,
)

BASE = "/api/v1/admin/search"


@pytest.fixture
def search_client():
    client = MagicMock(spec=SearchServiceClient)
    client.reindex = AsyncMock(
        return_value=SearchServiceResponse(status_code=200, body={"status": "reindexing"})
    )
    client.clear_cache = AsyncMock(
        return_value=SearchServiceResponse(status_code=200, body={"cleared": 3})
    )
    return client


@pytest.fixture
def app(search_client):
    app = FastAPI()
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    register_exception_handlers(app)
    app.include_router(router, prefix="/api/v1/admin")
    app.dependency_overrides[get_search_service_client] = lambda: search_client
    return app


@pytest.fixture
def client(app):
    return TestClient(app)


class TestReindex:
    """Tests for POST /api/v1/admin/search/reindex."""

    def test_returns_service_response(self, client, search_client):
        response = client.post(f"{BASE}/reindex")

        assert response.status_code == 200
        assert response.json() == {"status": "reindexing"}
        search_client.reindex.assert_awaited_once()

    def test_service_status_is_passed_through(self, client, search_client):
        search_client.reindex.return_value = SearchServiceResponse(
            status_code=409, body={"error": "reindex already running"}
        )

        response = client.post(f"{BASE}/reindex")

        assert response.status_code == 409
        assert response.json() == {"error": "reindex already running"}

    def test_service_unreachable(self, client, search_client):
        search_client.reindex.side_effect = ExternalServiceError(
            "Search service is unreachable", service="search"
        )

        response = client.post(f"{BASE}/reindex")

        assert response.status_code == 502
        assert response.json()["error"]["code"] == "EXTERNAL_SERVICE_ERROR"


class TestClearCache:
    """Tests for POST /api/v1/admin/search/clear-cache."""

    def test_with_pattern(self, client, search_client):
        response = client.post(f"{BASE}/clear-cache", json={"pattern": "products:*"})

        assert response.status_code == 200
        assert response.json() == {"cleared": 3}
        search_client.clear_cache.assert_awaited_once_with("products:*")

    def test_without_body(self, client, search_client):
        response = client.post(f"{BASE}/clear-cache")

        assert response.status_code == 200
        search_client.clear_cache.assert_awaited_once_with(None)

    def test_pattern_at_limit_accepted(self, client, search_client):
        pattern = "p" * 100

        response = client.post(f"{BASE}/clear-cache", json={"pattern": pattern})

        assert response.status_code == 200
        search_client.clear_cache.assert_awaited_once_with(pattern)

    def test_pattern_too_long_rejected(self, client, search_client):
        response = client.post(f"{BASE}/clear-cache", json={"pattern": "p" * 101})

        assert response.status_code == 422
        search_client.clear_cache.assert_not_awaited()

    def test_empty_service_body(self, client, search_client):
        search_client.clear_cache.return_value = SearchServiceResponse(status_code=204, body=None)

        response = client.post(f"{BASE}/clear-cache", json={})

        assert response.status_code == 204
        assert response.content == b""
        assert "application/json" not in response.headers.get("content-type", "")


class TestRateLimits:
    def test_reindex_limited_to_two_per_minute(self, client):
        limiter.reset()
        limiter.enabled = True
        try:
            statuses = [client.post(f"{BASE}/reindex").status_code for _ in range(3)]
        finally:
            limiter.enabled = False
            limiter.reset()

        assert statuses == [200, 200, 429]
