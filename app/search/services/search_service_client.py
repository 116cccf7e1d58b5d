"""Client for the external search/analytics service.

The search service owns the product search index and its result cache; this
application only forwards maintenance requests to it and hands back whatever
the service answered.
"""

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from app.core.config import settings
from app.core.exceptions import ExternalServiceError

logger = logging.getLogger(__name__)

SERVICE_NAME = "search"


@dataclass
class SearchServiceResponse:
    """The search service's own response, passed through unchanged."""

    status_code: int
    body: Any

    @property
    def success(self) -> bool:
        return 200 <= self.status_code < 300


class SearchServiceClient:
    """Forwards search index maintenance calls over HTTP."""

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
    ) -> None:
        self.base_url = (base_url if base_url is not None else settings.SEARCH_SERVICE_URL).rstrip(
            "/"
        )
        self.api_key = api_key if api_key is not None else settings.SEARCH_SERVICE_API_KEY
        self.timeout = timeout or settings.SEARCH_SERVICE_TIMEOUT_SECONDS

    @property
    def is_configured(self) -> bool:
        """Check if the search service URL is set."""
        return bool(self.base_url)

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json", "Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def reindex(self) -> SearchServiceResponse:
        """Ask the search service to rebuild the whole index."""
        return await self._post("/reindex", None)

    async def clear_cache(self, pattern: str | None = None) -> SearchServiceResponse:
        """Ask the search service to drop cached results.

        Args:
            pattern: Only drop results whose cache key matches; None clears all.
        """
        return await self._post("/cache/clear", {"pattern": pattern})

    async def _post(self, path: str, payload: dict[str, Any] | None) -> SearchServiceResponse:
        if not self.is_configured:
            logger.warning("Search service not configured, cannot call %s", path)
            raise ExternalServiceError("Search service is not configured", service=SERVICE_NAME)

        url = f"{self.base_url}{path}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(url, json=payload, headers=self._headers())
        except httpx.TimeoutException as e:
            logger.error("Search service timed out on %s: %s", path, str(e))
            raise ExternalServiceError("Search service timed out", service=SERVICE_NAME) from e
        except httpx.RequestError as e:
            logger.error("Search service connection error on %s: %s", path, str(e))
            raise ExternalServiceError(
                "Search service is unreachable", service=SERVICE_NAME
            ) from e

        try:
            body = response.json() if response.content else None
        except ValueError as e:
            logger.error(
                "Search service returned a non-JSON body on %s (status %s)",
                path,
                response.status_code,
            )
            raise ExternalServiceError(
                "Search service returned an invalid response", service=SERVICE_NAME
            ) from e

        if response.is_success:
            logger.info("Search service %s succeeded (status %s)", path, response.status_code)
        else:
            logger.warning(
                "Search service %s failed: %s - %s", path, response.status_code, response.text
            )

        return SearchServiceResponse(status_code=response.status_code, body=body)


def get_search_service_client() -> SearchServiceClient:
    return SearchServiceClient()
