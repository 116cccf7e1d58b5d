"""Admin routes for search index maintenance.

Both operations are delegated to the external search service; its response
body and status code are returned as they are.
"""

from fastapi import APIRouter, Body, Depends, Request
from fastapi.responses import JSONResponse, Response

from app.core.rate_limit import limiter
from app.search.schemas import ClearCacheRequest
from app.search.services.search_service_client import (
    SearchServiceClient,
    SearchServiceResponse,
    get_search_service_client,
)

router = APIRouter(prefix="/search", tags=["admin-search"])


def _passthrough(result: SearchServiceResponse) -> Response:
    if result.body is None:
        return Response(status_code=result.status_code)
    return JSONResponse(status_code=result.status_code, content=result.body)


@router.post("/reindex")
@limiter.limit("2/minute")
async def reindex(
    request: Request,
    client: SearchServiceClient = Depends(get_search_service_client),
) -> Response:
    """Trigger a full rebuild of the search index."""
    return _passthrough(await client.reindex())


@router.post("/clear-cache")
@limiter.limit("10/minute")
async def clear_cache(
    request: Request,
    payload: ClearCacheRequest | None = Body(default=None),
    client: SearchServiceClient = Depends(get_search_service_client),
) -> Response:
    """Clear cached search results, optionally only those matching `pattern`."""
    pattern = payload.pattern if payload else None
    return _passthrough(await client.clear_cache(pattern))
