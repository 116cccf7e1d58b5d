"""Pydantic schemas for search maintenance operations."""

from pydantic import BaseModel, Field


class ClearCacheRequest(BaseModel):
    """Optional cache key pattern; omit to clear every cached search."""

    pattern: str | None = Field(default=None, max_length=100)
