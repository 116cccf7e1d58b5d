"""Redis cache for dashboard metric summaries.

Only fixed periods are cached (custom ranges are too varied to be worth it).
Keys follow ``metrics_{period}d_{channel}``.
"""

import logging

from redis.asyncio import Redis

from app.core.config import settings
from app.core.redis import delete_matching
from app.metrics.periods import MetricsPeriod
from app.metrics.schemas import CacheStatusEntry, MetricsSummaryResponse
from app.metrics.service import SalesMetricsService

logger = logging.getLogger(__name__)

KEY_PATTERN = "metrics_*"


class MetricsCache:
    def __init__(self, client: Redis, ttl_seconds: int | None = None) -> None:
        self.client = client
        self.ttl_seconds = ttl_seconds or settings.METRICS_CACHE_TTL_SECONDS

    async def get_summary(
        self, period: MetricsPeriod, channel: str
    ) -> MetricsSummaryResponse | None:
        if not period.is_cacheable:
            return None
        raw = await self.client.get(period.cache_key(channel))
        if raw is None:
            return None
        summary = MetricsSummaryResponse.model_validate_json(raw)
        return summary.model_copy(update={"cached": True})

    async def set_summary(
        self, period: MetricsPeriod, channel: str, summary: MetricsSummaryResponse
    ) -> bool:
        if not period.is_cacheable:
            return False
        payload = summary.model_copy(update={"cached": False}).model_dump_json()
        await self.client.setex(period.cache_key(channel), self.ttl_seconds, payload)
        return True

    async def forget(self, period: MetricsPeriod, channel: str) -> bool:
        deleted: int = await self.client.delete(period.cache_key(channel))
        return deleted > 0

    async def flush(self) -> int:
        deleted = await delete_matching(self.client, KEY_PATTERN)
        logger.info("Flushed %d metrics cache keys", deleted)
        return deleted

    async def status(self, channel: str) -> list[CacheStatusEntry]:
        entries = []
        for period in MetricsPeriod.cacheable():
            key = period.cache_key(channel)
            ttl: int = await self.client.ttl(key)
            # ttl is -2 for a missing key and -1 for a key without expiry
            entries.append(
                CacheStatusEntry(
                    period=period.value,
                    label=period.label,
                    key=key,
                    cached=ttl != -2,
                    ttl_seconds=ttl if ttl >= 0 else None,
                )
            )
        return entries


async def warm_metrics_cache(
    service: SalesMetricsService, cache: MetricsCache, channel: str
) -> list[str]:
    """Recompute and store the summary of every cacheable period.

    Returns the period values that were written.
    """
    as_of = service.clock()
    warmed = []
    for period in MetricsPeriod.cacheable():
        summary = service.metrics_summary(period.value, channel, as_of=as_of)
        await cache.set_summary(period, channel, MetricsSummaryResponse.from_summary(summary))
        warmed.append(period.value)
    logger.info("Warmed metrics cache for channel %s: %s", channel, ", ".join(warmed))
    return warmed
