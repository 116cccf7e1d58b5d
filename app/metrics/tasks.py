"""Celery tasks for the metrics cache."""

import asyncio
import logging
import time
from typing import Any

from redis.asyncio import Redis

from app.core.celery_app import celery_app
from app.core.config import settings
from app.db.session import SessionLocal
from app.metrics.cache import MetricsCache, warm_metrics_cache
from app.metrics.service import SalesMetricsService
from app.orders.repository import OrderRepository

logger = logging.getLogger(__name__)


async def _warm(service: SalesMetricsService, channel: str) -> list[str]:
    client = Redis.from_url(settings.REDIS_URL, decode_responses=True, encoding="utf-8")
    try:
        return await warm_metrics_cache(service, MetricsCache(client), channel)
    finally:
        await client.aclose()


@celery_app.task(bind=True, max_retries=2, default_retry_delay=30)
def warm_metrics_cache_task(self: Any, channel: str = "all") -> dict[str, Any]:
    """Recompute the cached dashboard summaries for every fixed period.

    Args:
        channel: Sales channel to warm, "all" for every channel.

    Returns:
        Dict with the warmed periods and execution time.
    """
    start_time = time.time()
    logger.info("Warming metrics cache (channel=%s)", channel)

    db = SessionLocal()
    try:
        service = SalesMetricsService(OrderRepository(db))
        warmed = asyncio.run(_warm(service, channel))
        return {
            "channel": channel,
            "warmed": warmed,
            "execution_time_seconds": time.time() - start_time,
        }
    except Exception as exc:
        logger.exception("Metrics cache warm-up failed: %s", exc)
        raise self.retry(exc=exc) from exc
    finally:
        db.close()
