"""Sales metrics routes for the admin dashboard."""

import logging
import time
from datetime import date

from fastapi import APIRouter, Depends, Query
from redis.exceptions import RedisError

from app.core.config import settings
from app.metrics.cache import MetricsCache, warm_metrics_cache
from app.metrics.dependencies import (
    get_metrics_cache,
    get_metrics_service,
    get_optional_metrics_cache,
    get_order_repository,
)
from app.metrics.periods import MetricsPeriod
from app.metrics.schemas import (
    CacheFlushResponse,
    CacheStatusResponse,
    CacheWarmResponse,
    CacheWarmTaskResponse,
    ChannelRankingResponse,
    DailyRevenuePoint,
    GrowthRateResponse,
    MetricsSummaryResponse,
    PeriodOption,
    ProductRankingResponse,
)
from app.metrics.service import SalesMetricsService
from app.metrics.tasks import warm_metrics_cache_task
from app.orders.repository import OrderRepository
from app.orders.schemas.order import RecentOrderResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/metrics", tags=["admin-metrics"])

PERIOD_QUERY = Query("7", description='"0" today, "1" yesterday, N days, or "custom"')
CHANNEL_QUERY = Query(settings.METRICS_DEFAULT_CHANNEL, description='Sales channel or "all"')
FROM_QUERY = Query(None, alias="from", description="Custom range first day")
TO_QUERY = Query(None, alias="to", description="Custom range last day")


@router.get("/periods", response_model=list[PeriodOption])
async def list_periods() -> list[PeriodOption]:
    """List the period selectors the dashboard offers."""
    return [PeriodOption.from_enum(period) for period in MetricsPeriod]


@router.get("/summary", response_model=MetricsSummaryResponse)
async def get_metrics_summary(
    period: str = PERIOD_QUERY,
    channel: str = CHANNEL_QUERY,
    custom_from: date | None = FROM_QUERY,
    custom_to: date | None = TO_QUERY,
    service: SalesMetricsService = Depends(get_metrics_service),
    cache: MetricsCache | None = Depends(get_optional_metrics_cache),
) -> MetricsSummaryResponse:
    """
    Get headline metrics for a period.

    Returns revenue, order count, average order value, items sold, orders per
    day and processed/open splits. Fixed periods are served from the metrics
    cache when warm; a Redis failure only means the figures are recomputed.
    """
    metrics_period = MetricsPeriod.try_from(period)
    if metrics_period is not None and not metrics_period.is_cacheable:
        metrics_period = None

    if cache is not None and metrics_period is not None:
        try:
            cached = await cache.get_summary(metrics_period, channel)
            if cached is not None:
                return cached
        except RedisError as e:
            logger.warning("Metrics cache read failed, computing summary: %s", e)

    summary = MetricsSummaryResponse.from_summary(
        service.metrics_summary(period, channel, custom_from, custom_to)
    )

    if cache is not None and metrics_period is not None:
        try:
            await cache.set_summary(metrics_period, channel, summary)
        except RedisError as e:
            logger.warning("Metrics cache write failed: %s", e)

    return summary


@router.get("/growth-rate", response_model=GrowthRateResponse)
async def get_growth_rate(
    days: int = Query(..., description="Window length in days (must be positive)"),
    service: SalesMetricsService = Depends(get_metrics_service),
) -> GrowthRateResponse:
    """
    Get revenue growth of the last `days` against the `days` before them.

    `growth_rate` is a ratio (0.5 means +50%). When the previous window had no
    revenue the rate is undefined: `defined` is false and `growth_rate` null.
    """
    return GrowthRateResponse.from_report(service.growth_rate(days))


@router.get("/top-channels", response_model=list[ChannelRankingResponse])
async def get_top_channels(
    period: str = PERIOD_QUERY,
    channel: str = CHANNEL_QUERY,
    limit: int = Query(6, ge=1, le=50),
    custom_from: date | None = FROM_QUERY,
    custom_to: date | None = TO_QUERY,
    service: SalesMetricsService = Depends(get_metrics_service),
) -> list[ChannelRankingResponse]:
    """Get channels ranked by revenue with their share of the total."""
    rankings = service.top_channels(period, channel, limit, custom_from, custom_to)
    return [ChannelRankingResponse.from_ranking(r) for r in rankings]


@router.get("/top-products", response_model=list[ProductRankingResponse])
async def get_top_products(
    period: str = PERIOD_QUERY,
    channel: str = CHANNEL_QUERY,
    limit: int = Query(10, ge=1, le=100),
    custom_from: date | None = FROM_QUERY,
    custom_to: date | None = TO_QUERY,
    service: SalesMetricsService = Depends(get_metrics_service),
) -> list[ProductRankingResponse]:
    """Get SKUs ranked by quantity sold."""
    rankings = service.top_products(period, channel, limit, custom_from, custom_to)
    return [ProductRankingResponse.from_ranking(r) for r in rankings]


@router.get("/daily-revenue", response_model=list[DailyRevenuePoint])
async def get_daily_revenue(
    period: str = PERIOD_QUERY,
    channel: str = CHANNEL_QUERY,
    custom_from: date | None = FROM_QUERY,
    custom_to: date | None = TO_QUERY,
    service: SalesMetricsService = Depends(get_metrics_service),
) -> list[DailyRevenuePoint]:
    """Get one revenue data point per day for the sales trend chart."""
    breakdown = service.daily_revenue(period, channel, custom_from, custom_to)
    return [DailyRevenuePoint.from_breakdown(entry) for entry in breakdown]


@router.get("/best-day", response_model=DailyRevenuePoint | None)
async def get_best_day(
    period: str = PERIOD_QUERY,
    channel: str = CHANNEL_QUERY,
    custom_from: date | None = FROM_QUERY,
    custom_to: date | None = TO_QUERY,
    service: SalesMetricsService = Depends(get_metrics_service),
) -> DailyRevenuePoint | None:
    """Get the highest-revenue day of the period, or null when nothing sold."""
    best = service.best_performing_day(period, channel, custom_from, custom_to)
    return DailyRevenuePoint.from_breakdown(best) if best is not None else None


@router.get("/recent-orders", response_model=list[RecentOrderResponse])
async def get_recent_orders(
    limit: int = Query(15, ge=1, le=100),
    repository: OrderRepository = Depends(get_order_repository),
) -> list[RecentOrderResponse]:
    """Get the newest orders, cancelled ones included."""
    return [RecentOrderResponse.model_validate(order) for order in repository.recent(limit)]


@router.get("/cache/status", response_model=CacheStatusResponse)
async def get_cache_status(
    channel: str = CHANNEL_QUERY,
    cache: MetricsCache = Depends(get_metrics_cache),
) -> CacheStatusResponse:
    """Show which fixed periods currently have a cached summary."""
    return CacheStatusResponse(channel=channel, entries=await cache.status(channel))


@router.post("/cache/warm", response_model=CacheWarmResponse | CacheWarmTaskResponse)
async def warm_cache(
    channel: str = CHANNEL_QUERY,
    async_mode: bool = Query(
        default=False,
        description="If true, warm the cache in a background Celery task and return its id.",
    ),
    service: SalesMetricsService = Depends(get_metrics_service),
    cache: MetricsCache = Depends(get_metrics_cache),
) -> CacheWarmResponse | CacheWarmTaskResponse:
    """Recompute the cached summary of every fixed period."""
    if async_mode:
        task = warm_metrics_cache_task.delay(channel=channel)
        return CacheWarmTaskResponse(task_id=task.id, status="queued")

    start_time = time.time()
    warmed = await warm_metrics_cache(service, cache, channel)
    return CacheWarmResponse(
        channel=channel,
        warmed=warmed,
        execution_time_seconds=time.time() - start_time,
    )


@router.delete("/cache", response_model=CacheFlushResponse)
async def flush_cache(
    cache: MetricsCache = Depends(get_metrics_cache),
) -> CacheFlushResponse:
    """Drop every cached metrics summary."""
    return CacheFlushResponse(deleted_keys=await cache.flush())
