from fastapi import Depends
from sqlalchemy.orm import Session

from app.core import redis as redis_module
from app.core.exceptions import ExternalServiceError
from app.db.session import get_db
from app.metrics.cache import MetricsCache
from app.metrics.service import SalesMetricsService
from app.orders.repository import OrderRepository


def get_order_repository(db: Session = Depends(get_db)) -> OrderRepository:
    return OrderRepository(db)


def get_metrics_service(
    repository: OrderRepository = Depends(get_order_repository),
) -> SalesMetricsService:
    return SalesMetricsService(repository)


def get_optional_metrics_cache() -> MetricsCache | None:
    """Metrics cache, or None when Redis was never connected."""
    if redis_module.redis_client is None:
        return None
    return MetricsCache(redis_module.redis_client)


def get_metrics_cache(
    cache: MetricsCache | None = Depends(get_optional_metrics_cache),
) -> MetricsCache:
    if cache is None:
        raise ExternalServiceError("Metrics cache is not available", service="redis")
    return cache
