"""Order repository - the database-backed order data source."""

import logging
from collections.abc import Sequence
from datetime import datetime
from typing import cast

from sqlalchemy.orm import Session, selectinload

from app.core.repository import BaseRepository
from app.orders.models.order import Order
from app.reports.filters import DateRangeFilter, OrderFilter, apply_filters, describe_filters

logger = logging.getLogger(__name__)


class OrderRepository(BaseRepository[Order]):
    """Reads orders for metrics and reports.

    Database errors are not caught here; they reach the caller unchanged.
    """

    def __init__(self, db: Session):
        super().__init__(db, Order)

    def fetch_orders(
        self,
        start: datetime,
        end: datetime,
        filters: Sequence[OrderFilter] = (),
    ) -> list[Order]:
        """Get orders received in ``[start, end)`` that pass every filter.

        Items are eager-loaded since aggregation walks them for every order.
        """
        chain: list[OrderFilter] = [DateRangeFilter(start, end), *filters]
        logger.debug("Fetching orders with filters %s", describe_filters(chain))

        query = self.query().options(selectinload(Order.items))
        query = apply_filters(query, chain)
        return cast(list[Order], query.all())

    def recent(self, limit: int = 15, filters: Sequence[OrderFilter] = ()) -> list[Order]:
        """Get the newest orders by received time."""
        query = apply_filters(self.query(), filters)
        result = query.order_by(Order.received_at.desc()).limit(limit).all()
        return cast(list[Order], result)

    def count_matching(self, filters: Sequence[OrderFilter] = ()) -> int:
        result: int = apply_filters(self.query(), filters).count()
        return result
