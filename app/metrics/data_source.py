from collections.abc import Sequence
from datetime import datetime
from typing import Protocol

from app.orders.models.order import Order
from app.reports.filters import OrderFilter


class OrderDataSource(Protocol):
    """Read-only supplier of orders by received time.

    Implementations return the orders received in ``[start, end)`` that pass
    every filter, in no particular order, and let their own errors propagate.
    """

    def fetch_orders(
        self,
        start: datetime,
        end: datetime,
        filters: Sequence[OrderFilter] = (),
    ) -> Sequence[Order]: ...
