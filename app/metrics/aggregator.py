"""Reduce a collection of orders into period figures.

Everything here is a pure function of its input orders.
"""

from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from app.orders.models.order import Order

ZERO = Decimal("0")


@dataclass(frozen=True)
class PeriodAggregate:
    """Summary of all orders that fell in one period."""

    total: Decimal = ZERO
    order_count: int = 0
    items_sold: int = 0
    processed_count: int = 0
    processed_total: Decimal = ZERO

    @property
    def open_count(self) -> int:
        return self.order_count - self.processed_count

    @property
    def open_total(self) -> Decimal:
        return self.total - self.processed_total

    @property
    def average_order_value(self) -> Decimal:
        if self.order_count == 0:
            return ZERO
        return self.total / self.order_count


@dataclass(frozen=True)
class ChannelRanking:
    channel: str
    revenue: Decimal
    order_count: int
    share_percent: float


@dataclass(frozen=True)
class ProductRanking:
    sku: str
    title: str
    quantity: int
    revenue: Decimal


@dataclass(frozen=True)
class DailyBreakdown:
    day: date
    revenue: Decimal = ZERO
    orders: int = 0
    items: int = 0

    @property
    def avg_order_value(self) -> Decimal:
        return self.revenue / self.orders if self.orders > 0 else ZERO


def _charge(order: Order) -> Decimal:
    return Decimal(order.total_charge) if order.total_charge is not None else ZERO


def _items_count(order: Order) -> int:
    return sum(item.quantity or 0 for item in order.items or [])


def aggregate_orders(orders: Iterable[Order]) -> PeriodAggregate:
    """Sum the charges (and related counts) of ``orders``.

    An empty input is valid and yields a zero total.
    """
    total = ZERO
    order_count = 0
    items_sold = 0
    processed_count = 0
    processed_total = ZERO

    for order in orders:
        charge = _charge(order)
        total += charge
        order_count += 1
        items_sold += _items_count(order)
        if order.is_processed:
            processed_count += 1
            processed_total += charge

    return PeriodAggregate(
        total=total,
        order_count=order_count,
        items_sold=items_sold,
        processed_count=processed_count,
        processed_total=processed_total,
    )


def rank_channels(orders: Iterable[Order], limit: int = 6) -> list[ChannelRanking]:
    """Channels by revenue, largest first."""
    revenue: dict[str, Decimal] = defaultdict(lambda: ZERO)
    counts: dict[str, int] = defaultdict(int)

    for order in orders:
        channel = order.channel or "unknown"
        revenue[channel] += _charge(order)
        counts[channel] += 1

    grand_total = sum(revenue.values(), ZERO)
    rankings = [
        ChannelRanking(
            channel=channel,
            revenue=channel_revenue,
            order_count=counts[channel],
            share_percent=round(float(channel_revenue / grand_total) * 100, 2)
            if grand_total > 0
            else 0.0,
        )
        for channel, channel_revenue in revenue.items()
    ]
    rankings.sort(key=lambda r: r.revenue, reverse=True)
    return rankings[:limit]


def rank_products(orders: Iterable[Order], limit: int = 10) -> list[ProductRanking]:
    """SKUs by quantity sold, largest first."""
    quantities: dict[str, int] = defaultdict(int)
    revenue: dict[str, Decimal] = defaultdict(lambda: ZERO)
    titles: dict[str, str] = {}

    for order in orders:
        for item in order.items or []:
            quantities[item.sku] += item.quantity or 0
            revenue[item.sku] += item.line_total
            titles.setdefault(item.sku, item.title)

    rankings = [
        ProductRanking(sku=sku, title=titles[sku], quantity=quantity, revenue=revenue[sku])
        for sku, quantity in quantities.items()
    ]
    rankings.sort(key=lambda r: r.quantity, reverse=True)
    return rankings[:limit]


def daily_breakdown(orders: Iterable[Order], days: Iterable[date]) -> list[DailyBreakdown]:
    """Bucket orders by received date, one entry per requested day.

    Orders without a timestamp or outside the requested days are skipped.
    """
    buckets: dict[date, dict[str, Decimal | int]] = {
        day: {"revenue": ZERO, "orders": 0, "items": 0} for day in days
    }

    for order in orders:
        if order.received_at is None:
            continue
        bucket = buckets.get(order.received_at.date())
        if bucket is None:
            continue
        bucket["revenue"] += _charge(order)
        bucket["orders"] += 1
        bucket["items"] += _items_count(order)

    return [
        DailyBreakdown(
            day=day,
            revenue=Decimal(values["revenue"]),
            orders=int(values["orders"]),
            items=int(values["items"]),
        )
        for day, values in buckets.items()
    ]
