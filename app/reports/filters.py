"""Composable order filters for report and metrics queries.

Each filter is a small immutable value object that supplies a SQLAlchemy
criterion for narrowing a query (``clause``, None when the filter does
nothing) and tests an already loaded order (``matches``). Callers pass a
sequence of filters to the order data source, which applies them in order
through ``apply_filters``.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Protocol, TypeVar, runtime_checkable

from sqlalchemy import ColumnElement

from app.core.exceptions import ValidationError
from app.orders.models.order import Order, OrderStatus

Q = TypeVar("Q")

ALL_CHANNELS = "all"


@runtime_checkable
class OrderFilter(Protocol):
    def clause(self) -> ColumnElement[bool] | None: ...

    def matches(self, order: Order) -> bool: ...


def apply_filters(query: Q, filters: Iterable[OrderFilter]) -> Q:
    """Narrow ``query`` by every filter that produces a SQL clause."""
    for order_filter in filters:
        clause = order_filter.clause()
        if clause is not None:
            query = query.filter(clause)  # type: ignore[attr-defined]
    return query


def matches_all(order: Order, filters: Iterable[OrderFilter]) -> bool:
    return all(order_filter.matches(order) for order_filter in filters)


@dataclass(frozen=True)
class DateRangeFilter:
    """Orders received in the half-open range ``[start, end)``."""

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValidationError("Date range start must not be after its end", field="start")

    def clause(self) -> ColumnElement[bool]:
        return (Order.received_at >= self.start) & (Order.received_at < self.end)

    def matches(self, order: Order) -> bool:
        return order.received_at is not None and self.start <= order.received_at < self.end


@dataclass(frozen=True)
class ExcludeCancelledFilter:
    def clause(self) -> ColumnElement[bool]:
        return Order.status != OrderStatus.CANCELLED

    def matches(self, order: Order) -> bool:
        return not order.is_cancelled


@dataclass(frozen=True)
class StatusFilter:
    statuses: tuple[OrderStatus, ...]

    @classmethod
    def of(cls, *statuses: OrderStatus | str) -> "StatusFilter":
        try:
            return cls(tuple(OrderStatus(s) for s in statuses))
        except ValueError as e:
            raise ValidationError(str(e), field="status") from e

    def clause(self) -> ColumnElement[bool]:
        return Order.status.in_(self.statuses)

    def matches(self, order: Order) -> bool:
        return order.status in self.statuses


@dataclass(frozen=True)
class ChannelFilter:
    """Orders from one sales channel; ``"all"`` disables the filter."""

    channel: str = ALL_CHANNELS

    @property
    def is_noop(self) -> bool:
        return not self.channel or self.channel == ALL_CHANNELS

    def clause(self) -> ColumnElement[bool] | None:
        if self.is_noop:
            return None
        return Order.channel == self.channel

    def matches(self, order: Order) -> bool:
        return self.is_noop or order.channel == self.channel


@dataclass(frozen=True)
class ProcessedFilter:
    is_processed: bool = True

    def clause(self) -> ColumnElement[bool]:
        return Order.is_processed.is_(self.is_processed)

    def matches(self, order: Order) -> bool:
        return bool(order.is_processed) is self.is_processed


def default_revenue_filters(channel: str = ALL_CHANNELS) -> Sequence[OrderFilter]:
    """Filters used for revenue figures: cancelled orders never count."""
    return (ExcludeCancelledFilter(), ChannelFilter(channel))


def describe_filters(filters: Iterable[OrderFilter]) -> list[dict[str, Any]]:
    """Loggable description of a filter chain."""
    return [{"filter": type(f).__name__, **vars(f)} for f in filters]
