"""Sales metrics service."""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import UTC, date, datetime

from app.core.exceptions import ValidationError
from app.metrics.aggregator import (
    ChannelRanking,
    DailyBreakdown,
    PeriodAggregate,
    ProductRanking,
    aggregate_orders,
    daily_breakdown,
    rank_channels,
    rank_products,
)
from app.metrics.data_source import OrderDataSource
from app.metrics.growth import GrowthRate, calculate_growth_rate
from app.metrics.periods import (
    Period,
    PeriodDates,
    build_date_range,
    calculate_period_dates,
    ensure_lookback,
)
from app.orders.models.order import Order
from app.reports.filters import ALL_CHANNELS, default_revenue_filters

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True)
class GrowthReport:
    window_days: int
    current_period: Period
    previous_period: Period
    current: PeriodAggregate
    previous: PeriodAggregate
    growth: GrowthRate


@dataclass(frozen=True)
class MetricsSummary:
    period: Period
    days: int
    channel: str
    aggregate: PeriodAggregate

    @property
    def orders_per_day(self) -> float:
        return self.aggregate.order_count / self.days if self.days > 0 else 0.0


class SalesMetricsService:
    """Revenue metrics computed from orders of an OrderDataSource.

    The service never reads the wall clock inside a computation: every method
    takes an ``as_of`` moment and only falls back to ``clock`` when it is not
    given. Cancelled orders are excluded from every figure.
    """

    def __init__(
        self,
        data_source: OrderDataSource,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.data_source = data_source
        self.clock = clock

    def _orders(self, period: Period, channel: str = ALL_CHANNELS) -> Sequence[Order]:
        return self.data_source.fetch_orders(
            period.start, period.end, default_revenue_filters(channel)
        )

    def _resolve(
        self,
        period: str,
        as_of: datetime | None,
        custom_from: date | None,
        custom_to: date | None,
    ) -> tuple[datetime, PeriodDates]:
        moment = as_of or self.clock()
        return moment, calculate_period_dates(period, moment, custom_from, custom_to)

    def growth_rate(self, window_days: int, as_of: datetime | None = None) -> GrowthReport:
        """Revenue growth of the last ``window_days`` against the window before it.

        Args:
            window_days: Window length in days, must be positive.
            as_of: End of the current window. Defaults to the service clock.

        Returns:
            GrowthReport with both windows, their aggregates and the growth rate.

        Raises:
            ValidationError: If window_days is not a positive integer or reaches
                before the earliest supported date. Nothing is fetched in that case.
        """
        if isinstance(window_days, bool) or not isinstance(window_days, int) or window_days <= 0:
            raise ValidationError("Window length must be a positive number of days", field="days")

        moment = as_of or self.clock()
        ensure_lookback(window_days, moment, windows=2)
        current_period = Period.trailing(window_days, moment)
        previous_period = current_period.previous()

        current = aggregate_orders(self._orders(current_period))
        previous = aggregate_orders(self._orders(previous_period))
        growth = calculate_growth_rate(current, previous)

        logger.info(
            "Growth rate for %d days as of %s: %s (current=%s, previous=%s)",
            window_days,
            moment.isoformat(),
            growth.ratio if growth.is_defined else "undefined",
            current.total,
            previous.total,
        )

        return GrowthReport(
            window_days=window_days,
            current_period=current_period,
            previous_period=previous_period,
            current=current,
            previous=previous,
            growth=growth,
        )

    def metrics_summary(
        self,
        period: str = "7",
        channel: str = ALL_CHANNELS,
        custom_from: date | None = None,
        custom_to: date | None = None,
        as_of: datetime | None = None,
    ) -> MetricsSummary:
        """Headline figures (revenue, orders, AOV, items, orders per day)."""
        _, dates = self._resolve(period, as_of, custom_from, custom_to)
        aggregate = aggregate_orders(self._orders(dates.period, channel))
        return MetricsSummary(
            period=dates.period, days=dates.days, channel=channel, aggregate=aggregate
        )

    def top_channels(
        self,
        period: str,
        channel: str = ALL_CHANNELS,
        limit: int = 6,
        custom_from: date | None = None,
        custom_to: date | None = None,
        as_of: datetime | None = None,
    ) -> list[ChannelRanking]:
        _, dates = self._resolve(period, as_of, custom_from, custom_to)
        return rank_channels(self._orders(dates.period, channel), limit)

    def top_products(
        self,
        period: str,
        channel: str = ALL_CHANNELS,
        limit: int = 10,
        custom_from: date | None = None,
        custom_to: date | None = None,
        as_of: datetime | None = None,
    ) -> list[ProductRanking]:
        _, dates = self._resolve(period, as_of, custom_from, custom_to)
        return rank_products(self._orders(dates.period, channel), limit)

    def daily_revenue(
        self,
        period: str,
        channel: str = ALL_CHANNELS,
        custom_from: date | None = None,
        custom_to: date | None = None,
        as_of: datetime | None = None,
    ) -> list[DailyBreakdown]:
        """Per-day revenue, order and item counts for charting."""
        moment, dates = self._resolve(period, as_of, custom_from, custom_to)
        days = build_date_range(period, moment, custom_from, custom_to)
        return daily_breakdown(self._orders(dates.period, channel), days)

    def best_performing_day(
        self,
        period: str,
        channel: str = ALL_CHANNELS,
        custom_from: date | None = None,
        custom_to: date | None = None,
        as_of: datetime | None = None,
    ) -> DailyBreakdown | None:
        """The chart day with the highest revenue, or None when no day had any.

        Ties go to the earliest day.
        """
        breakdown = self.daily_revenue(period, channel, custom_from, custom_to, as_of)
        best = max(breakdown, key=lambda entry: entry.revenue, default=None)
        if best is None or best.revenue <= 0:
            return None
        return best
