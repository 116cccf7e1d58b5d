"""Metrics schemas for the admin dashboard."""

import datetime as dt

from pydantic import BaseModel, Field

from app.core.serialization import Money, UTCDatetime
from app.metrics.aggregator import ChannelRanking, DailyBreakdown, PeriodAggregate, ProductRanking
from app.metrics.periods import MetricsPeriod, Period
from app.metrics.service import GrowthReport, MetricsSummary

# ============ Shared ============


class PeriodResponse(BaseModel):
    """Half-open period [start, end)."""

    start: UTCDatetime
    end: UTCDatetime

    @classmethod
    def from_period(cls, period: Period) -> "PeriodResponse":
        return cls(start=period.start, end=period.end)


class AggregateResponse(BaseModel):
    """Totals for one period."""

    total: Money = Field(description="Sum of order charges")
    orders_count: int
    average_order_value: Money
    items_sold: int
    processed_orders: int
    processed_revenue: Money
    open_orders: int
    open_revenue: Money

    @classmethod
    def from_aggregate(cls, aggregate: PeriodAggregate) -> "AggregateResponse":
        return cls(
            total=aggregate.total,
            orders_count=aggregate.order_count,
            average_order_value=aggregate.average_order_value,
            items_sold=aggregate.items_sold,
            processed_orders=aggregate.processed_count,
            processed_revenue=aggregate.processed_total,
            open_orders=aggregate.open_count,
            open_revenue=aggregate.open_total,
        )


class PeriodOption(BaseModel):
    value: str
    label: str
    cacheable: bool

    @classmethod
    def from_enum(cls, period: MetricsPeriod) -> "PeriodOption":
        return cls(value=period.value, label=period.label, cacheable=period.is_cacheable)


# ============ Growth ============


class GrowthRateResponse(BaseModel):
    """Revenue growth of the current window against the preceding one.

    ``growth_rate`` is null when the previous window had no revenue; check
    ``defined`` rather than the value.
    """

    window_days: int
    defined: bool
    growth_rate: float | None = Field(description="Ratio, e.g. 0.25 for 25% growth")
    growth_percent: float | None
    undefined_reason: str | None = None
    current_period: PeriodResponse
    previous_period: PeriodResponse
    current: AggregateResponse
    previous: AggregateResponse

    @classmethod
    def from_report(cls, report: GrowthReport) -> "GrowthRateResponse":
        return cls(
            window_days=report.window_days,
            defined=report.growth.is_defined,
            growth_rate=report.growth.ratio,
            growth_percent=report.growth.percent,
            undefined_reason=report.growth.undefined_reason,
            current_period=PeriodResponse.from_period(report.current_period),
            previous_period=PeriodResponse.from_period(report.previous_period),
            current=AggregateResponse.from_aggregate(report.current),
            previous=AggregateResponse.from_aggregate(report.previous),
        )


# ============ Summary ============


class MetricsSummaryResponse(BaseModel):
    """Headline metrics for a dashboard period."""

    period: PeriodResponse
    days: int
    channel: str
    total_revenue: Money
    total_orders: int
    average_order_value: Money
    total_items: int
    orders_per_day: float
    processed_orders: int
    open_orders: int
    processed_revenue: Money
    open_revenue: Money
    cached: bool = False

    @classmethod
    def from_summary(cls, summary: MetricsSummary) -> "MetricsSummaryResponse":
        aggregate = summary.aggregate
        return cls(
            period=PeriodResponse.from_period(summary.period),
            days=summary.days,
            channel=summary.channel,
            total_revenue=aggregate.total,
            total_orders=aggregate.order_count,
            average_order_value=aggregate.average_order_value,
            total_items=aggregate.items_sold,
            orders_per_day=round(summary.orders_per_day, 2),
            processed_orders=aggregate.processed_count,
            open_orders=aggregate.open_count,
            processed_revenue=aggregate.processed_total,
            open_revenue=aggregate.open_total,
        )


# ============ Rankings ============


class ChannelRankingResponse(BaseModel):
    channel: str
    revenue: Money
    orders_count: int
    percentage: float = Field(description="Share of revenue in the period")

    @classmethod
    def from_ranking(cls, ranking: ChannelRanking) -> "ChannelRankingResponse":
        return cls(
            channel=ranking.channel,
            revenue=ranking.revenue,
            orders_count=ranking.order_count,
            percentage=ranking.share_percent,
        )


class ProductRankingResponse(BaseModel):
    sku: str
    title: str
    quantity: int
    revenue: Money

    @classmethod
    def from_ranking(cls, ranking: ProductRanking) -> "ProductRankingResponse":
        return cls(
            sku=ranking.sku,
            title=ranking.title,
            quantity=ranking.quantity,
            revenue=ranking.revenue,
        )


# ============ Daily chart ============


class DailyRevenuePoint(BaseModel):
    date: str = Field(description="Display date, e.g. 'Mar 5, 2026'")
    iso_date: dt.date
    day: str = Field(description="Short weekday name")
    revenue: Money
    orders: int
    items: int
    avg_order_value: Money

    @classmethod
    def from_breakdown(cls, entry: DailyBreakdown) -> "DailyRevenuePoint":
        return cls(
            date=f"{entry.day.strftime('%b')} {entry.day.day}, {entry.day.year}",
            iso_date=entry.day,
            day=entry.day.strftime("%a"),
            revenue=entry.revenue,
            orders=entry.orders,
            items=entry.items,
            avg_order_value=entry.avg_order_value,
        )


# ============ Cache ============


class CacheStatusEntry(BaseModel):
    period: str
    label: str
    key: str
    cached: bool
    ttl_seconds: int | None = None


class CacheStatusResponse(BaseModel):
    channel: str
    entries: list[CacheStatusEntry]


class CacheWarmResponse(BaseModel):
    channel: str
    warmed: list[str]
    execution_time_seconds: float


class CacheWarmTaskResponse(BaseModel):
    task_id: str
    status: str = "queued"


class CacheFlushResponse(BaseModel):
    deleted_keys: int
