"""Order report service."""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.orders.models.order import Order
from app.reports.filters import (
    ALL_CHANNELS,
    ChannelFilter,
    DateRangeFilter,
    ExcludeCancelledFilter,
    OrderFilter,
    apply_filters,
)
from app.reports.schemas import OrderChannelCount, OrderStatusCount, OrderStatusReportResponse


def _percentage(part: int, whole: int) -> float:
    return round((part / whole) * 100, 2) if whole > 0 else 0.0


def _money(value: object) -> Decimal:
    return Decimal(str(value)) if value is not None else Decimal("0")


class OrderReportService:
    """Service for date-range filtered order reports."""

    @staticmethod
    def build_filters(
        start: datetime,
        end: datetime,
        channel: str = ALL_CHANNELS,
        include_cancelled: bool = False,
    ) -> list[OrderFilter]:
        filters: list[OrderFilter] = [DateRangeFilter(start, end), ChannelFilter(channel)]
        if not include_cancelled:
            filters.append(ExcludeCancelledFilter())
        return filters

    @staticmethod
    def status_report(
        db: Session,
        start: datetime,
        end: datetime,
        channel: str = ALL_CHANNELS,
        include_cancelled: bool = False,
    ) -> OrderStatusReportResponse:
        """Get order statistics with status and channel breakdowns.

        Args:
            db: Database session.
            start: Report start (inclusive).
            end: Report end (exclusive).
            channel: Sales channel, or "all".
            include_cancelled: Whether cancelled orders are counted.

        Returns:
            OrderStatusReportResponse with totals and breakdowns.
        """
        filters = OrderReportService.build_filters(start, end, channel, include_cancelled)
        query = apply_filters(db.query(Order), filters)

        total_orders = query.count()
        total_revenue = _money(query.with_entities(func.sum(Order.total_charge)).scalar())

        # By status
        status_rows = (
            query.with_entities(Order.status, func.count(Order.id), func.sum(Order.total_charge))
            .group_by(Order.status)
            .all()
        )
        by_status = [
            OrderStatusCount(
                status=s.value if hasattr(s, "value") else str(s),
                count=c,
                percentage=_percentage(c, total_orders),
                revenue=_money(r),
            )
            for s, c, r in status_rows
        ]
        by_status.sort(key=lambda row: row.count, reverse=True)

        # By channel
        channel_rows = (
            query.with_entities(Order.channel, func.count(Order.id), func.sum(Order.total_charge))
            .group_by(Order.channel)
            .all()
        )
        by_channel = [
            OrderChannelCount(
                channel=ch,
                count=c,
                percentage=_percentage(c, total_orders),
                revenue=_money(r),
            )
            for ch, c, r in channel_rows
        ]
        by_channel.sort(key=lambda row: row.revenue, reverse=True)

        return OrderStatusReportResponse(
            start=start,
            end=end,
            channel=channel,
            include_cancelled=include_cancelled,
            total_orders=total_orders,
            total_revenue=total_revenue,
            by_status=by_status,
            by_channel=by_channel,
        )
