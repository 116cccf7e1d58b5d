from datetime import UTC, date, datetime, timedelta
from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from app.core.exceptions import ValidationError
from app.metrics.service import SalesMetricsService
from app.orders.models.order import OrderStatus
from app.reports.filters import ChannelFilter, ExcludeCancelledFilter
from tests.utils.factories import build_order
from tests.utils.fakes import FakeOrderDataSource

AS_OF = datetime(2026, 3, 10, 12, 0, tzinfo=UTC)


def _service(orders=(), as_of=AS_OF):
    source = FakeOrderDataSource(orders)
    return SalesMetricsService(source, clock=lambda: as_of), source


def _days_ago(days: float) -> datetime:
    return AS_OF - timedelta(days=days)


class TestGrowthRate:
    def test_seven_day_growth(self):
        service, _ = _service(
            [
                build_order("100.00", received_at=_days_ago(1)),
                build_order("50.00", received_at=_days_ago(6)),
                build_order("60.00", received_at=_days_ago(8)),
                build_order("40.00", received_at=_days_ago(13)),
            ]
        )

        report = service.growth_rate(7)

        assert report.current.total == Decimal("150.00")
        assert report.previous.total == Decimal("100.00")
        assert report.growth.ratio == pytest.approx(0.5)

    def test_thirty_day_drop_to_zero(self):
        service, _ = _service([build_order("200.00", received_at=_days_ago(45))])

        report = service.growth_rate(30)

        assert report.current.total == Decimal("0")
        assert report.growth.ratio == pytest.approx(-1.0)

    def test_windows_are_adjacent(self):
        service, source = _service()

        report = service.growth_rate(7)

        assert report.current_period.start == _days_ago(7)
        assert report.current_period.end == AS_OF
        assert report.previous_period.start == _days_ago(14)
        assert report.previous_period.end == _days_ago(7)
        assert [(start, end) for start, end, _ in source.calls] == [
            (_days_ago(7), AS_OF),
            (_days_ago(14), _days_ago(7)),
        ]

    def test_boundary_order_counts_once(self):
        service, _ = _service([build_order("70.00", received_at=_days_ago(7))])

        report = service.growth_rate(7)

        assert report.current.total == Decimal("70.00")
        assert report.previous.total == Decimal("0")

    def test_zero_previous_is_undefined(self):
        service, _ = _service([build_order("80.00", received_at=_days_ago(2))])

        report = service.growth_rate(7)

        assert not report.growth.is_defined
        assert report.current.total == Decimal("80.00")

    def test_no_orders_at_all_is_undefined(self):
        service, _ = _service()

        report = service.growth_rate(1)

        assert not report.growth.is_defined
        assert report.current.order_count == 0

    def test_cancelled_orders_excluded(self):
        service, source = _service(
            [
                build_order("100.00", received_at=_days_ago(1)),
                build_order("500.00", received_at=_days_ago(2), status=OrderStatus.CANCELLED),
                build_order("50.00", received_at=_days_ago(9)),
            ]
        )

        report = service.growth_rate(7)

        assert report.current.total == Decimal("100.00")
        assert report.growth.ratio == pytest.approx(1.0)
        _, _, filters = source.calls[0]
        assert ExcludeCancelledFilter() in filters
        assert ChannelFilter("all") in filters

    @pytest.mark.parametrize("days", [0, -1, -30, True, 1.5])
    def test_invalid_window_rejected_before_fetch(self, days):
        service, source = _service()

        with pytest.raises(ValidationError) as exc_info:
            service.growth_rate(days)

        assert exc_info.value.details == {"field": "days"}
        assert source.calls == []

    @pytest.mark.parametrize("days", [1_000_000, 10**12])
    def test_window_before_earliest_date_rejected_before_fetch(self, days):
        service, source = _service()

        with pytest.raises(ValidationError) as exc_info:
            service.growth_rate(days)

        assert exc_info.value.details == {"field": "days"}
        assert source.calls == []

    def test_long_window_that_fits_is_computed(self):
        service, source = _service([build_order("10.00", received_at=_days_ago(1))])

        report = service.growth_rate(300_000)

        assert report.current.total == Decimal("10.00")
        assert not report.growth.is_defined
        assert len(source.calls) == 2

    def test_explicit_as_of_overrides_clock(self):
        service, _ = _service([build_order("10.00", received_at=datetime(2025, 1, 2, tzinfo=UTC))])
        as_of = datetime(2025, 1, 5, tzinfo=UTC)

        report = service.growth_rate(7, as_of=as_of)

        assert report.current_period.end == as_of
        assert report.current.total == Decimal("10.00")

    def test_same_inputs_same_result(self):
        orders = [build_order("12.34", received_at=_days_ago(3))]
        first, _ = _service(orders)
        second, _ = _service(orders)

        assert first.growth_rate(7) == second.growth_rate(7)


class TestMetricsSummary:
    def test_summary_figures(self):
        service, _ = _service(
            [
                build_order("40.00", received_at=_days_ago(1), items=[("SKU-A", 2, "20.00")]),
                build_order(
                    "20.00",
                    received_at=_days_ago(2),
                    status=OrderStatus.PENDING,
                    items=[("SKU-B", 1, "20.00")],
                ),
            ]
        )

        summary = service.metrics_summary("7")

        assert summary.days == 7
        assert summary.aggregate.total == Decimal("60.00")
        assert summary.aggregate.items_sold == 3
        assert summary.aggregate.processed_count == 1
        assert summary.orders_per_day == pytest.approx(2 / 7)

    def test_channel_filter(self):
        service, _ = _service(
            [
                build_order("40.00", received_at=_days_ago(1), channel="amazon"),
                build_order("20.00", received_at=_days_ago(1), channel="ebay"),
            ]
        )

        summary = service.metrics_summary("7", channel="ebay")

        assert summary.aggregate.total == Decimal("20.00")
        assert summary.channel == "ebay"

    def test_custom_range(self):
        service, source = _service(
            [build_order("15.00", received_at=datetime(2026, 2, 3, 23, 59, tzinfo=UTC))]
        )

        summary = service.metrics_summary(
            "custom", custom_from=date(2026, 2, 1), custom_to=date(2026, 2, 3)
        )

        assert summary.days == 3
        assert summary.aggregate.total == Decimal("15.00")
        assert source.calls[0][1] == datetime(2026, 2, 4, tzinfo=UTC)


class TestRankingsAndDaily:
    def test_top_channels(self):
        service, _ = _service(
            [
                build_order("10.00", received_at=_days_ago(1), channel="ebay"),
                build_order("30.00", received_at=_days_ago(1), channel="amazon"),
            ]
        )

        rankings = service.top_channels("7")

        assert [r.channel for r in rankings] == ["amazon", "ebay"]

    def test_top_products(self):
        service, _ = _service(
            [
                build_order(
                    received_at=_days_ago(1), items=[("SKU-A", 5, "1.00"), ("SKU-B", 1, "9.00")]
                )
            ]
        )

        rankings = service.top_products("7", limit=1)

        assert len(rankings) == 1
        assert rankings[0].sku == "SKU-A"

    def test_daily_revenue_has_one_entry_per_day(self):
        service, _ = _service([build_order("25.00", received_at=_days_ago(0.5))])

        breakdown = service.daily_revenue("7")

        assert len(breakdown) == 7
        assert breakdown[-1].day == date(2026, 3, 10)
        assert breakdown[-1].revenue == Decimal("25.00")

    def test_best_performing_day(self):
        service, _ = _service(
            [
                build_order("25.00", received_at=_days_ago(1)),
                build_order("30.00", received_at=_days_ago(3)),
                build_order("20.00", received_at=_days_ago(3)),
                build_order("400.00", received_at=_days_ago(2), status=OrderStatus.CANCELLED),
            ]
        )

        best = service.best_performing_day("7")

        assert best is not None
        assert best.day == date(2026, 3, 7)
        assert best.revenue == Decimal("50.00")
        assert best.orders == 2

    def test_best_performing_day_tie_goes_to_earliest(self):
        service, _ = _service(
            [
                build_order("40.00", received_at=_days_ago(1)),
                build_order("40.00", received_at=_days_ago(4)),
            ]
        )

        assert service.best_performing_day("7").day == date(2026, 3, 6)

    def test_best_performing_day_without_sales(self):
        service, _ = _service([build_order("40.00", received_at=_days_ago(60))])

        assert service.best_performing_day("7") is None
        assert service.best_performing_day("7", channel="ebay") is None


class FailingOrderDataSource(FakeOrderDataSource):
    """Order source whose fetch number ``fail_on`` raises ``error``."""

    def __init__(self, error: Exception, fail_on: int):
        super().__init__([build_order("10.00", received_at=_days_ago(1))])
        self.error = error
        self.fail_on = fail_on

    def fetch_orders(self, start, end, filters=()):
        result = super().fetch_orders(start, end, filters)
        if len(self.calls) == self.fail_on:
            raise self.error
        return result


class TestDataSourceFailures:
    @staticmethod
    def _db_error() -> OperationalError:
        return OperationalError("SELECT orders", {}, Exception("server closed the connection"))

    def test_first_fetch_failure_propagates_without_second_fetch(self):
        error = self._db_error()
        source = FailingOrderDataSource(error, fail_on=1)
        service = SalesMetricsService(source, clock=lambda: AS_OF)

        with pytest.raises(OperationalError) as exc_info:
            service.growth_rate(7)

        assert exc_info.value is error
        assert len(source.calls) == 1

    def test_second_fetch_failure_propagates(self):
        error = self._db_error()
        source = FailingOrderDataSource(error, fail_on=2)
        service = SalesMetricsService(source, clock=lambda: AS_OF)

        with pytest.raises(OperationalError) as exc_info:
            service.growth_rate(7)

        assert exc_info.value is error
        assert len(source.calls) == 2
