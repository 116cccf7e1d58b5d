"""Tests for OrderRepository against an in-memory SQLite database."""

from datetime import UTC, datetime, timedelta
from decimal import Decimal

import pytest

from app.orders.models.order import OrderStatus
from app.orders.repository import OrderRepository
from app.reports.filters import StatusFilter, default_revenue_filters
from tests.utils.factories import create_order_factory

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=UTC)


@pytest.fixture
def repository(db_session):
    return OrderRepository(db_session)


@pytest.fixture
def seeded_orders(db_session):
    return [
        create_order_factory(
            db_session,
            total_charge="10.00",
            received_at=NOW - timedelta(days=7),
            order_number="R-1",
            items=[("SKU-A", 2, "5.00")],
        ),
        create_order_factory(
            db_session,
            total_charge="20.00",
            received_at=NOW - timedelta(days=3),
            order_number="R-2",
        ),
        create_order_factory(
            db_session,
            total_charge="40.00",
            received_at=NOW - timedelta(days=2),
            order_number="R-3",
            channel="amazon",
            status=OrderStatus.CANCELLED,
        ),
        create_order_factory(
            db_session, total_charge="80.00", received_at=NOW, order_number="R-4"
        ),
    ]


class TestFetchOrders:
    def test_half_open_range(self, repository, seeded_orders):
        orders = repository.fetch_orders(NOW - timedelta(days=7), NOW)

        assert sorted(o.order_number for o in orders) == ["R-1", "R-2", "R-3"]

    def test_revenue_filters_drop_cancelled(self, repository, seeded_orders):
        orders = repository.fetch_orders(
            NOW - timedelta(days=7), NOW, default_revenue_filters()
        )

        assert sorted(o.order_number for o in orders) == ["R-1", "R-2"]
        assert sum(o.total_charge for o in orders) == Decimal("30.00")

    def test_status_filter(self, repository, seeded_orders):
        orders = repository.fetch_orders(
            NOW - timedelta(days=30), NOW + timedelta(days=1), [StatusFilter.of("cancelled")]
        )

        assert [o.channel for o in orders] == ["amazon"]

    def test_items_loaded(self, repository, seeded_orders):
        orders = repository.fetch_orders(NOW - timedelta(days=8), NOW - timedelta(days=6))

        assert len(orders) == 1
        assert orders[0].items[0].sku == "SKU-A"
        assert orders[0].items[0].line_total == Decimal("10.00")

    def test_empty_range(self, repository, seeded_orders):
        assert repository.fetch_orders(NOW - timedelta(days=60), NOW - timedelta(days=30)) == []


class TestRecent:
    def test_newest_first_with_limit(self, repository, seeded_orders):
        orders = repository.recent(limit=2)

        assert [o.order_number for o in orders] == ["R-4", "R-3"]

    def test_count_matching(self, repository, seeded_orders):
        assert repository.count_matching(default_revenue_filters()) == 3
        assert repository.count_matching() == 4
