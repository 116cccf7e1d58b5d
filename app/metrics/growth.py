"""Period-over-period growth rate."""

from dataclasses import dataclass
from decimal import Decimal

from app.metrics.aggregator import PeriodAggregate


@dataclass(frozen=True)
class GrowthRate:
    """Relative change between two period totals.

    ``ratio`` is ``(current - previous) / previous`` (0.25 means 25% growth).
    When the previous total is zero the rate is undefined: ``ratio`` is None
    and ``is_defined`` is False. The totals are kept so callers can still tell
    a flat "nothing to nothing" from "something out of nothing".
    """

    current_total: Decimal
    previous_total: Decimal
    ratio: float | None

    @property
    def is_defined(self) -> bool:
        return self.ratio is not None

    @property
    def percent(self) -> float | None:
        if self.ratio is None:
            return None
        return round(self.ratio * 100, 2)

    @property
    def undefined_reason(self) -> str | None:
        if self.is_defined:
            return None
        return "previous_period_total_zero"


def calculate_growth_rate(current: PeriodAggregate, previous: PeriodAggregate) -> GrowthRate:
    """Compare two period aggregates.

    Returns an undefined GrowthRate (never NaN or infinity) when the previous
    total is zero.
    """
    if previous.total == 0:
        return GrowthRate(current_total=current.total, previous_total=previous.total, ratio=None)

    ratio = float((current.total - previous.total) / previous.total)
    return GrowthRate(current_total=current.total, previous_total=previous.total, ratio=ratio)
