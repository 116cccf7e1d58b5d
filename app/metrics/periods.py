"""Period helpers for metrics.

All boundaries are derived from an explicit ``as_of`` timestamp so that the
same inputs always produce the same periods.
"""

import enum
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

from app.core.exceptions import ValidationError

DEFAULT_DAYS = 30


@dataclass(frozen=True)
class Period:
    """Half-open time interval ``[start, end)``."""

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValidationError("Period start must not be after its end", field="start")

    @classmethod
    def trailing(cls, days: int, as_of: datetime) -> "Period":
        """The ``days`` long period ending at ``as_of``."""
        return cls(as_of - timedelta(days=days), as_of)

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def previous(self) -> "Period":
        """The immediately preceding period of the same duration.

        The two periods share the boundary instant but never overlap, since
        ``start`` belongs only to the current period.
        """
        return Period(self.start - self.duration, self.start)

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment < self.end


class MetricsPeriod(str, enum.Enum):
    TODAY = "0"
    YESTERDAY = "1"
    SEVEN_DAYS = "7"
    THIRTY_DAYS = "30"
    NINETY_DAYS = "90"
    ONE_EIGHTY_DAYS = "180"
    THREE_SIXTY_FIVE_DAYS = "365"
    SEVEN_THIRTY_DAYS = "730"
    CUSTOM = "custom"

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def is_cacheable(self) -> bool:
        return self is not MetricsPeriod.CUSTOM

    def cache_key(self, channel: str = "all") -> str:
        return f"metrics_{self.value}d_{channel}"

    @classmethod
    def cacheable(cls) -> list["MetricsPeriod"]:
        return [p for p in cls if p.is_cacheable]

    @classmethod
    def try_from(cls, value: str | None) -> "MetricsPeriod | None":
        if value is None:
            return None
        try:
            return cls(value)
        except ValueError:
            return None


_LABELS = {
    MetricsPeriod.TODAY: "Today",
    MetricsPeriod.YESTERDAY: "Yesterday",
    MetricsPeriod.SEVEN_DAYS: "Last 7 days",
    MetricsPeriod.THIRTY_DAYS: "Last 30 days",
    MetricsPeriod.NINETY_DAYS: "Last 90 days",
    MetricsPeriod.ONE_EIGHTY_DAYS: "Last 180 days",
    MetricsPeriod.THREE_SIXTY_FIVE_DAYS: "Last 365 days",
    MetricsPeriod.SEVEN_THIRTY_DAYS: "Last 730 days",
    MetricsPeriod.CUSTOM: "Custom range",
}


@dataclass(frozen=True)
class PeriodDates:
    period: Period
    days: int


def _start_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def ensure_lookback(days: int, as_of: datetime, field: str = "days", windows: int = 1) -> None:
    """Reject a look-back of ``windows * days`` that reaches before the earliest datetime.

    Raises:
        ValidationError: If the earliest boundary cannot be represented.
    """
    try:
        as_of - timedelta(days=days * windows)
    except OverflowError as e:
        raise ValidationError(
            "Window reaches before the earliest supported date", field=field
        ) from e


def _parse_days(period: str, as_of: datetime) -> int:
    try:
        days = int(period)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Unknown metrics period: {period!r}", field="period") from e
    if days < 0:
        raise ValidationError("Metrics period must not be negative", field="period")
    # one extra day for rounding the start down to midnight
    ensure_lookback(days + 1, as_of, field="period")
    return max(1, days)


def _custom_range(
    period: str, custom_from: date | None, custom_to: date | None
) -> tuple[date, date] | None:
    """The inclusive custom range, or None when the selector is not a complete custom range."""
    if period != MetricsPeriod.CUSTOM.value or custom_from is None or custom_to is None:
        return None
    if custom_from > custom_to:
        raise ValidationError("Custom range start must not be after its end", field="from")
    if custom_to == date.max:
        raise ValidationError("Custom range end is out of range", field="to")
    return custom_from, custom_to


def calculate_period_dates(
    period: str,
    as_of: datetime,
    custom_from: date | None = None,
    custom_to: date | None = None,
) -> PeriodDates:
    """Resolve a dashboard period selector into concrete boundaries.

    Args:
        period: "0" (today), "1" (yesterday), a number of days, or "custom".
        as_of: The moment treated as "now".
        custom_from: First day of a custom range (inclusive).
        custom_to: Last day of a custom range (inclusive).

    Returns:
        PeriodDates with the half-open period and its length in days.
        A custom selector without both dates falls back to the last 30 days.
    """
    today_start = _start_of_day(as_of)

    custom = _custom_range(period, custom_from, custom_to)
    if custom is not None:
        first_day, last_day = custom
        start = datetime.combine(first_day, time.min, tzinfo=as_of.tzinfo)
        end = datetime.combine(last_day + timedelta(days=1), time.min, tzinfo=as_of.tzinfo)
        days = max(1, (last_day - first_day).days + 1)
        return PeriodDates(Period(start, end), days)

    if period == MetricsPeriod.CUSTOM.value:
        period = str(DEFAULT_DAYS)

    if period == MetricsPeriod.YESTERDAY.value:
        return PeriodDates(Period(today_start - timedelta(days=1), today_start), 1)

    if period == MetricsPeriod.TODAY.value:
        return PeriodDates(Period(today_start, as_of), 1)

    days = _parse_days(period, as_of)
    start = _start_of_day(as_of - timedelta(days=days))
    return PeriodDates(Period(start, as_of), days)


def build_date_range(
    period: str,
    as_of: datetime,
    custom_from: date | None = None,
    custom_to: date | None = None,
) -> list[date]:
    """List the chart dates for a period selector.

    Single-day selectors return the day with a neighbour on each side so the
    chart can centre one bar.
    """
    today = as_of.date()

    custom = _custom_range(period, custom_from, custom_to)
    if custom is not None:
        first_day, last_day = custom
        span = (last_day - first_day).days
        return [first_day + timedelta(days=offset) for offset in range(span + 1)]

    if period == MetricsPeriod.CUSTOM.value:
        period = str(DEFAULT_DAYS)

    if period in (MetricsPeriod.TODAY.value, MetricsPeriod.YESTERDAY.value):
        centre = today if period == MetricsPeriod.TODAY.value else today - timedelta(days=1)
        return [centre - timedelta(days=1), centre, centre + timedelta(days=1)]

    days = _parse_days(period, as_of)
    return [today - timedelta(days=days_ago) for days_ago in range(days - 1, -1, -1)]
