from datetime import UTC, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Annotated

from pydantic.functional_serializers import PlainSerializer


def _serialize_utc_datetime(v: datetime | None) -> str | None:
    if v is None:
        return None
    if v.tzinfo is None:
        v = v.replace(tzinfo=UTC)
    return v.isoformat()


def _serialize_money(v: Decimal | None) -> float | None:
    if v is None:
        return None
    return float(Decimal(v).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


UTCDatetime = Annotated[datetime, PlainSerializer(_serialize_utc_datetime)]

# Money amounts are Decimal internally and plain 2-place numbers on the wire.
Money = Annotated[Decimal, PlainSerializer(_serialize_money, return_type=float)]
