"""Report schemas for the admin dashboard."""

from pydantic import BaseModel, Field

from app.core.serialization import Money, UTCDatetime


class OrderStatusCount(BaseModel):
    status: str
    count: int
    percentage: float
    revenue: Money


class OrderChannelCount(BaseModel):
    channel: str
    count: int
    percentage: float
    revenue: Money


class OrderStatusReportResponse(BaseModel):
    """Order counts and revenue broken down by status and channel."""

    start: UTCDatetime
    end: UTCDatetime
    channel: str
    include_cancelled: bool
    total_orders: int
    total_revenue: Money = Field(description="Revenue of the orders counted in the report")
    by_status: list[OrderStatusCount]
    by_channel: list[OrderChannelCount]
