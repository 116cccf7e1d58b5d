from uuid import UUID

from pydantic import BaseModel, ConfigDict

from app.core.serialization import Money, UTCDatetime
from app.orders.models.order import OrderStatus


class OrderItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    sku: str
    title: str
    quantity: int
    unit_price: Money


class RecentOrderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    order_number: str
    channel: str
    status: OrderStatus
    total_charge: Money
    currency: str
    is_processed: bool
    received_at: UTCDatetime
    items: list[OrderItemResponse] = []
