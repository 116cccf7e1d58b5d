from app.orders.models.order import Order, OrderItem, OrderStatus

__all__ = [
    "Order",
    "OrderItem",
    "OrderStatus",
]
