"""Order statuses, transition actors and the default tracking copy."""

from enum import Enum


class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    SHIPPING = "shipping"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class TransitionActor(Enum):
    """Who asked for a status change."""

    CUSTOMER = "customer"
    OPERATOR = "operator"
    FULFILLMENT = "fulfillment"
    SYSTEM = "system"


# Forward chain, in order; no status may be skipped
FULFILLMENT_CHAIN = (
    OrderStatus.PENDING,
    OrderStatus.CONFIRMED,
    OrderStatus.PREPARING,
    OrderStatus.SHIPPING,
    OrderStatus.DELIVERED,
)

TERMINAL_STATUSES = frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED})

DEFAULT_TRACKING_MESSAGES = {
    OrderStatus.PENDING: "Order received successfully",
    OrderStatus.CONFIRMED: "Order confirmed",
    OrderStatus.PREPARING: "Order is being prepared",
    OrderStatus.SHIPPING: "Order is on its way",
    OrderStatus.DELIVERED: "Order delivered successfully",
    OrderStatus.CANCELLED: "Order cancelled",
}


def as_status(value) -> OrderStatus:
    """Coerce a stored string or an ``OrderStatus`` into an ``OrderStatus``.

    Raises ``ValueError`` for anything that is not a known status.
    """
    if isinstance(value, OrderStatus):
        return value
    return OrderStatus(value)
