"""Cancellation policy — when a customer may still cancel an order."""

from ordering.order.status import OrderStatus, as_status

# Cancellation is only possible before the warehouse starts preparing
CANCELLABLE_STATUSES = frozenset({OrderStatus.PENDING, OrderStatus.CONFIRMED})


def can_cancel(status) -> bool:
    """Return True if an order in ``status`` may be cancelled by the customer."""
    try:
        return as_status(status) in CANCELLABLE_STATUSES
    except ValueError:
        return False
