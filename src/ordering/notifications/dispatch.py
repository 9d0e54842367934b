"""Best-effort delivery of order notifications.

Called after the store has committed. A failing notifier is logged and
never undoes or fails the change that triggered it.
"""

import structlog

from ordering.notifications import get_notifier
from ordering.notifications.port import OrderNotification

logger = structlog.get_logger(__name__)


def _deliver(notification: OrderNotification) -> bool:
    try:
        get_notifier().send(notification)
    except Exception as exc:
        logger.warning(
            "Order notification failed",
            order_id=notification.order_id,
            topic=notification.topic,
            error=str(exc),
        )
        return False
    return True


def notify_status_change(order, previous_status: str, entry) -> bool:
    """Tell the notifier that ``order`` moved from ``previous_status`` to ``entry.status``."""
    return _deliver(
        OrderNotification(
            order_id=str(order.id),
            order_number=order.order_number,
            customer_id=str(order.customer_id),
            occurred_at=entry.occurred_at,
            previous_status=previous_status,
            new_status=entry.status,
            message=entry.message,
        )
    )


def notify_return_request(order, return_request) -> bool:
    """Tell the notifier that a return or exchange was opened against ``order``."""
    return _deliver(
        OrderNotification(
            order_id=str(order.id),
            order_number=order.order_number,
            customer_id=str(order.customer_id),
            occurred_at=return_request.submitted_at,
            request_kind=return_request.kind,
            request_id=str(return_request.id),
            message=return_request.description,
            extra={"item_ids": return_request.selected_item_ids()},
        )
    )
