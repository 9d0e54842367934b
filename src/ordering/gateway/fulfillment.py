"""Fulfillment gateway — warehouse and carrier milestones entering the order lifecycle.

The warehouse and shipping systems report milestones in their own
vocabulary. The gateway maps each one onto the order status it stands for
and requests that transition with the ``fulfillment`` actor, through the
same entry point every other caller uses.
"""

from datetime import datetime

import structlog

from ordering.order import lifecycle
from ordering.order.errors import InvalidTransition
from ordering.order.order import Order
from ordering.order.status import OrderStatus, TransitionActor

logger = structlog.get_logger(__name__)

MILESTONES = {
    "preparing": OrderStatus.PREPARING,
    "picking": OrderStatus.PREPARING,
    "packed": OrderStatus.PREPARING,
    "shipping": OrderStatus.SHIPPING,
    "shipped": OrderStatus.SHIPPING,
    "out_for_delivery": OrderStatus.SHIPPING,
    "delivered": OrderStatus.DELIVERED,
}


class FulfillmentGateway:
    """Translate fulfillment milestones into order transitions."""

    def __init__(self, milestones: dict[str, OrderStatus] | None = None):
        self.milestones = dict(MILESTONES if milestones is None else milestones)

    def status_for(self, milestone: str) -> OrderStatus:
        key = (milestone or "").strip().lower()
        if key not in self.milestones:
            raise InvalidTransition(f"Unknown fulfillment milestone {milestone!r}", milestone=milestone)
        return self.milestones[key]

    def handle_update(
        self,
        order_id: str,
        milestone: str,
        message: str | None = None,
        now: datetime | None = None,
    ) -> Order:
        target = self.status_for(milestone)
        logger.info("Fulfillment milestone received", order_id=str(order_id), milestone=milestone)
        return lifecycle.request_transition(
            order_id,
            target,
            message=message,
            actor=TransitionActor.FULFILLMENT,
            now=now,
        )
