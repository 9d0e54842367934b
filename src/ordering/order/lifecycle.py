"""Order lifecycle — placing orders and driving them through their statuses.

Every transition follows the same path: read the order, let the state
machine decide, hand the accepted change to the store for an atomic append
against the status that was validated, then tell the notifier. A
``TransitionConflict`` is returned to the caller as-is; it is never retried
here, so a genuine double submission is not masked.
"""

from datetime import datetime

import structlog
from protean.utils.globals import current_domain

from ordering.notifications.dispatch import notify_status_change
from ordering.order.errors import InvalidTransition, OrderRejection, TransitionConflict
from ordering.order.order import Order
from ordering.order.state_machine import next_status, plan_transition
from ordering.order.status import OrderStatus, TransitionActor

logger = structlog.get_logger(__name__)


def _orders():
    return current_domain.repository_for(Order)


# ---------------------------------------------------------------------------
# Placement and reads
# ---------------------------------------------------------------------------
def place_order(
    customer_id: str,
    items: list[dict],
    pricing: dict,
    shipping_address: dict,
    payment_method: str,
    now: datetime | None = None,
) -> Order:
    try:
        order = _orders().create_order(
            customer_id=customer_id,
            items=items,
            pricing=pricing,
            shipping_address=shipping_address,
            payment_method=payment_method,
            now=now,
        )
    except OrderRejection as exc:
        logger.info("Order rejected", customer_id=str(customer_id), code=exc.code, detail=exc.detail)
        raise

    logger.info(
        "Order placed",
        order_id=str(order.id),
        order_number=order.order_number,
        customer_id=str(customer_id),
        total=order.pricing.total,
    )
    return order


def get_order(order_id: str) -> Order:
    return _orders().get_order(order_id)


def get_order_by_number(order_number: str) -> Order:
    return _orders().get_by_number(order_number)


def list_orders_for_customer(customer_id: str) -> list[Order]:
    return _orders().for_customer(customer_id)


def list_orders_by_status(status) -> list[Order]:
    return _orders().with_status(status)


def count_orders_by_status(customer_id: str | None = None) -> dict[str, int]:
    return _orders().status_counts(customer_id)


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------
def _transition(order: Order, target, message, actor, now) -> Order:
    previous = order.current_status
    log = logger.bind(order_id=str(order.id), previous_status=previous.value, actor=TransitionActor(actor).value)

    try:
        change = plan_transition(previous, target, message=message, actor=actor, now=now)
    except OrderRejection as exc:
        log.info("Order transition rejected", target=str(getattr(target, "value", target)), code=exc.code)
        raise

    try:
        updated = _orders().apply_transition(order.id, previous, change)
    except TransitionConflict as exc:
        log.warning("Order transition conflict", target=change.status.value, **exc.context)
        raise

    entry = updated.latest_entry()
    log.info("Order status changed", new_status=entry.status, sequence=entry.sequence)
    notify_status_change(updated, previous.value, entry)
    return updated


def request_transition(
    order_id: str,
    target,
    message: str | None = None,
    actor: TransitionActor = TransitionActor.OPERATOR,
    now: datetime | None = None,
) -> Order:
    """Move an order to ``target``.

    Raises:
        OrderNotFound, InvalidTransition, NoOp: the request was rejected.
        TransitionConflict: another writer changed the order first.
    """
    return _transition(get_order(order_id), target, message, actor, now)


def request_cancellation(order_id: str, reason: str | None = None, now: datetime | None = None) -> Order:
    """Cancel an order on the customer's behalf."""
    message = f"Order cancelled: {reason}" if reason else None
    return request_transition(
        order_id,
        OrderStatus.CANCELLED,
        message=message,
        actor=TransitionActor.CUSTOMER,
        now=now,
    )


def advance_order(order_id: str, message: str | None = None, now: datetime | None = None) -> Order:
    """Move an order to the next status of the fulfillment chain."""
    order = get_order(order_id)
    target = next_status(order.status)
    if target is None:
        logger.info("Order transition rejected", order_id=str(order_id), previous_status=order.status)
        raise InvalidTransition(
            f"Order in {order.status} has no next status",
            order_id=str(order_id),
            current=order.status,
        )
    return _transition(order, target, message, TransitionActor.FULFILLMENT, now)
