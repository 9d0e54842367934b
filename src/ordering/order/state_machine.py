"""Order state machine — pure transition decisions.

State Machine:
    PENDING → CONFIRMED → PREPARING → SHIPPING → DELIVERED
    {PENDING, CONFIRMED} → CANCELLED
    DELIVERED, CANCELLED are terminal.

``plan_transition`` looks only at the current status and the requested
target. It holds no state and touches no storage: the returned
``StatusChange`` is handed to the order store, which appends it
atomically.
"""

from dataclasses import dataclass
from datetime import UTC, datetime

from ordering.order.cancellation import can_cancel
from ordering.order.errors import CancellationNotAllowed, InvalidTransition, NoOp
from ordering.order.status import (
    DEFAULT_TRACKING_MESSAGES,
    FULFILLMENT_CHAIN,
    TERMINAL_STATUSES,
    OrderStatus,
    TransitionActor,
    as_status,
)


def next_status(current) -> OrderStatus | None:
    """Return the immediate successor of ``current`` in the fulfillment chain."""
    current = as_status(current)
    if current not in FULFILLMENT_CHAIN:
        return None
    position = FULFILLMENT_CHAIN.index(current)
    if position + 1 >= len(FULFILLMENT_CHAIN):
        return None
    return FULFILLMENT_CHAIN[position + 1]


def _build_transition_map() -> dict[OrderStatus, frozenset[OrderStatus]]:
    transitions = {}
    for status in OrderStatus:
        allowed = set()
        successor = next_status(status)
        if successor is not None:
            allowed.add(successor)
        if can_cancel(status):
            allowed.add(OrderStatus.CANCELLED)
        transitions[status] = frozenset(allowed)
    return transitions


VALID_TRANSITIONS = _build_transition_map()


def is_valid_transition(current, target) -> bool:
    return as_status(target) in VALID_TRANSITIONS[as_status(current)]


@dataclass(frozen=True)
class StatusChange:
    """An accepted transition, ready to be appended to an order's tracking."""

    previous_status: OrderStatus
    status: OrderStatus
    message: str
    actor: TransitionActor
    occurred_at: datetime


def plan_transition(
    current,
    target,
    message: str | None = None,
    actor: TransitionActor = TransitionActor.OPERATOR,
    now: datetime | None = None,
) -> StatusChange:
    """Decide whether an order in ``current`` may move to ``target``.

    Raises:
        NoOp: ``target`` is the current status.
        CancellationNotAllowed: cancellation requested outside the cancellable statuses.
        InvalidTransition: anything other than the immediate successor, or a
            move out of a terminal status. Unknown statuses are invalid too.
    """
    try:
        current = as_status(current)
        target = as_status(target)
    except ValueError as exc:
        raise InvalidTransition(str(exc), current=str(current), target=str(target)) from exc

    if target == current:
        raise NoOp(f"Order is already {current.value}", current=current.value)

    if current in TERMINAL_STATUSES:
        raise InvalidTransition(
            f"Cannot transition from terminal status {current.value} to {target.value}",
            current=current.value,
            target=target.value,
        )

    if target == OrderStatus.CANCELLED:
        if not can_cancel(current):
            raise CancellationNotAllowed(
                f"Cannot cancel an order that is {current.value}",
                current=current.value,
                target=target.value,
            )
    elif target != next_status(current):
        raise InvalidTransition(
            f"Cannot transition from {current.value} to {target.value}",
            current=current.value,
            target=target.value,
        )

    return StatusChange(
        previous_status=current,
        status=target,
        message=message or DEFAULT_TRACKING_MESSAGES[target],
        actor=TransitionActor(actor),
        occurred_at=now or datetime.now(UTC),
    )
