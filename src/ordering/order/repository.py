"""Order store — storage and the atomic transition API for orders.

``OrderRepository`` is the single writer of Order records. Placement and
``apply_transition`` both run under the store write lock, so the re-read,
the comparison and the commit of the write cannot interleave with another
writer in this process.
"""

import secrets
import time
from datetime import datetime

import structlog
from protean.exceptions import ObjectNotFoundError, ValidationError

from ordering import config
from ordering.domain import ordering
from ordering.order.errors import (
    InvalidOrder,
    InvalidTransition,
    OrderNotFound,
    StoreUnavailable,
    TransitionConflict,
)
from ordering.order.order import Order
from ordering.order.state_machine import StatusChange
from ordering.order.status import OrderStatus, as_status
from ordering.utils.locking import store_write_lock

logger = structlog.get_logger(__name__)

_ORDER_NUMBER_ATTEMPTS = 10


def generate_order_number(prefix: str | None = None) -> str:
    """``<prefix><last 8 digits of epoch-ms><3 random digits>``, e.g. ``ORD48213377052``."""
    prefix = config.ORDER_NUMBER_PREFIX if prefix is None else prefix
    millis = str(int(time.time() * 1000))[-8:]
    return f"{prefix}{millis}{secrets.randbelow(1000):03d}"


@ordering.repository(part_of=Order)
class OrderRepository:
    # -------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------
    def get_order(self, order_id: str) -> Order:
        try:
            return self.get(str(order_id))
        except ObjectNotFoundError as exc:
            raise OrderNotFound(f"No order with id {order_id}", order_id=str(order_id)) from exc

    def find_by_number(self, order_number: str) -> Order | None:
        orders = self._dao.query.filter(order_number=order_number).all().items
        return orders[0] if orders else None

    def get_by_number(self, order_number: str) -> Order:
        order = self.find_by_number(order_number)
        if order is None:
            raise OrderNotFound(f"No order numbered {order_number}", order_number=order_number)
        return order

    def for_customer(self, customer_id: str) -> list[Order]:
        """Orders placed by ``customer_id``, most recent first."""
        return (
            self._dao.query.filter(customer_id=str(customer_id))
            .order_by("-created_at")
            .limit(None)
            .all()
            .items
        )

    def with_status(self, status) -> list[Order]:
        status = as_status(status)
        return self._dao.query.filter(status=status.value).order_by("-created_at").limit(None).all().items

    def status_counts(self, customer_id: str | None = None) -> dict[str, int]:
        counts = {}
        for status in OrderStatus:
            query = self._dao.query.filter(status=status.value)
            if customer_id is not None:
                query = query.filter(customer_id=str(customer_id))
            counts[status.value] = query.all().total
        return counts

    # -------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------
    def _unused_order_number(self) -> str:
        for _ in range(_ORDER_NUMBER_ATTEMPTS):
            candidate = generate_order_number()
            if self.find_by_number(candidate) is None:
                return candidate
            logger.info("Order number collision, retrying", order_number=candidate)
        raise StoreUnavailable("could not allocate a unique order number")

    def create_order(
        self,
        customer_id: str,
        items: list[dict],
        pricing: dict,
        shipping_address: dict,
        payment_method: str,
        now: datetime | None = None,
    ) -> Order:
        """Validate and persist a new order in ``pending``.

        Raises:
            InvalidOrder: with the per-field messages when any part of the
                order is invalid. Nothing is written.
        """
        with store_write_lock():
            order_number = self._unused_order_number()
            try:
                order = Order.place(
                    order_number=order_number,
                    customer_id=customer_id,
                    items_data=items,
                    pricing=pricing,
                    shipping_address=shipping_address,
                    payment_method=payment_method,
                    now=now,
                )
            except ValidationError as exc:
                raise InvalidOrder(exc.messages) from exc
            self.add(order)
        return order

    def apply_transition(self, order_id: str, expected_status, change: StatusChange) -> Order:
        """Append ``change`` to the order if its status is still ``expected_status``.

        The current status is re-read under the write lock. If another writer
        moved the order since the caller read it, nothing is written and
        ``TransitionConflict`` is raised; the caller re-reads and re-validates.
        """
        expected = as_status(expected_status)
        with store_write_lock():
            order = self.get_order(order_id)
            if order.current_status != expected:
                raise TransitionConflict(
                    f"Order moved from {expected.value} to {order.status} before this change was applied",
                    order_id=str(order_id),
                    expected=expected.value,
                    actual=order.status,
                )
            try:
                order.record_status_change(change)
            except ValidationError as exc:
                raise InvalidTransition(
                    "; ".join(msg for msgs in exc.messages.values() for msg in msgs),
                    order_id=str(order_id),
                    current=order.status,
                    target=change.status.value,
                ) from exc
            self.add(order)
        return order
