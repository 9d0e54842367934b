"""Order aggregate (CQRS) — the core of the ordering domain.

An Order is placed once, in ``pending``, with a single tracking entry, and
from then on changes only through accepted status transitions. Every
transition appends a ``TrackingEntry``; entries are never edited or removed,
so the tracking log is the order's audit trail.

State Machine:
    PENDING → CONFIRMED → PREPARING → SHIPPING → DELIVERED
    {PENDING, CONFIRMED} → CANCELLED

Prices, address and items are snapshots taken at placement time and are
never recomputed.
"""

import math
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import (
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    ValueObject,
)
from protean.utils.reflection import declared_fields

from ordering.domain import ordering
from ordering.order.events import (
    OrderCancelled,
    OrderConfirmed,
    OrderDelivered,
    OrderPlaced,
    OrderPreparing,
    OrderShipped,
)
from ordering.order.state_machine import StatusChange, is_valid_transition
from ordering.order.status import (
    DEFAULT_TRACKING_MESSAGES,
    TERMINAL_STATUSES,
    OrderStatus,
    TransitionActor,
)

# Half a minor currency unit
MONEY_TOLERANCE = 0.005


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class PaymentMethod(Enum):
    CASH_ON_DELIVERY = "cash_on_delivery"
    CARD = "card"
    WALLET = "wallet"


_STATUS_EVENTS = {
    OrderStatus.CONFIRMED: OrderConfirmed,
    OrderStatus.PREPARING: OrderPreparing,
    OrderStatus.SHIPPING: OrderShipped,
    OrderStatus.DELIVERED: OrderDelivered,
    OrderStatus.CANCELLED: OrderCancelled,
}


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC so that timestamps always compare."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@ordering.value_object(part_of="Order")
class ShippingAddress:
    """Where the order is delivered, captured when the order is placed."""

    full_name = String(required=True, max_length=150)
    phone = String(required=True, max_length=30)
    street = String(required=True, max_length=255)
    building = String(required=True, max_length=50)
    floor = String(max_length=20)
    apartment = String(max_length=20)
    area = String(required=True, max_length=100)
    city = String(required=True, max_length=100)
    landmarks = String(max_length=255)


@ordering.value_object(part_of="Order")
class OrderPricing:
    """Frozen monetary summary of an order.

    ``total`` must equal ``subtotal + shipping_fee + tax``. The amounts are
    fixed at placement and are not recomputed if catalogue prices change.
    """

    subtotal = Float(required=True, min_value=0.0)
    shipping_fee = Float(default=0.0, min_value=0.0)
    tax = Float(default=0.0, min_value=0.0)
    total = Float(required=True, min_value=0.0)
    currency = String(max_length=3, default="EGP")

    @invariant.post
    def total_matches_components(self):
        amounts = {
            "subtotal": self.subtotal,
            "shipping_fee": self.shipping_fee,
            "tax": self.tax,
            "total": self.total,
        }
        not_finite = {
            name: ["Amount must be a finite number"]
            for name, value in amounts.items()
            if value is not None and not math.isfinite(value)
        }
        if not_finite:
            raise ValidationError(not_finite)

        total = self.total or 0.0
        expected = (self.subtotal or 0.0) + (self.shipping_fee or 0.0) + (self.tax or 0.0)
        if abs(total - expected) > MONEY_TOLERANCE + 1e-9:
            raise ValidationError(
                {"total": [f"Total {total:.2f} does not equal subtotal + shipping fee + tax ({expected:.2f})"]}
            )


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ordering.entity(part_of="Order")
class OrderItem:
    """A line item: a product snapshot with the quantity and unit price at order time."""

    line_number = Integer(required=True, min_value=1)
    product_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)
    image = String(max_length=500)
    color = String(max_length=50)

    @property
    def line_total(self) -> float:
        return self.unit_price * self.quantity


@ordering.entity(part_of="Order")
class TrackingEntry:
    """One entry of the append-only tracking log."""

    sequence = Integer(required=True, min_value=1)
    status = String(required=True, max_length=20, choices=OrderStatus)
    message = String(required=True, max_length=500)
    actor = String(max_length=20, choices=TransitionActor, default=TransitionActor.SYSTEM.value)
    occurred_at = DateTime(required=True)


# ---------------------------------------------------------------------------
# Aggregate Root (CQRS)
# ---------------------------------------------------------------------------
@ordering.aggregate
class Order:
    order_number = String(required=True, max_length=30, unique=True)
    customer_id = Identifier(required=True)
    status = String(
        max_length=20,
        choices=OrderStatus,
        default=OrderStatus.PENDING.value,
    )
    items = HasMany(OrderItem)
    pricing = ValueObject(OrderPricing)
    shipping_address = ValueObject(ShippingAddress)
    payment_method = String(required=True, max_length=30, choices=PaymentMethod)
    tracking = HasMany(TrackingEntry)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        order_number: str,
        customer_id: str,
        items_data: list[dict],
        pricing: dict,
        shipping_address: dict,
        payment_method: str,
        now: datetime | None = None,
    ):
        """Place a new order in ``pending`` with its first tracking entry.

        Args:
            order_number: Human-facing number, already checked for uniqueness.
            customer_id: The customer placing the order.
            items_data: List of dicts with product_id, name, quantity,
                        unit_price and optional image, color.
            pricing: Dict with subtotal, shipping_fee, tax, total and
                     optional currency.
            shipping_address: Dict with the ShippingAddress fields.
            payment_method: One of the PaymentMethod values.

        Raises:
            ValidationError: with per-field messages for every part of the
                order that failed validation.
        """
        now = as_utc(now or datetime.now(UTC))
        errors: dict[str, list[str]] = {}

        if not items_data:
            errors["items"] = ["Order must contain at least one item"]

        order_items = []
        for position, item_data in enumerate(items_data or [], start=1):
            try:
                order_items.append(
                    OrderItem(
                        line_number=position,
                        product_id=item_data.get("product_id"),
                        name=item_data.get("name"),
                        quantity=item_data.get("quantity"),
                        unit_price=item_data.get("unit_price"),
                        image=item_data.get("image"),
                        color=item_data.get("color"),
                    )
                )
            except ValidationError as exc:
                _collect(errors, f"items.{position}", exc.messages)

        order_pricing = None
        try:
            order_pricing = OrderPricing(**_known(pricing, OrderPricing))
        except ValidationError as exc:
            _collect(errors, "pricing", exc.messages)

        address = None
        try:
            address = ShippingAddress(**_known(shipping_address, ShippingAddress))
        except ValidationError as exc:
            _collect(errors, "shipping_address", exc.messages)

        try:
            PaymentMethod(payment_method)
        except ValueError:
            errors["payment_method"] = [f"Unknown payment method {payment_method!r}"]

        if not customer_id:
            errors["customer_id"] = ["is required"]

        if errors:
            raise ValidationError(errors)

        order = cls(
            order_number=order_number,
            customer_id=customer_id,
            status=OrderStatus.PENDING.value,
            pricing=order_pricing,
            shipping_address=address,
            payment_method=payment_method,
            created_at=now,
            updated_at=now,
        )
        for item in order_items:
            order.add_items(item)
        order.add_tracking(
            TrackingEntry(
                sequence=1,
                status=OrderStatus.PENDING.value,
                message=DEFAULT_TRACKING_MESSAGES[OrderStatus.PENDING],
                actor=TransitionActor.CUSTOMER.value,
                occurred_at=now,
            )
        )
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                order_number=order_number,
                customer_id=str(customer_id),
                item_count=len(order_items),
                total=order_pricing.total,
                currency=order_pricing.currency,
                payment_method=payment_method,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def current_status(self) -> OrderStatus:
        return OrderStatus(self.status)

    @property
    def is_terminal(self) -> bool:
        return self.current_status in TERMINAL_STATUSES

    def timeline(self) -> list:
        """Tracking entries in the order they were appended."""
        return sorted(self.tracking or [], key=lambda entry: entry.sequence)

    def latest_entry(self):
        entries = self.timeline()
        return entries[-1] if entries else None

    def line_items(self) -> list:
        return sorted(self.items or [], key=lambda item: item.line_number)

    def item_ids(self) -> set[str]:
        return {str(item.id) for item in self.items or []}

    @property
    def delivered_at(self) -> datetime | None:
        """Timestamp of the ``delivered`` tracking entry, if the order was delivered."""
        for entry in self.timeline():
            if entry.status == OrderStatus.DELIVERED.value:
                return as_utc(entry.occurred_at)
        return None

    # -------------------------------------------------------------------
    # Status transitions
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status: OrderStatus) -> None:
        current = self.current_status
        if not is_valid_transition(current, target_status):
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target_status.value}"]})

    def record_status_change(self, change: StatusChange) -> TrackingEntry:
        """Append an accepted transition to the tracking log and move the status.

        A change stamped earlier than the last entry is recorded at the last
        entry's timestamp, keeping the log non-decreasing.
        """
        self._assert_can_transition(change.status)

        previous = self.current_status
        last = self.latest_entry()
        occurred_at = as_utc(change.occurred_at)
        if last is not None and occurred_at < as_utc(last.occurred_at):
            occurred_at = as_utc(last.occurred_at)

        entry = TrackingEntry(
            sequence=(last.sequence + 1) if last is not None else 1,
            status=change.status.value,
            message=change.message,
            actor=TransitionActor(change.actor).value,
            occurred_at=occurred_at,
        )
        self.add_tracking(entry)
        self.status = change.status.value
        self.updated_at = occurred_at

        event_cls = _STATUS_EVENTS[change.status]
        self.raise_(
            event_cls(
                order_id=str(self.id),
                order_number=self.order_number,
                customer_id=str(self.customer_id),
                previous_status=previous.value,
                message=entry.message,
                actor=entry.actor,
                sequence=entry.sequence,
                occurred_at=occurred_at,
            )
        )
        return entry


def _known(data, record_cls) -> dict:
    """Keep only the keys that ``record_cls`` declares."""
    if not data:
        return {}
    if isinstance(data, record_cls):
        return data.to_dict()
    allowed = set(declared_fields(record_cls))
    return {key: value for key, value in dict(data).items() if key in allowed}


def _collect(errors: dict, prefix: str, messages: dict) -> None:
    for field, field_messages in messages.items():
        errors.setdefault(f"{prefix}.{field}", []).extend(field_messages)
