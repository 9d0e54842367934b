"""Domain events for the Order aggregate.

Each accepted transition raises exactly one status event, carrying the
tracking entry it appended. Events are immutable facts, persisted with the
aggregate's unit of work.
"""

from protean.fields import DateTime, Float, Identifier, Integer, String

from ordering.domain import ordering


@ordering.event(part_of="Order")
class OrderPlaced:
    """A customer placed a new order; it starts out pending."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    customer_id = Identifier(required=True)
    item_count = Integer(required=True)
    total = Float(required=True)
    currency = String(default="EGP")
    payment_method = String(required=True)
    placed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderConfirmed:
    """The order was accepted by the store."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    customer_id = Identifier(required=True)
    previous_status = String(required=True)
    message = String(required=True)
    actor = String(required=True)
    sequence = Integer(required=True)
    occurred_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderPreparing:
    """The warehouse started preparing the order."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    customer_id = Identifier(required=True)
    previous_status = String(required=True)
    message = String(required=True)
    actor = String(required=True)
    sequence = Integer(required=True)
    occurred_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderShipped:
    """The order left the warehouse and is on its way."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    customer_id = Identifier(required=True)
    previous_status = String(required=True)
    message = String(required=True)
    actor = String(required=True)
    sequence = Integer(required=True)
    occurred_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderDelivered:
    """The order reached the customer; the return window opens."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    customer_id = Identifier(required=True)
    previous_status = String(required=True)
    message = String(required=True)
    actor = String(required=True)
    sequence = Integer(required=True)
    occurred_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderCancelled:
    """The order was cancelled before preparation began."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    customer_id = Identifier(required=True)
    previous_status = String(required=True)
    message = String(required=True)
    actor = String(required=True)
    sequence = Integer(required=True)
    occurred_at = DateTime(required=True)
