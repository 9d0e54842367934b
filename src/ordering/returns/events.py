"""Domain events for the ReturnRequest aggregate."""

from protean.fields import DateTime, Identifier, Integer, String, Text

from ordering.domain import ordering


@ordering.event(part_of="ReturnRequest")
class ReturnRequestSubmitted:
    """A customer asked to return or exchange items of a delivered order."""

    __version__ = 1

    return_request_id = Identifier(required=True)
    order_id = Identifier(required=True)
    customer_id = Identifier()
    kind = String(required=True)
    reason = String(required=True)
    item_ids = Text(required=True)  # JSON list of OrderItem IDs
    attachment_count = Integer(default=0)
    submitted_at = DateTime(required=True)


@ordering.event(part_of="ReturnRequest")
class ReturnRequestResolved:
    """The return request moved to a resolution status."""

    __version__ = 1

    return_request_id = Identifier(required=True)
    order_id = Identifier(required=True)
    previous_status = String(required=True)
    status = String(required=True)
    note = String()
    resolved_at = DateTime(required=True)
