"""ReturnRequest aggregate (CQRS) — a return or exchange opened against a delivered order.

A request references a subset of the order's line items and is immutable
once submitted, apart from its resolution status. Resolution is decided
outside this system; the aggregate only records it.

Resolution:
    SUBMITTED → APPROVED | REJECTED
    APPROVED → REFUNDED (return) | EXCHANGED (exchange)
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, String, Text

from ordering.domain import ordering
from ordering.order.order import as_utc
from ordering.returns.events import ReturnRequestResolved, ReturnRequestSubmitted


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class ReturnKind(Enum):
    RETURN = "return"
    EXCHANGE = "exchange"


class ReturnReason(Enum):
    DEFECTIVE = "defective"
    WRONG_ITEM = "wrong_item"
    NOT_AS_DESCRIBED = "not_as_described"
    CHANGED_MIND = "changed_mind"
    SIZE_ISSUE = "size_issue"
    OTHER = "other"


class ReturnStatus(Enum):
    SUBMITTED = "submitted"
    APPROVED = "approved"
    REJECTED = "rejected"
    REFUNDED = "refunded"
    EXCHANGED = "exchanged"


_RESOLUTIONS = {
    ReturnStatus.SUBMITTED: {ReturnStatus.APPROVED, ReturnStatus.REJECTED},
    ReturnStatus.APPROVED: {ReturnStatus.REFUNDED, ReturnStatus.EXCHANGED},
    ReturnStatus.REJECTED: set(),  # final
    ReturnStatus.REFUNDED: set(),  # final
    ReturnStatus.EXCHANGED: set(),  # final
}

# Only one outcome of approval fits each kind
_APPROVED_OUTCOME = {
    ReturnKind.RETURN: ReturnStatus.REFUNDED,
    ReturnKind.EXCHANGE: ReturnStatus.EXCHANGED,
}


# ---------------------------------------------------------------------------
# Aggregate Root (CQRS)
# ---------------------------------------------------------------------------
@ordering.aggregate
class ReturnRequest:
    order_id = Identifier(required=True)
    customer_id = Identifier()
    kind = String(required=True, max_length=20, choices=ReturnKind)
    reason = String(required=True, max_length=30, choices=ReturnReason)
    description = Text(required=True)
    item_ids = Text(required=True)  # JSON list of OrderItem IDs
    attachments = Text()  # JSON list of image references
    status = String(
        max_length=20,
        choices=ReturnStatus,
        default=ReturnStatus.SUBMITTED.value,
    )
    submitted_at = DateTime()
    resolved_at = DateTime()
    resolution_note = String(max_length=1000)

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def submit(
        cls,
        order_id: str,
        customer_id: str,
        item_ids: list[str],
        kind: str,
        reason: str,
        description: str,
        attachments: list[str] | None = None,
        now: datetime | None = None,
    ):
        """Create a request in ``submitted``. Eligibility is checked by the caller."""
        now = as_utc(now or datetime.now(UTC))
        request = cls(
            order_id=order_id,
            customer_id=customer_id,
            kind=kind,
            reason=reason,
            description=description,
            item_ids=json.dumps(list(item_ids)),
            attachments=json.dumps(list(attachments or [])),
            status=ReturnStatus.SUBMITTED.value,
            submitted_at=now,
        )
        request.raise_(
            ReturnRequestSubmitted(
                return_request_id=str(request.id),
                order_id=str(order_id),
                customer_id=str(customer_id) if customer_id else None,
                kind=kind,
                reason=reason,
                item_ids=request.item_ids,
                attachment_count=len(attachments or []),
                submitted_at=now,
            )
        )
        return request

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def selected_item_ids(self) -> list[str]:
        return json.loads(self.item_ids) if self.item_ids else []

    def attachment_refs(self) -> list[str]:
        return json.loads(self.attachments) if self.attachments else []

    @property
    def is_open(self) -> bool:
        return self.status == ReturnStatus.SUBMITTED.value

    # -------------------------------------------------------------------
    # Resolution
    # -------------------------------------------------------------------
    def resolve(self, status: str, note: str | None = None, now: datetime | None = None) -> None:
        """Record a resolution decided outside this system."""
        current = ReturnStatus(self.status)
        try:
            target = ReturnStatus(status)
        except ValueError as exc:
            raise ValidationError({"status": [f"Unknown return request status {status!r}"]}) from exc

        if target not in _RESOLUTIONS[current]:
            raise ValidationError({"status": [f"Cannot resolve from {current.value} to {target.value}"]})
        if current == ReturnStatus.APPROVED and target != _APPROVED_OUTCOME[ReturnKind(self.kind)]:
            raise ValidationError({"status": [f"A {self.kind} request cannot end as {target.value}"]})

        now = as_utc(now or datetime.now(UTC))
        self.status = target.value
        self.resolved_at = now
        if note:
            self.resolution_note = note
        self.raise_(
            ReturnRequestResolved(
                return_request_id=str(self.id),
                order_id=str(self.order_id),
                previous_status=current.value,
                status=target.value,
                note=note,
                resolved_at=now,
            )
        )
