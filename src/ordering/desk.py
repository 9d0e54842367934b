"""Order desk — the inbound surface used by the storefront and back office.

Every method returns an ``Outcome``. Business rejections such as an invalid
transition or an expired return window come back as values that the caller
inspects; they are never raised from here. Infrastructure faults
(``StoreUnavailable``) are not business outcomes and still propagate.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from ordering.order import lifecycle
from ordering.order.errors import OrderRejection
from ordering.order.status import TransitionActor
from ordering.returns import workflow


@dataclass(frozen=True)
class Outcome:
    ok: bool
    value: Any = None
    rejection: OrderRejection | None = None

    @classmethod
    def success(cls, value) -> "Outcome":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, rejection: OrderRejection) -> "Outcome":
        return cls(ok=False, rejection=rejection)

    @property
    def code(self) -> str | None:
        return self.rejection.code if self.rejection is not None else None


def _attempt(operation, *args, **kwargs) -> Outcome:
    try:
        return Outcome.success(operation(*args, **kwargs))
    except OrderRejection as exc:
        return Outcome.failure(exc)


class OrderDesk:
    def create_order(
        self,
        customer_id: str,
        items: list[dict],
        pricing: dict,
        shipping_address: dict,
        payment_method: str,
        now: datetime | None = None,
    ) -> Outcome:
        return _attempt(
            lifecycle.place_order,
            customer_id=customer_id,
            items=items,
            pricing=pricing,
            shipping_address=shipping_address,
            payment_method=payment_method,
            now=now,
        )

    def request_transition(
        self,
        order_id: str,
        target,
        message: str | None = None,
        actor: TransitionActor = TransitionActor.OPERATOR,
        now: datetime | None = None,
    ) -> Outcome:
        return _attempt(lifecycle.request_transition, order_id, target, message=message, actor=actor, now=now)

    def request_cancellation(self, order_id: str, reason: str | None = None, now: datetime | None = None) -> Outcome:
        return _attempt(lifecycle.request_cancellation, order_id, reason=reason, now=now)

    def open_return_request(
        self,
        order_id: str,
        item_ids: list[str],
        kind: str,
        reason: str,
        description: str,
        attachments=(),
        now: datetime | None = None,
    ) -> Outcome:
        return _attempt(
            workflow.open_return_request,
            order_id,
            item_ids=item_ids,
            kind=kind,
            reason=reason,
            description=description,
            attachments=attachments,
            now=now,
        )

    def get_order(self, order_id: str) -> Outcome:
        return _attempt(lifecycle.get_order, order_id)

    def list_orders_for_customer(self, customer_id: str) -> Outcome:
        return _attempt(lifecycle.list_orders_for_customer, customer_id)

    def list_return_requests(self, order_id: str) -> Outcome:
        return _attempt(workflow.list_return_requests, order_id)

    def resolve_return_request(
        self,
        request_id: str,
        status: str,
        note: str | None = None,
        now: datetime | None = None,
    ) -> Outcome:
        return _attempt(workflow.resolve_return_request, request_id, status, note=note, now=now)
