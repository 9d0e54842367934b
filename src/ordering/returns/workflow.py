"""Return/exchange workflow — opening and resolving return requests.

A request can be opened only against a delivered order, within the return
window counted from the ``delivered`` tracking entry. Preconditions are
checked in a fixed order and the first failure is the one reported:

1. the order exists and is delivered (``NotEligible``)
2. the return window is still open (``WindowExpired``)
3. the selected items belong to the order (``InvalidSelection``)
4. a description was given (``InvalidSelection``)
5. the attachment limit is respected (``TooManyAttachments``)

The order itself is never modified by a return request.
"""

from datetime import UTC, datetime, timedelta

import structlog
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from ordering import config
from ordering.notifications.dispatch import notify_return_request
from ordering.order.errors import (
    InvalidSelection,
    InvalidTransition,
    NotEligible,
    OrderNotFound,
    OrderRejection,
    TooManyAttachments,
    WindowExpired,
)
from ordering.order.order import Order, as_utc
from ordering.order.status import OrderStatus
from ordering.returns.return_request import ReturnKind, ReturnReason, ReturnRequest
from ordering.utils.locking import store_write_lock

logger = structlog.get_logger(__name__)


def return_window_remaining(order: Order, now: datetime | None = None) -> timedelta | None:
    """Time left to open a return for ``order``; ``None`` unless it was delivered."""
    if order.current_status != OrderStatus.DELIVERED or order.delivered_at is None:
        return None
    now = as_utc(now or datetime.now(UTC))
    remaining = config.RETURN_WINDOW - (now - order.delivered_at)
    return max(remaining, timedelta(0))


def _unique(values) -> list[str]:
    seen = []
    for value in values or []:
        value = str(value)
        if value not in seen:
            seen.append(value)
    return seen


def _check_eligibility(order_id, order, now, item_ids, description, attachments) -> list[str]:
    if order is None or order.current_status != OrderStatus.DELIVERED or order.delivered_at is None:
        raise NotEligible(
            "Only delivered orders can be returned or exchanged",
            order_id=str(order_id),
            status=order.status if order is not None else None,
        )

    if now - order.delivered_at > config.RETURN_WINDOW:
        raise WindowExpired(
            f"Delivered on {order.delivered_at.date().isoformat()}, "
            f"returns are accepted for {config.RETURN_WINDOW_DAYS} days",
            order_id=str(order_id),
        )

    selected = _unique(item_ids)
    if not selected:
        raise InvalidSelection("Select at least one item", order_id=str(order_id))
    unknown = [item_id for item_id in selected if item_id not in order.item_ids()]
    if unknown:
        raise InvalidSelection(
            f"Items not part of this order: {', '.join(unknown)}",
            order_id=str(order_id),
        )

    if not description or not description.strip():
        raise InvalidSelection("Describe the problem with the items", order_id=str(order_id))

    if len(attachments) > config.MAX_RETURN_ATTACHMENTS:
        raise TooManyAttachments(
            f"{len(attachments)} images attached, at most {config.MAX_RETURN_ATTACHMENTS} allowed",
            order_id=str(order_id),
        )

    return selected


def open_return_request(
    order_id: str,
    item_ids: list[str],
    kind: str,
    reason: str,
    description: str,
    attachments=(),
    now: datetime | None = None,
) -> ReturnRequest:
    """Open a return or exchange request for items of a delivered order.

    Raises:
        NotEligible, WindowExpired, InvalidSelection, TooManyAttachments
    """
    now = as_utc(now or datetime.now(UTC))
    attachments = list(attachments or [])
    orders = current_domain.repository_for(Order)
    requests = current_domain.repository_for(ReturnRequest)

    try:
        with store_write_lock():
            try:
                order = orders.get_order(order_id)
            except OrderNotFound:
                order = None

            selected = _check_eligibility(order_id, order, now, item_ids, description, attachments)

            try:
                ReturnKind(kind)
                ReturnReason(reason)
            except ValueError as exc:
                raise InvalidSelection(str(exc), order_id=str(order_id)) from exc

            overlap = sorted(set(selected) & requests.items_under_review(order.id))
            if overlap:
                raise InvalidSelection(
                    f"Items already under review in another request: {', '.join(overlap)}",
                    order_id=str(order_id),
                )

            try:
                request = ReturnRequest.submit(
                    order_id=str(order.id),
                    customer_id=str(order.customer_id),
                    item_ids=selected,
                    kind=kind,
                    reason=reason,
                    description=description.strip(),
                    attachments=attachments,
                    now=now,
                )
            except ValidationError as exc:
                raise InvalidSelection(str(exc.messages), order_id=str(order_id)) from exc
            requests.add(request)
    except OrderRejection as exc:
        logger.info("Return request rejected", order_id=str(order_id), code=exc.code, detail=exc.detail)
        raise

    logger.info(
        "Return request submitted",
        order_id=str(order.id),
        return_request_id=str(request.id),
        kind=kind,
        item_count=len(selected),
    )
    notify_return_request(order, request)
    return request


def resolve_return_request(
    request_id: str,
    status: str,
    note: str | None = None,
    now: datetime | None = None,
) -> ReturnRequest:
    """Record the resolution of a return request.

    Raises:
        ReturnRequestNotFound: no such request.
        InvalidTransition: the resolution does not follow from the current status.
    """
    requests = current_domain.repository_for(ReturnRequest)
    with store_write_lock():
        request = requests.get_request(request_id)
        previous = request.status
        try:
            request.resolve(status, note=note, now=now)
        except ValidationError as exc:
            logger.info("Return resolution rejected", return_request_id=str(request_id), status=str(status))
            raise InvalidTransition(
                "; ".join(msg for msgs in exc.messages.values() for msg in msgs),
                return_request_id=str(request_id),
            ) from exc
        requests.add(request)

    logger.info(
        "Return request resolved",
        return_request_id=str(request_id),
        previous_status=previous,
        status=request.status,
    )
    return request


def list_return_requests(order_id: str) -> list[ReturnRequest]:
    return current_domain.repository_for(ReturnRequest).for_order(order_id)
