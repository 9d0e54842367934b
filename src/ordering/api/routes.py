"""FastAPI routes for the Ordering domain — orders, their statuses and returns.

Routes go through ``OrderDesk`` and turn rejected outcomes into JSON error
bodies carrying the stable rejection code and message.
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from ordering.api.schemas import (
    AddressSchema,
    CancelOrderRequest,
    CreateOrderRequest,
    OpenReturnRequest,
    OrderItemResponse,
    OrderListResponse,
    OrderResponse,
    PricingSchema,
    ResolveReturnRequest,
    ReturnRequestResponse,
    TrackingEntryResponse,
    TransitionRequest,
)
from ordering.desk import OrderDesk, Outcome
from ordering.order import lifecycle

desk = OrderDesk()

_STATUS_CODES = {
    "NotFound": 404,
    "ConflictError": 409,
    "NoOp": 409,
}


def rejection_response(outcome: Outcome) -> JSONResponse:
    rejection = outcome.rejection
    return JSONResponse(
        status_code=_STATUS_CODES.get(rejection.code, 422),
        content=rejection.to_dict(),
    )


def order_response(order) -> OrderResponse:
    return OrderResponse(
        id=str(order.id),
        order_number=order.order_number,
        customer_id=str(order.customer_id),
        status=order.status,
        items=[
            OrderItemResponse(
                id=str(item.id),
                line_number=item.line_number,
                product_id=str(item.product_id),
                name=item.name,
                quantity=item.quantity,
                unit_price=item.unit_price,
                image=item.image,
                color=item.color,
                line_total=item.line_total,
            )
            for item in order.line_items()
        ],
        pricing=PricingSchema(**order.pricing.to_dict()),
        shipping_address=AddressSchema(**order.shipping_address.to_dict()),
        payment_method=order.payment_method,
        tracking=[
            TrackingEntryResponse(
                sequence=entry.sequence,
                status=entry.status,
                message=entry.message,
                actor=entry.actor,
                occurred_at=entry.occurred_at,
            )
            for entry in order.timeline()
        ],
        created_at=order.created_at,
        updated_at=order.updated_at,
    )


def return_request_response(request) -> ReturnRequestResponse:
    return ReturnRequestResponse(
        id=str(request.id),
        order_id=str(request.order_id),
        kind=request.kind,
        reason=request.reason,
        description=request.description,
        item_ids=request.selected_item_ids(),
        attachments=request.attachment_refs(),
        status=request.status,
        submitted_at=request.submitted_at,
        resolved_at=request.resolved_at,
        resolution_note=request.resolution_note,
    )


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=OrderResponse)
async def create_order(body: CreateOrderRequest):
    outcome = desk.create_order(
        customer_id=body.customer_id,
        items=[item.model_dump() for item in body.items],
        pricing=body.pricing.model_dump(),
        shipping_address=body.shipping_address.model_dump(),
        payment_method=body.payment_method,
    )
    if not outcome.ok:
        return rejection_response(outcome)
    return order_response(outcome.value)


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str):
    outcome = desk.get_order(order_id)
    if not outcome.ok:
        return rejection_response(outcome)
    return order_response(outcome.value)


@order_router.put("/{order_id}/status", response_model=OrderResponse)
async def request_transition(order_id: str, body: TransitionRequest):
    outcome = desk.request_transition(order_id, body.status, message=body.message, actor=body.actor)
    if not outcome.ok:
        return rejection_response(outcome)
    return order_response(outcome.value)


@order_router.put("/{order_id}/cancel", response_model=OrderResponse)
async def cancel_order(order_id: str, body: CancelOrderRequest | None = None):
    outcome = desk.request_cancellation(order_id, reason=body.reason if body else None)
    if not outcome.ok:
        return rejection_response(outcome)
    return order_response(outcome.value)


@order_router.post("/{order_id}/returns", status_code=201, response_model=ReturnRequestResponse)
async def open_return_request(order_id: str, body: OpenReturnRequest):
    outcome = desk.open_return_request(
        order_id,
        item_ids=body.item_ids,
        kind=body.kind,
        reason=body.reason,
        description=body.description,
        attachments=body.attachments,
    )
    if not outcome.ok:
        return rejection_response(outcome)
    return return_request_response(outcome.value)


@order_router.get("/{order_id}/returns", response_model=list[ReturnRequestResponse])
async def list_return_requests(order_id: str):
    found = desk.get_order(order_id)
    if not found.ok:
        return rejection_response(found)
    outcome = desk.list_return_requests(order_id)
    return [return_request_response(request) for request in outcome.value]


# ---------------------------------------------------------------------------
# Customer Router
# ---------------------------------------------------------------------------
customer_router = APIRouter(prefix="/customers", tags=["orders"])


@customer_router.get("/{customer_id}/orders", response_model=OrderListResponse)
async def list_customer_orders(customer_id: str):
    outcome = desk.list_orders_for_customer(customer_id)
    return OrderListResponse(
        orders=[order_response(order) for order in outcome.value],
        counts=lifecycle.count_orders_by_status(customer_id),
    )


# ---------------------------------------------------------------------------
# Returns Router
# ---------------------------------------------------------------------------
returns_router = APIRouter(prefix="/returns", tags=["returns"])


@returns_router.put("/{request_id}/resolution", response_model=ReturnRequestResponse)
async def resolve_return_request(request_id: str, body: ResolveReturnRequest):
    outcome = desk.resolve_return_request(request_id, body.status, note=body.note)
    if not outcome.ok:
        return rejection_response(outcome)
    return return_request_response(outcome.value)
