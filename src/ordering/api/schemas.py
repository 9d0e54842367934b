"""Pydantic request/response schemas for the Ordering API.

These are external contracts (anti-corruption layer) — separate from the
Protean aggregates they are read from and written to.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class AddressSchema(BaseModel):
    full_name: str
    phone: str
    street: str
    building: str
    floor: str | None = None
    apartment: str | None = None
    area: str
    city: str
    landmarks: str | None = None


class OrderItemSchema(BaseModel):
    product_id: str
    name: str
    quantity: int = Field(ge=1)
    unit_price: float = Field(ge=0)
    image: str | None = None
    color: str | None = None


class PricingSchema(BaseModel):
    subtotal: float
    shipping_fee: float = 0.0
    tax: float = 0.0
    total: float
    currency: str = "EGP"


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class CreateOrderRequest(BaseModel):
    customer_id: str
    items: list[OrderItemSchema]
    pricing: PricingSchema
    shipping_address: AddressSchema
    payment_method: str = "cash_on_delivery"

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "customer_id": "cust-001",
                    "items": [
                        {
                            "product_id": "prod-001",
                            "name": "Cotton Abaya",
                            "quantity": 2,
                            "unit_price": 500.0,
                            "color": "black",
                        }
                    ],
                    "pricing": {
                        "subtotal": 1000.0,
                        "shipping_fee": 100.0,
                        "tax": 140.0,
                        "total": 1240.0,
                    },
                    "shipping_address": {
                        "full_name": "Mona Adel",
                        "phone": "+201001234567",
                        "street": "El Tahrir St",
                        "building": "12",
                        "area": "Dokki",
                        "city": "Giza",
                    },
                    "payment_method": "cash_on_delivery",
                }
            ]
        }
    }


class TransitionRequest(BaseModel):
    status: str
    message: str | None = None
    actor: Literal["customer", "operator", "fulfillment", "system"] = "operator"


class CancelOrderRequest(BaseModel):
    reason: str | None = None


class OpenReturnRequest(BaseModel):
    item_ids: list[str]
    kind: str
    reason: str
    description: str
    attachments: list[str] = Field(default_factory=list)


class ResolveReturnRequest(BaseModel):
    status: str
    note: str | None = None


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class TrackingEntryResponse(BaseModel):
    sequence: int
    status: str
    message: str
    actor: str | None = None
    occurred_at: datetime


class OrderItemResponse(OrderItemSchema):
    id: str
    line_number: int
    line_total: float


class OrderResponse(BaseModel):
    id: str
    order_number: str
    customer_id: str
    status: str
    items: list[OrderItemResponse]
    pricing: PricingSchema
    shipping_address: AddressSchema
    payment_method: str
    tracking: list[TrackingEntryResponse]
    created_at: datetime
    updated_at: datetime | None = None


class OrderListResponse(BaseModel):
    orders: list[OrderResponse]
    counts: dict[str, int]


class ReturnRequestResponse(BaseModel):
    id: str
    order_id: str
    kind: str
    reason: str
    description: str
    item_ids: list[str]
    attachments: list[str]
    status: str
    submitted_at: datetime
    resolved_at: datetime | None = None
    resolution_note: str | None = None


class RejectionResponse(BaseModel):
    code: str
    message: str
    detail: str | None = None
