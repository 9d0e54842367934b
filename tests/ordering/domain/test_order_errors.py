"""Tests for the rejection taxonomy."""

from ordering.order.errors import (
    CancellationNotAllowed,
    InvalidOrder,
    InvalidTransition,
    NoOp,
    NotEligible,
    OrderNotFound,
    OrderRejection,
    StoreUnavailable,
    TooManyAttachments,
    TransitionConflict,
    WindowExpired,
)


class TestRejections:
    def test_codes(self):
        assert OrderNotFound.code == "NotFound"
        assert TransitionConflict.code == "ConflictError"
        assert CancellationNotAllowed.code == InvalidTransition.code == "InvalidTransition"
        assert {NoOp.code, NotEligible.code, WindowExpired.code, TooManyAttachments.code} == {
            "NoOp",
            "NotEligible",
            "WindowExpired",
            "TooManyAttachments",
        }

    def test_only_conflicts_are_retryable(self):
        assert TransitionConflict.retryable is True
        assert InvalidTransition.retryable is False

    def test_to_dict_carries_stable_message(self):
        rejection = WindowExpired("Delivered on 2026-03-01", order_id="ord-001")

        assert rejection.to_dict() == {
            "code": "WindowExpired",
            "message": "the return window for this order has closed",
            "detail": "Delivered on 2026-03-01",
        }
        assert rejection.context == {"order_id": "ord-001"}
        assert str(rejection) == "Delivered on 2026-03-01"

    def test_message_used_when_no_detail(self):
        assert str(NotEligible()) == "this order is not eligible for return or exchange"

    def test_invalid_order_summarizes_field_errors(self):
        rejection = InvalidOrder({"pricing.total": ["does not add up"], "items": ["required"]})

        assert rejection.detail == "items: required; pricing.total: does not add up"

    def test_store_unavailable_is_not_a_rejection(self):
        assert not issubclass(StoreUnavailable, OrderRejection)
        assert StoreUnavailable.retryable is True
