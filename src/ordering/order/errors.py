"""Rejections raised by the order lifecycle and returns workflow.

Every expected business outcome that is not a success is an
``OrderRejection``. Each subclass carries a stable ``code`` and a stable
user-facing ``message``; ``detail`` and ``context`` describe the specific
case. Infrastructure faults are ``StoreUnavailable`` and never share the
rejection hierarchy.
"""

from typing import Any


class OrderRejection(Exception):
    """Base class for expected business rejections."""

    code = "Rejected"
    message = "the request was rejected"
    retryable = False

    def __init__(self, detail: str | None = None, **context: Any) -> None:
        self.detail = detail
        self.context = context
        super().__init__(detail or self.message)

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "message": self.message,
            "detail": self.detail,
        }


class InvalidOrder(OrderRejection):
    """Order data violated a creation-time invariant."""

    code = "InvalidOrder"
    message = "the order details are invalid"

    def __init__(self, errors: dict[str, list[str]] | None = None, detail: str | None = None, **context: Any) -> None:
        self.errors = errors or {}
        if detail is None and self.errors:
            detail = "; ".join(f"{field}: {', '.join(msgs)}" for field, msgs in sorted(self.errors.items()))
        super().__init__(detail, **context)


class OrderNotFound(OrderRejection):
    code = "NotFound"
    message = "the order could not be found"


class ReturnRequestNotFound(OrderRejection):
    code = "NotFound"
    message = "the return request could not be found"


class InvalidTransition(OrderRejection):
    code = "InvalidTransition"
    message = "this order cannot move to the requested status"


class CancellationNotAllowed(InvalidTransition):
    """Cancellation requested after the order left the cancellable statuses."""

    message = "this order can no longer be cancelled"


class NoOp(OrderRejection):
    code = "NoOp"
    message = "the order is already in the requested status"


class TransitionConflict(OrderRejection):
    """Another writer changed the order between read and write.

    Callers retry by re-reading the order and re-validating the transition.
    """

    code = "ConflictError"
    message = "the order was updated by someone else, refresh and try again"
    retryable = True


class NotEligible(OrderRejection):
    code = "NotEligible"
    message = "this order is not eligible for return or exchange"


class WindowExpired(OrderRejection):
    code = "WindowExpired"
    message = "the return window for this order has closed"


class InvalidSelection(OrderRejection):
    code = "InvalidSelection"
    message = "the return request selection is invalid"


class TooManyAttachments(OrderRejection):
    code = "TooManyAttachments"
    message = "too many images were attached to the return request"


class StoreUnavailable(RuntimeError):
    """The order store could not complete a write in time.

    Nothing was written; the operation is safe to retry.
    """

    retryable = True
