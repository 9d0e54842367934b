"""Tests for the cancellation policy predicate."""

import pytest
from ordering.order.cancellation import CANCELLABLE_STATUSES, can_cancel
from ordering.order.status import OrderStatus


class TestCanCancel:
    @pytest.mark.parametrize("status", [OrderStatus.PENDING, OrderStatus.CONFIRMED])
    def test_cancellable_statuses(self, status):
        assert can_cancel(status) is True
        assert can_cancel(status.value) is True

    @pytest.mark.parametrize(
        "status",
        [OrderStatus.PREPARING, OrderStatus.SHIPPING, OrderStatus.DELIVERED, OrderStatus.CANCELLED],
    )
    def test_other_statuses_are_not_cancellable(self, status):
        assert can_cancel(status) is False

    def test_unknown_status_is_not_cancellable(self):
        assert can_cancel("on_hold") is False

    def test_cancellable_set(self):
        assert CANCELLABLE_STATUSES == {OrderStatus.PENDING, OrderStatus.CONFIRMED}
