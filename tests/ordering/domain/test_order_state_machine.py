"""Tests for the order state machine — pure transition decisions."""

from datetime import UTC, datetime

import pytest
from ordering.order.errors import CancellationNotAllowed, InvalidTransition, NoOp
from ordering.order.state_machine import (
    VALID_TRANSITIONS,
    StatusChange,
    is_valid_transition,
    next_status,
    plan_transition,
)
from ordering.order.status import FULFILLMENT_CHAIN, OrderStatus, TransitionActor

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


class TestNextStatus:
    def test_chain_successors(self):
        assert next_status(OrderStatus.PENDING) == OrderStatus.CONFIRMED
        assert next_status(OrderStatus.CONFIRMED) == OrderStatus.PREPARING
        assert next_status(OrderStatus.PREPARING) == OrderStatus.SHIPPING
        assert next_status(OrderStatus.SHIPPING) == OrderStatus.DELIVERED

    def test_terminal_statuses_have_no_successor(self):
        assert next_status(OrderStatus.DELIVERED) is None
        assert next_status(OrderStatus.CANCELLED) is None

    def test_accepts_stored_strings(self):
        assert next_status("preparing") == OrderStatus.SHIPPING


class TestTransitionMap:
    def test_forward_chain_and_cancellation(self):
        assert VALID_TRANSITIONS[OrderStatus.PENDING] == {OrderStatus.CONFIRMED, OrderStatus.CANCELLED}
        assert VALID_TRANSITIONS[OrderStatus.CONFIRMED] == {OrderStatus.PREPARING, OrderStatus.CANCELLED}
        assert VALID_TRANSITIONS[OrderStatus.PREPARING] == {OrderStatus.SHIPPING}
        assert VALID_TRANSITIONS[OrderStatus.SHIPPING] == {OrderStatus.DELIVERED}

    def test_terminal_statuses_allow_nothing(self):
        assert VALID_TRANSITIONS[OrderStatus.DELIVERED] == frozenset()
        assert VALID_TRANSITIONS[OrderStatus.CANCELLED] == frozenset()

    def test_is_valid_transition(self):
        assert is_valid_transition("pending", "confirmed")
        assert not is_valid_transition("pending", "preparing")


class TestPlanTransition:
    @pytest.mark.parametrize("position", range(len(FULFILLMENT_CHAIN) - 1))
    def test_each_forward_step_is_accepted(self, position):
        current = FULFILLMENT_CHAIN[position]
        target = FULFILLMENT_CHAIN[position + 1]

        change = plan_transition(current, target, now=NOW)

        assert isinstance(change, StatusChange)
        assert change.previous_status == current
        assert change.status == target
        assert change.occurred_at == NOW

    def test_default_message_for_target(self):
        change = plan_transition("confirmed", "preparing", now=NOW)
        assert change.message == "Order is being prepared"

    def test_explicit_message_and_actor(self):
        change = plan_transition(
            "shipping",
            "delivered",
            message="Left with the doorman",
            actor=TransitionActor.FULFILLMENT,
            now=NOW,
        )
        assert change.message == "Left with the doorman"
        assert change.actor == TransitionActor.FULFILLMENT

    def test_defaults_to_operator_and_current_time(self):
        change = plan_transition("pending", "confirmed")
        assert change.actor == TransitionActor.OPERATOR
        assert change.occurred_at.tzinfo is not None

    def test_skipping_a_status_is_rejected(self):
        with pytest.raises(InvalidTransition):
            plan_transition("pending", "shipping")

    def test_moving_backwards_is_rejected(self):
        with pytest.raises(InvalidTransition):
            plan_transition("shipping", "preparing")

    def test_same_status_is_a_no_op(self):
        with pytest.raises(NoOp) as exc_info:
            plan_transition("confirmed", "confirmed")
        assert exc_info.value.code == "NoOp"

    def test_same_terminal_status_is_a_no_op(self):
        with pytest.raises(NoOp):
            plan_transition("delivered", "delivered")

    @pytest.mark.parametrize("terminal", ["delivered", "cancelled"])
    @pytest.mark.parametrize("target", ["pending", "confirmed", "preparing", "shipping"])
    def test_no_way_out_of_terminal_statuses(self, terminal, target):
        with pytest.raises(InvalidTransition):
            plan_transition(terminal, target)

    @pytest.mark.parametrize("current", ["pending", "confirmed"])
    def test_cancellation_allowed_before_preparation(self, current):
        change = plan_transition(current, "cancelled", now=NOW)
        assert change.status == OrderStatus.CANCELLED
        assert change.message == "Order cancelled"

    @pytest.mark.parametrize("current", ["preparing", "shipping"])
    def test_cancellation_rejected_once_preparing(self, current):
        with pytest.raises(CancellationNotAllowed) as exc_info:
            plan_transition(current, "cancelled")
        assert exc_info.value.code == "InvalidTransition"
        assert exc_info.value.message == "this order can no longer be cancelled"

    def test_cancelling_a_delivered_order_is_invalid(self):
        with pytest.raises(InvalidTransition):
            plan_transition("delivered", "cancelled")

    def test_unknown_status_is_invalid(self):
        with pytest.raises(InvalidTransition):
            plan_transition("pending", "returned")
