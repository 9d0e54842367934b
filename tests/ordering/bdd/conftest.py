"""Shared BDD fixtures and step definitions for the Ordering domain."""

import pytest
from ordering.desk import OrderDesk
from ordering.order import lifecycle
from ordering.order.status import FULFILLMENT_CHAIN
from pytest_bdd import given, parsers, then, when

_CHAIN = [status.value for status in FULFILLMENT_CHAIN]


@pytest.fixture()
def desk():
    return OrderDesk()


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("a placed order", target_fixture="order")
def _(placed_order):
    return placed_order()


@given(parsers.cfparse('the order has reached "{status}"'), target_fixture="order")
def _(order, drive_order, status):
    if status == "cancelled":
        return lifecycle.request_cancellation(order.id)
    path = _CHAIN[1 : _CHAIN.index(status) + 1]
    return drive_order(order.id, *path) if path else order


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse('transition to "{status}" is requested'), target_fixture="outcome")
def _(desk, order, status):
    return desk.request_transition(order.id, status)


@when("cancellation is requested", target_fixture="outcome")
def _(desk, order):
    return desk.request_cancellation(order.id)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then("the request succeeds")
def _(outcome):
    assert outcome.ok, outcome.rejection


@then(parsers.cfparse('the request is rejected with "{code}"'))
def _(outcome, code):
    assert not outcome.ok
    assert outcome.code == code


@then(parsers.cfparse('the order status is "{status}"'))
def _(order, status):
    assert lifecycle.get_order(order.id).status == status


@then(parsers.cfparse("the order has {count:d} tracking entries"))
def _(order, count):
    stored = lifecycle.get_order(order.id)
    assert len(stored.tracking) == count
    assert stored.latest_entry().status == stored.status
