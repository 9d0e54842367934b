"""BDD tests for placing orders."""

import pytest
from pytest_bdd import given, parsers, scenarios, when

scenarios("features/order_placement.feature")


@pytest.fixture()
def order(outcome):
    return outcome.value


@given(
    parsers.cfparse("an order request with {count:d} items, subtotal {subtotal:g}, shipping {shipping:g} and tax {tax:g}"),
    target_fixture="order_request",
)
def _(count, subtotal, shipping, tax):
    unit_price = subtotal / count
    return {
        "customer_id": "cust-bdd-001",
        "items": [
            {"product_id": f"prod-{n:03d}", "name": f"Item {n}", "quantity": 1, "unit_price": unit_price}
            for n in range(1, count + 1)
        ],
        "pricing": {"subtotal": subtotal, "shipping_fee": shipping, "tax": tax},
        "shipping_address": {
            "full_name": "Youssef Kamal",
            "phone": "+201009998887",
            "street": "Port Said St",
            "building": "3",
            "area": "Sporting",
            "city": "Alexandria",
        },
        "payment_method": "cash_on_delivery",
    }


@when(parsers.cfparse("the order is placed with total {total:g}"), target_fixture="outcome")
def _(desk, order_request, total):
    request = dict(order_request)
    request["pricing"] = {**order_request["pricing"], "total": total}
    return desk.create_order(**request)
