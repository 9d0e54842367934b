from datetime import UTC, datetime, timedelta

import pytest
from protean import current_domain
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def ordering_bed():
    from ordering.domain import ordering

    bed = DomainFixture(ordering)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(ordering_bed):
    from ordering.notifications import reset_notifier

    reset_notifier()
    with ordering_bed.domain_context():
        yield

        # Clear all databases
        for _, provider in current_domain.providers.items():
            provider._data_reset()

        # Drain event stores
        current_domain.event_store.store._data_reset()
    reset_notifier()


# ---------------------------------------------------------------------------
# Order data
# ---------------------------------------------------------------------------
T0 = datetime(2026, 3, 1, 9, 0, tzinfo=UTC)


def order_payload(**overrides) -> dict:
    """Keyword arguments for ``place_order``: two items, 1000 + 100 + 140 = 1240."""
    payload = {
        "customer_id": "cust-001",
        "items": [
            {"product_id": "prod-001", "name": "Linen Shirt", "quantity": 2, "unit_price": 300.0, "color": "white"},
            {"product_id": "prod-002", "name": "Wool Scarf", "quantity": 1, "unit_price": 400.0},
        ],
        "pricing": {"subtotal": 1000.0, "shipping_fee": 100.0, "tax": 140.0, "total": 1240.0},
        "shipping_address": {
            "full_name": "Mona Adel",
            "phone": "+201001234567",
            "street": "El Tahrir St",
            "building": "12",
            "floor": "3",
            "area": "Dokki",
            "city": "Giza",
        },
        "payment_method": "cash_on_delivery",
    }
    payload.update(overrides)
    return payload


@pytest.fixture()
def t0():
    return T0


@pytest.fixture()
def placed_order():
    """Place an order through the lifecycle service; keyword overrides replace payload fields."""
    from ordering.order.lifecycle import place_order

    def _place(**overrides):
        overrides.setdefault("now", T0)
        return place_order(**order_payload(**overrides))

    return _place


@pytest.fixture()
def drive_order():
    """Walk an order forward through ``statuses``, one hour apart after ``start``."""
    from ordering.order.lifecycle import request_transition

    def _drive(order_id, *statuses, start=T0, step=timedelta(hours=1)):
        order = None
        for position, status in enumerate(statuses, start=1):
            order = request_transition(order_id, status, now=start + step * position)
        return order

    return _drive


@pytest.fixture()
def notifier():
    from ordering.notifications import get_notifier

    return get_notifier()
