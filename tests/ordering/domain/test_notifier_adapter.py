"""Tests for the notifier adapter abstraction."""

import threading
from datetime import UTC, datetime

import pytest
from ordering.notifications import get_notifier, reset_notifier, use_notifier
from ordering.notifications.fake_adapter import FakeNotifier
from ordering.notifications.log_adapter import LogNotifier
from ordering.notifications.port import OrderNotification

NOW = datetime(2026, 3, 1, 9, 0, tzinfo=UTC)


def _notification(**overrides):
    kwargs = {
        "order_id": "ord-001",
        "order_number": "ORD12345678001",
        "customer_id": "cust-001",
        "occurred_at": NOW,
        "previous_status": "pending",
        "new_status": "confirmed",
    }
    kwargs.update(overrides)
    return OrderNotification(**kwargs)


class TestFakeNotifier:
    def test_send_records_notification(self):
        notifier = FakeNotifier()
        result = notifier.send(_notification())

        assert result["status"] == "sent"
        assert result["notification_id"].startswith("ntf-")
        assert len(notifier.sent) == 1

    def test_failure_raises(self):
        notifier = FakeNotifier()
        notifier.configure(should_succeed=False, failure_reason="SMS gateway down")

        with pytest.raises(ConnectionError, match="SMS gateway down"):
            notifier.send(_notification())
        assert notifier.sent == []

    def test_for_order(self):
        notifier = FakeNotifier()
        notifier.send(_notification())
        notifier.send(_notification(order_id="ord-002"))

        assert len(notifier.for_order("ord-002")) == 1

    def test_reset(self):
        notifier = FakeNotifier()
        notifier.configure(should_succeed=False)
        notifier.reset()

        assert notifier.should_succeed is True
        assert notifier.sent == []

    def test_topic(self):
        assert _notification().topic == "status_change"
        assert _notification(new_status=None, request_kind="return", request_id="rr-1").topic == "return_request"


class TestRegistry:
    def test_default_is_fake_singleton(self):
        reset_notifier()
        assert isinstance(get_notifier(), FakeNotifier)
        assert get_notifier() is get_notifier()

    def test_unknown_adapter(self, monkeypatch):
        reset_notifier()
        monkeypatch.setenv("ORDER_NOTIFIER", "carrier-pigeon")

        with pytest.raises(ValueError):
            get_notifier()
        reset_notifier()

    def test_log_adapter(self, monkeypatch):
        reset_notifier()
        monkeypatch.setenv("ORDER_NOTIFIER", "log")

        notifier = get_notifier()
        assert isinstance(notifier, LogNotifier)
        assert notifier.send(_notification())["status"] == "sent"
        reset_notifier()

    def test_use_notifier_installs_instance(self):
        mine = FakeNotifier()
        use_notifier(mine)

        assert get_notifier() is mine
        reset_notifier()
        assert get_notifier() is not mine

    def test_concurrent_callers_share_one_instance(self):
        reset_notifier()
        barrier = threading.Barrier(8)
        seen = []

        def grab():
            barrier.wait()
            seen.append(get_notifier())

        threads = [threading.Thread(target=grab) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len({id(notifier) for notifier in seen}) == 1
