"""Fake notifier — records notifications in memory for tests and development."""

import threading
from uuid import uuid4

from ordering.notifications.port import NotifierPort, OrderNotification


class FakeNotifier(NotifierPort):
    """Notifier that keeps every notification it is handed."""

    def __init__(self):
        self.sent: list[OrderNotification] = []
        self.should_succeed = True
        self.failure_reason = "Notification delivery failed"
        self._lock = threading.Lock()

    def configure(self, should_succeed: bool = True, failure_reason: str = "Notification delivery failed"):
        """Configure the fake notifier behavior for testing."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def send(self, notification: OrderNotification) -> dict:
        if not self.should_succeed:
            raise ConnectionError(self.failure_reason)

        with self._lock:
            self.sent.append(notification)
        return {"notification_id": f"ntf-{uuid4().hex[:12]}", "status": "sent"}

    def for_order(self, order_id: str) -> list[OrderNotification]:
        return [n for n in self.sent if n.order_id == str(order_id)]

    def reset(self):
        """Clear recorded notifications (useful between tests)."""
        with self._lock:
            self.sent.clear()
        self.should_succeed = True
        self.failure_reason = "Notification delivery failed"
