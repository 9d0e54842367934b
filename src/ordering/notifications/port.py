"""Notifier port — abstract interface for customer-facing order messaging."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class OrderNotification:
    """What the notification collaborator learns about an order.

    Status changes carry ``previous_status`` and ``new_status``; opened
    return requests carry ``request_kind`` and ``request_id`` instead.
    """

    order_id: str
    order_number: str
    customer_id: str
    occurred_at: datetime
    new_status: str | None = None
    previous_status: str | None = None
    request_kind: str | None = None
    request_id: str | None = None
    message: str = ""
    extra: dict = field(default_factory=dict)

    @property
    def topic(self) -> str:
        return "return_request" if self.request_kind else "status_change"


class NotifierPort(ABC):
    """Abstract interface for notifier adapters."""

    @abstractmethod
    def send(self, notification: OrderNotification) -> dict:
        """Hand a notification to the messaging system.

        Returns:
            dict with keys: notification_id, status ("sent" or "failed"), error (optional)
        """
        ...
