"""Notifier that writes order notifications to the structured log."""

from uuid import uuid4

import structlog

from ordering.notifications.port import NotifierPort, OrderNotification

logger = structlog.get_logger(__name__)


class LogNotifier(NotifierPort):
    def send(self, notification: OrderNotification) -> dict:
        notification_id = f"ntf-{uuid4().hex[:12]}"
        logger.info(
            "Order notification",
            notification_id=notification_id,
            topic=notification.topic,
            order_id=notification.order_id,
            order_number=notification.order_number,
            customer_id=notification.customer_id,
            previous_status=notification.previous_status,
            new_status=notification.new_status,
            request_kind=notification.request_kind,
            request_id=notification.request_id,
            occurred_at=notification.occurred_at.isoformat(),
        )
        return {"notification_id": notification_id, "status": "sent"}
