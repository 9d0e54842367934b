"""Storage for return requests."""

from protean.exceptions import ObjectNotFoundError

from ordering.domain import ordering
from ordering.order.errors import ReturnRequestNotFound
from ordering.returns.return_request import ReturnRequest, ReturnStatus


@ordering.repository(part_of=ReturnRequest)
class ReturnRequestRepository:
    def get_request(self, request_id: str) -> ReturnRequest:
        try:
            return self.get(str(request_id))
        except ObjectNotFoundError as exc:
            raise ReturnRequestNotFound(f"No return request with id {request_id}", request_id=str(request_id)) from exc

    def for_order(self, order_id: str) -> list[ReturnRequest]:
        """Requests opened against ``order_id``, oldest first."""
        return (
            self._dao.query.filter(order_id=str(order_id))
            .order_by("submitted_at")
            .limit(None)
            .all()
            .items
        )

    def open_for_order(self, order_id: str) -> list[ReturnRequest]:
        return (
            self._dao.query.filter(order_id=str(order_id), status=ReturnStatus.SUBMITTED.value)
            .limit(None)
            .all()
            .items
        )

    def items_under_review(self, order_id: str) -> set[str]:
        """Line items already claimed by a submitted request for ``order_id``."""
        claimed = set()
        for request in self.open_for_order(order_id):
            claimed.update(request.selected_item_ids())
        return claimed
