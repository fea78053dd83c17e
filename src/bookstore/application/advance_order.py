"""Application service: Advance Order use case.

Moves an order along the status state machine for the transitions that
carry no stock effect and no extra data. Shipping has its own handler
(it needs tracking details) and so does cancellation (it restores stock).
Once an order moves past the point where it could be cancelled, the
books drop it from their restore ledger.
"""

from __future__ import annotations

import logging

from bookstore.application.dto import OrderDTO
from bookstore.application.mapping import order_to_dto
from bookstore.domain.exceptions import EntityNotFoundError, ValidationError
from bookstore.domain.model.order import Order, OrderStatus
from bookstore.domain.repository.book_repository import BookRepository
from bookstore.domain.repository.order_repository import OrderRepository
from bookstore.domain.service.stock_reservation_service import (
    StockReservationService,
)

logger = logging.getLogger(__name__)

_STEPS = {
    OrderStatus.CONFIRMED: Order.confirm,
    OrderStatus.PROCESSING: Order.start_processing,
    OrderStatus.DELIVERED: Order.mark_delivered,
    OrderStatus.REFUNDED: Order.refund,
}


class AdvanceOrderHandler:

    def __init__(self, order_repo: OrderRepository, book_repo: BookRepository) -> None:
        self._order_repo = order_repo
        self._book_repo = book_repo

    def handle(self, order_id: int, status: str) -> OrderDTO:
        try:
            target = OrderStatus(status)
        except ValueError:
            raise ValidationError(f"Unknown order status '{status}'")
        step = _STEPS.get(target)
        if step is None:
            raise ValidationError(
                f"Status '{status}' cannot be set directly "
                f"(use the ship or cancel commands)"
            )

        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order #{order_id} not found")

        previous = order.status
        was_cancellable = order.is_cancellable
        step(order)
        self._order_repo.save(order)
        logger.info("Order #%s moved %s -> %s", order_id, previous.value, target.value)

        if was_cancellable and not order.is_cancellable:
            StockReservationService(self._book_repo).release_for_order(order)
        return order_to_dto(order)
