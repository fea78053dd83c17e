"""Application service: Cancel Order use case.

Only PENDING or CONFIRMED orders can be cancelled. The status check runs
first, so cancelling twice fails on the second call without touching
stock. Stock is restored per line, keyed by the order id: a book that
never gave stock to this order (an interrupted checkout) gets nothing
back, and a retry after a crash cannot restore twice.
"""

from __future__ import annotations

import logging

from bookstore.application.dto import OrderDTO
from bookstore.application.mapping import order_to_dto
from bookstore.domain.exceptions import EntityNotFoundError
from bookstore.domain.repository.book_repository import BookRepository
from bookstore.domain.repository.order_repository import OrderRepository
from bookstore.domain.service.stock_reservation_service import (
    StockReservationService,
)

logger = logging.getLogger(__name__)


class CancelOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        book_repo: BookRepository,
    ) -> None:
        self._order_repo = order_repo
        self._book_repo = book_repo

    def handle(self, order_id: int, user_id: str, reason: str | None = None) -> OrderDTO:
        order = self._order_repo.find_for_user(order_id, user_id)
        if order is None:
            raise EntityNotFoundError(f"Order #{order_id} not found")

        # Raises InvalidTransitionError before any stock moves
        order.cancel(reason)

        svc = StockReservationService(self._book_repo)
        restored = svc.restore_for_order(order)

        self._order_repo.save(order)
        logger.info(
            "Order #%s cancelled; stock restored for %d of %d lines",
            order_id, restored, len(order.items),
        )
        return order_to_dto(order)
