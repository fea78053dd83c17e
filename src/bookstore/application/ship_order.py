"""Application service: Ship Order use case (admin).

Records tracking details and marks the order shipped. Stock was already
taken at checkout, so nothing moves in the catalog; a shipped order can
no longer be cancelled, so the books forget it.
"""

from __future__ import annotations

import logging
from datetime import datetime

from bookstore.application.dto import OrderDTO
from bookstore.application.mapping import order_to_dto
from bookstore.domain.exceptions import EntityNotFoundError
from bookstore.domain.model.order import TrackingInfo
from bookstore.domain.repository.book_repository import BookRepository
from bookstore.domain.repository.order_repository import OrderRepository
from bookstore.domain.service.stock_reservation_service import (
    StockReservationService,
)

logger = logging.getLogger(__name__)


class ShipOrderHandler:

    def __init__(self, order_repo: OrderRepository, book_repo: BookRepository) -> None:
        self._order_repo = order_repo
        self._book_repo = book_repo

    def handle(
        self,
        order_id: int,
        tracking_number: str,
        tracking_url: str | None = None,
        estimated_delivery: datetime | None = None,
    ) -> OrderDTO:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order #{order_id} not found")

        was_cancellable = order.is_cancellable
        order.mark_shipped(
            TrackingInfo(
                tracking_number=tracking_number.strip(),
                tracking_url=tracking_url,
                estimated_delivery=estimated_delivery,
            )
        )
        self._order_repo.save(order)
        logger.info("Order #%s shipped (tracking %s)", order_id, tracking_number)

        if was_cancellable:
            StockReservationService(self._book_repo).release_for_order(order)
        return order_to_dto(order)
