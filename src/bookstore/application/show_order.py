"""Application service: Show Order use case (query)."""

from __future__ import annotations

from bookstore.application.dto import OrderDTO
from bookstore.application.mapping import order_to_dto
from bookstore.domain.exceptions import EntityNotFoundError
from bookstore.domain.repository.order_repository import OrderRepository


class ShowOrderHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, order_id: int, user_id: str) -> OrderDTO:
        order = self._order_repo.find_for_user(order_id, user_id)
        if order is None:
            raise EntityNotFoundError(f"Order #{order_id} not found")
        return order_to_dto(order)
