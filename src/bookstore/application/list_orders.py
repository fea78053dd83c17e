"""Application service: List Orders and Order Summary use cases (queries)."""

from __future__ import annotations

from collections import Counter

from bookstore.application.dto import OrderDTO, OrderSummaryDTO
from bookstore.application.mapping import order_to_dto
from bookstore.domain.exceptions import ValidationError
from bookstore.domain.model.order import OrderStatus
from bookstore.domain.model.value_objects import Money
from bookstore.domain.repository.order_repository import OrderRepository


class ListOrdersHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, user_id: str, status: str | None = None) -> list[OrderDTO]:
        """Return the user's orders, newest first."""
        wanted: OrderStatus | None = None
        if status is not None:
            try:
                wanted = OrderStatus(status)
            except ValueError:
                raise ValidationError(f"Unknown order status '{status}'")
        return [
            order_to_dto(order)
            for order in self._order_repo.list_for_user(user_id, wanted)
        ]


class OrderSummaryHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, user_id: str) -> OrderSummaryDTO:
        """Totals over every order the user has placed, cancelled ones included."""
        orders = self._order_repo.list_for_user(user_id)
        spent = Money.zero()
        for order in orders:
            spent = spent + order.total

        if orders:
            average = Money(spent.amount / len(orders)).rounded()
        else:
            average = Money.zero()

        counts = Counter(order.status.value for order in orders)
        return OrderSummaryDTO(
            total_orders=len(orders),
            total_spent=str(spent),
            average_order_value=str(average),
            status_counts=dict(counts),
        )
