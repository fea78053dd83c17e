"""Abstract repository for the Order aggregate (the order ledger)."""

from __future__ import annotations

from abc import ABC, abstractmethod

from bookstore.domain.model.order import Order, OrderStatus


class OrderRepository(ABC):

    @abstractmethod
    def next_id(self) -> int:
        """Reserve the next unique order ID."""

    @abstractmethod
    def get_by_id(self, order_id: int) -> Order | None:
        """Return an order by its ID, or None if not found."""

    @abstractmethod
    def find_for_user(self, order_id: int, user_id: str) -> Order | None:
        """Return the order only if it belongs to *user_id*."""

    @abstractmethod
    def list_for_user(
        self, user_id: str, status: OrderStatus | None = None
    ) -> list[Order]:
        """Return a user's orders, newest first, optionally by status."""

    @abstractmethod
    def save(self, order: Order) -> None:
        """Persist a new or updated order."""
