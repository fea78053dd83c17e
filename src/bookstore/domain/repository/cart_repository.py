"""Abstract repository for the Cart aggregate.

Implemented both persistently (JSON file) and ephemerally (in memory);
the composition root decides which one a caller gets.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from bookstore.domain.model.cart import Cart


class CartRepository(ABC):

    @abstractmethod
    def get_by_owner(self, owner_key: str) -> Cart | None:
        """Return the owner's cart, or None if there is none (or it expired)."""

    @abstractmethod
    def save(self, cart: Cart) -> None:
        """Persist a new or updated cart (last write wins)."""

    @abstractmethod
    def delete(self, owner_key: str) -> None:
        """Drop the owner's cart if present."""
