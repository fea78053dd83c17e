"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from functools import lru_cache

from bookstore.domain.repository.cart_repository import CartRepository
from bookstore.infrastructure.config import Settings
from bookstore.infrastructure.persistence.json_book_repository import (
    JsonBookRepository,
)
from bookstore.infrastructure.persistence.json_cart_repository import (
    JsonCartRepository,
)
from bookstore.infrastructure.persistence.json_order_repository import (
    JsonOrderRepository,
)
from bookstore.infrastructure.persistence.memory_cart_repository import (
    InMemoryCartRepository,
)


def settings() -> Settings:
    return Settings.from_env()


def book_repository() -> JsonBookRepository:
    return JsonBookRepository(settings().data_dir / "books.json")


def order_repository() -> JsonOrderRepository:
    return JsonOrderRepository(settings().data_dir / "orders.json")


def cart_repository() -> CartRepository:
    current = settings()
    if current.cart_backend == "memory":
        return _memory_carts()
    return JsonCartRepository(current.data_dir / "carts.json")


@lru_cache(maxsize=1)
def _memory_carts() -> InMemoryCartRepository:
    return InMemoryCartRepository()
