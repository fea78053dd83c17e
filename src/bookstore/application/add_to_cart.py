"""Application service: Add To Cart use case.

Checks the catalog before touching the cart: the book must be active
and currently hold at least the requested quantity. Checkout re-checks
stock regardless, so this is only an early, friendly rejection.
"""

from __future__ import annotations

import logging

from bookstore.application.dto import CartDTO
from bookstore.application.mapping import cart_to_dto
from bookstore.domain.exceptions import (
    BookUnavailableError,
    InsufficientStockError,
    ValidationError,
)
from bookstore.domain.model.cart import Cart
from bookstore.domain.repository.book_repository import BookRepository
from bookstore.domain.repository.cart_repository import CartRepository

logger = logging.getLogger(__name__)


class AddToCartHandler:

    def __init__(self, cart_repo: CartRepository, book_repo: BookRepository) -> None:
        self._cart_repo = cart_repo
        self._book_repo = book_repo

    def handle(self, owner_key: str, book_id: str, quantity: int = 1) -> CartDTO:
        if not owner_key or not owner_key.strip():
            raise ValidationError("Cart owner is required")

        book = self._book_repo.get_by_id(book_id)
        if book is None or not book.is_active:
            raise BookUnavailableError(book_id)
        if book.stock < quantity:
            raise InsufficientStockError(book.title, book.stock)

        # Carts are created lazily on first mutation
        cart = self._cart_repo.get_by_owner(owner_key) or Cart(owner_key=owner_key)
        cart.add_item(book_id, quantity)
        cart.touch()
        self._cart_repo.save(cart)

        logger.info(
            "Added %d x %s to cart %s (now %d)",
            quantity, book_id, owner_key, cart.quantity_of(book_id),
        )
        return cart_to_dto(cart, self._book_repo)
