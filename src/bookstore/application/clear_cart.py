"""Application service: Clear Cart use case.

The cart document survives; only its lines go.
"""

from __future__ import annotations

from bookstore.application.dto import CartDTO
from bookstore.application.mapping import cart_to_dto
from bookstore.domain.exceptions import EntityNotFoundError
from bookstore.domain.repository.book_repository import BookRepository
from bookstore.domain.repository.cart_repository import CartRepository


class ClearCartHandler:

    def __init__(self, cart_repo: CartRepository, book_repo: BookRepository) -> None:
        self._cart_repo = cart_repo
        self._book_repo = book_repo

    def handle(self, owner_key: str) -> CartDTO:
        cart = self._cart_repo.get_by_owner(owner_key)
        if cart is None:
            raise EntityNotFoundError("Cart not found")

        cart.clear()
        cart.touch()
        self._cart_repo.save(cart)
        return cart_to_dto(cart, self._book_repo)
