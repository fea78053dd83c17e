"""Application service: Show Cart use case (query).

Totals are recomputed from live catalog prices on every call.
"""

from __future__ import annotations

from bookstore.application.dto import CartDTO
from bookstore.application.mapping import cart_to_dto
from bookstore.domain.model.cart import Cart
from bookstore.domain.repository.book_repository import BookRepository
from bookstore.domain.repository.cart_repository import CartRepository


class ShowCartHandler:

    def __init__(self, cart_repo: CartRepository, book_repo: BookRepository) -> None:
        self._cart_repo = cart_repo
        self._book_repo = book_repo

    def handle(self, owner_key: str) -> CartDTO:
        # A missing cart reads as empty; nothing is persisted here
        cart = self._cart_repo.get_by_owner(owner_key) or Cart(owner_key=owner_key)
        return cart_to_dto(cart, self._book_repo)
