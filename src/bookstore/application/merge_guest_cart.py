"""Application service: Merge Guest Cart use case.

Runs when a guest signs in. Guest entries are screened against the
catalog first: anything missing, inactive or short on stock is dropped
silently. The survivors are folded into the user's cart with the usual
add semantics (quantities combine, capped per line).
"""

from __future__ import annotations

import logging

from bookstore.application.dto import CartDTO, CartItemSpec
from bookstore.application.mapping import cart_to_dto
from bookstore.domain.model.cart import Cart
from bookstore.domain.repository.book_repository import BookRepository
from bookstore.domain.repository.cart_repository import CartRepository

logger = logging.getLogger(__name__)


class MergeGuestCartHandler:

    def __init__(
        self,
        cart_repo: CartRepository,
        book_repo: BookRepository,
        guest_cart_repo: CartRepository | None = None,
    ) -> None:
        self._cart_repo = cart_repo
        self._book_repo = book_repo
        self._guest_cart_repo = guest_cart_repo

    def handle(self, owner_key: str, guest_items: list[CartItemSpec]) -> CartDTO:
        accepted: list[tuple[str, int]] = []
        for spec in guest_items:
            book = self._book_repo.get_by_id(spec.book_id)
            if book is None or not book.has_stock_for(spec.quantity):
                logger.info("Dropping guest item %s x%d", spec.book_id, spec.quantity)
                continue
            accepted.append((spec.book_id, spec.quantity))

        cart = self._cart_repo.get_by_owner(owner_key) or Cart(owner_key=owner_key)
        cart.merge(accepted)
        cart.touch()
        self._cart_repo.save(cart)

        logger.info(
            "Merged %d of %d guest items into cart %s",
            len(accepted), len(guest_items), owner_key,
        )
        return cart_to_dto(cart, self._book_repo)

    def handle_session(self, owner_key: str, guest_key: str) -> CartDTO:
        """Merge a stored guest cart, then discard it."""
        if self._guest_cart_repo is None:
            raise RuntimeError("No guest cart store configured")
        guest = self._guest_cart_repo.get_by_owner(guest_key)
        specs = [
            CartItemSpec(book_id=line.book_id, quantity=line.quantity)
            for line in (guest.lines if guest is not None else [])
        ]
        dto = self.handle(owner_key, specs)
        self._guest_cart_repo.delete(guest_key)
        return dto
