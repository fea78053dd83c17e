"""In-process implementation of CartRepository.

Ephemeral: carts live only as long as the repository object. Suited to
guest sessions and to runs that must not leave files behind.
"""

from __future__ import annotations

import copy

from bookstore.domain.model.cart import Cart
from bookstore.domain.repository.cart_repository import CartRepository


class InMemoryCartRepository(CartRepository):

    def __init__(self, carts: list[Cart] | None = None) -> None:
        self._store: dict[str, Cart] = {}
        for cart in carts or []:
            self._store[cart.owner_key] = cart

    def get_by_owner(self, owner_key: str) -> Cart | None:
        cart = self._store.get(owner_key)
        if cart is None:
            return None
        if cart.is_expired():
            del self._store[owner_key]
            return None
        # Callers mutate what they get; only save() may change the stored copy
        return copy.deepcopy(cart)

    def save(self, cart: Cart) -> None:
        self._store[cart.owner_key] = copy.deepcopy(cart)

    def delete(self, owner_key: str) -> None:
        self._store.pop(owner_key, None)
