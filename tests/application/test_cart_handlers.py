"""Integration tests for the cart use cases.

Uses in-memory repositories, no file I/O.
"""

import pytest

from bookstore.application.add_to_cart import AddToCartHandler
from bookstore.application.clear_cart import ClearCartHandler
from bookstore.application.dto import CartItemSpec
from bookstore.application.merge_guest_cart import MergeGuestCartHandler
from bookstore.application.remove_from_cart import RemoveFromCartHandler
from bookstore.application.show_cart import ShowCartHandler
from bookstore.application.update_cart_item import UpdateCartItemHandler
from bookstore.domain.exceptions import (
    BookUnavailableError,
    EntityNotFoundError,
    InsufficientStockError,
    ValidationError,
)
from bookstore.domain.model.book import Book
from bookstore.domain.model.cart import Cart, guest_owner_key
from bookstore.domain.model.value_objects import Money
from bookstore.infrastructure.persistence.memory_cart_repository import (
    InMemoryCartRepository,
)
from tests.fakes import FakeBookRepository


def _setup():
    books = [
        Book(id="1", title="Dune", author="Frank Herbert", price=Money.of("10.00"), stock=20),
        Book(id="2", title="Emma", author="Jane Austen", price=Money.of("50.00"), stock=2),
        Book(id="3", title="Lost", author="Nobody", price=Money.of("5.00"), stock=9, is_active=False),
    ]
    return InMemoryCartRepository(), FakeBookRepository(books)


class TestAddToCart:

    def test_creates_cart_lazily(self):
        carts, books = _setup()
        dto = AddToCartHandler(carts, books).handle("alice", "1", 2)

        assert dto.owner_key == "alice"
        assert dto.total_items == 2
        assert dto.total_price == "$20.00"
        assert carts.get_by_owner("alice").quantity_of("1") == 2

    def test_add_twice_caps_at_ten(self):
        carts, books = _setup()
        handler = AddToCartHandler(carts, books)
        handler.handle("alice", "1", 8)
        dto = handler.handle("alice", "1", 8)
        assert dto.items[0].quantity == 10

    def test_unknown_book_rejected(self):
        carts, books = _setup()
        with pytest.raises(BookUnavailableError):
            AddToCartHandler(carts, books).handle("alice", "404", 1)
        assert carts.get_by_owner("alice") is None

    def test_inactive_book_rejected(self):
        carts, books = _setup()
        with pytest.raises(BookUnavailableError):
            AddToCartHandler(carts, books).handle("alice", "3", 1)

    def test_more_than_stock_rejected(self):
        carts, books = _setup()
        with pytest.raises(InsufficientStockError, match="Only 2 available"):
            AddToCartHandler(carts, books).handle("alice", "2", 3)

    def test_blank_owner_rejected(self):
        carts, books = _setup()
        with pytest.raises(ValidationError, match="owner"):
            AddToCartHandler(carts, books).handle(" ", "1", 1)


class TestUpdateRemoveClear:

    def _cart_with_items(self):
        carts, books = _setup()
        add = AddToCartHandler(carts, books)
        add.handle("alice", "1", 2)
        add.handle("alice", "2", 1)
        return carts, books

    def test_update_quantity(self):
        carts, books = self._cart_with_items()
        dto = UpdateCartItemHandler(carts, books).handle("alice", "1", 5)
        assert dto.total_items == 6
        assert dto.total_price == "$100.00"

    def test_update_to_zero_removes_line(self):
        carts, books = self._cart_with_items()
        dto = UpdateCartItemHandler(carts, books).handle("alice", "1", 0)
        assert [item.book_id for item in dto.items] == ["2"]

    def test_update_without_cart_rejected(self):
        carts, books = _setup()
        with pytest.raises(EntityNotFoundError, match="Cart not found"):
            UpdateCartItemHandler(carts, books).handle("bob", "1", 1)

    def test_remove(self):
        carts, books = self._cart_with_items()
        dto = RemoveFromCartHandler(carts, books).handle("alice", "2")
        assert dto.total_items == 2

    def test_clear_keeps_cart(self):
        carts, books = self._cart_with_items()
        dto = ClearCartHandler(carts, books).handle("alice")
        assert dto.items == []
        assert carts.get_by_owner("alice") is not None

    def test_clear_without_cart_rejected(self):
        carts, books = _setup()
        with pytest.raises(EntityNotFoundError):
            ClearCartHandler(carts, books).handle("bob")


class TestShowCart:

    def test_missing_cart_reads_as_empty(self):
        carts, books = _setup()
        dto = ShowCartHandler(carts, books).handle("nobody")
        assert dto.items == []
        assert dto.total_price == "$0.00"
        assert carts.get_by_owner("nobody") is None

    def test_total_follows_live_price(self):
        carts, books = _setup()
        AddToCartHandler(carts, books).handle("alice", "1", 3)

        dune = books.get_by_id("1")
        dune.update_price(Money.of("12.00"))
        books.save(dune)

        dto = ShowCartHandler(carts, books).handle("alice")
        assert dto.items[0].unit_price == "$12.00"
        assert dto.total_price == "$36.00"


class TestMergeGuestCart:

    def test_merge_drops_unavailable_items_and_combines_the_rest(self):
        carts, books = _setup()
        AddToCartHandler(carts, books).handle("alice", "1", 6)

        dto = MergeGuestCartHandler(carts, books).handle(
            "alice",
            [
                CartItemSpec("1", 6),    # combines, capped at 10
                CartItemSpec("2", 5),    # only 2 in stock: dropped
                CartItemSpec("3", 1),    # inactive: dropped
                CartItemSpec("404", 1),  # unknown: dropped
            ],
        )

        assert [(i.book_id, i.quantity) for i in dto.items] == [("1", 10)]

    def test_merge_creates_user_cart(self):
        carts, books = _setup()
        dto = MergeGuestCartHandler(carts, books).handle("bob", [CartItemSpec("2", 2)])
        assert dto.total_items == 2

    def test_merge_stored_guest_session_and_discard_it(self):
        carts, books = _setup()
        guest_key = guest_owner_key("s-42")
        guest = Cart(owner_key=guest_key)
        guest.add_item("1", 3)
        guest_carts = InMemoryCartRepository([guest])

        handler = MergeGuestCartHandler(carts, books, guest_cart_repo=guest_carts)
        dto = handler.handle_session("alice", guest_key)

        assert dto.total_items == 3
        assert guest_carts.get_by_owner(guest_key) is None
