"""Unit tests for the Cart aggregate."""

from datetime import datetime, timedelta, timezone

import pytest

from bookstore.domain.exceptions import ValidationError
from bookstore.domain.model.cart import (
    CART_RETENTION,
    MAX_CART_LINES,
    Cart,
    guest_owner_key,
)
from bookstore.domain.model.value_objects import Money


class TestAddItem:

    def test_add_new_book(self):
        cart = Cart(owner_key="u1")
        cart.add_item("b1", 2)
        assert cart.quantity_of("b1") == 2
        assert len(cart.lines) == 1

    def test_adding_same_book_merges_line(self):
        cart = Cart(owner_key="u1")
        cart.add_item("b1", 2)
        cart.add_item("b1", 3)
        assert len(cart.lines) == 1
        assert cart.quantity_of("b1") == 5

    @pytest.mark.parametrize("first,second", [(10, 1), (6, 6), (9, 10), (10, 10)])
    def test_repeated_adds_never_exceed_ten(self, first, second):
        cart = Cart(owner_key="u1")
        cart.add_item("b1", first)
        cart.add_item("b1", second)
        assert cart.quantity_of("b1") == 10

    @pytest.mark.parametrize("quantity", [0, -1, 11])
    def test_out_of_range_quantity_rejected(self, quantity):
        cart = Cart(owner_key="u1")
        with pytest.raises(ValidationError, match="between 1 and 10"):
            cart.add_item("b1", quantity)
        assert cart.is_empty

    def test_line_cap(self):
        cart = Cart(owner_key="u1")
        for i in range(MAX_CART_LINES):
            cart.add_item(f"b{i}", 1)
        with pytest.raises(ValidationError, match="Maximum 50"):
            cart.add_item("one-too-many", 1)
        # Existing lines can still grow
        cart.add_item("b0", 1)
        assert cart.quantity_of("b0") == 2


class TestUpdateAndRemove:

    def test_update_sets_quantity(self):
        cart = Cart(owner_key="u1")
        cart.add_item("b1", 2)
        cart.update_quantity("b1", 7)
        assert cart.quantity_of("b1") == 7

    def test_update_caps_at_ten(self):
        cart = Cart(owner_key="u1")
        cart.add_item("b1", 2)
        cart.update_quantity("b1", 25)
        assert cart.quantity_of("b1") == 10

    @pytest.mark.parametrize("quantity", [0, -3])
    def test_update_to_zero_or_less_removes_line(self, quantity):
        cart = Cart(owner_key="u1")
        cart.add_item("b1", 2)
        cart.add_item("b2", 1)
        cart.update_quantity("b1", quantity)
        assert [line.book_id for line in cart.lines] == ["b2"]

    def test_update_zero_for_absent_book_is_noop(self):
        cart = Cart(owner_key="u1")
        cart.update_quantity("missing", 0)
        assert cart.is_empty

    def test_update_positive_for_absent_book_is_noop(self):
        cart = Cart(owner_key="u1")
        cart.update_quantity("missing", 4)
        assert cart.is_empty

    def test_remove_is_idempotent(self):
        cart = Cart(owner_key="u1")
        cart.add_item("b1", 1)
        cart.remove_item("b1")
        cart.remove_item("b1")
        assert cart.is_empty

    def test_clear(self):
        cart = Cart(owner_key="u1")
        cart.add_item("b1", 1)
        cart.add_item("b2", 4)
        cart.clear()
        assert cart.is_empty
        assert cart.total_items == 0


class TestMerge:

    def test_merge_combines_like_add(self):
        cart = Cart(owner_key="u1")
        cart.add_item("b1", 8)
        cart.merge([("b1", 5), ("b2", 3)])
        assert cart.quantity_of("b1") == 10
        assert cart.quantity_of("b2") == 3

    def test_merge_into_full_cart_drops_new_books(self):
        cart = Cart(owner_key="u1")
        for i in range(MAX_CART_LINES):
            cart.add_item(f"b{i}", 1)
        cart.merge([("b0", 2), ("extra", 1)])
        assert cart.quantity_of("b0") == 3
        assert cart.quantity_of("extra") == 0
        assert len(cart.lines) == MAX_CART_LINES


class TestTotals:

    def test_total_items(self):
        cart = Cart(owner_key="u1")
        cart.add_item("b1", 2)
        cart.add_item("b2", 3)
        assert cart.total_items == 5

    def test_total_price_uses_given_live_prices(self):
        cart = Cart(owner_key="u1")
        cart.add_item("b1", 2)
        cart.add_item("b2", 1)
        prices = {"b1": Money.of("10.00"), "b2": Money.of("50.00")}
        assert cart.total_price(prices) == Money.of("70.00")

        prices["b1"] = Money.of("12.00")
        assert cart.total_price(prices) == Money.of("74.00")

    def test_total_price_skips_unknown_books(self):
        cart = Cart(owner_key="u1")
        cart.add_item("gone", 3)
        assert cart.total_price({}) == Money.zero()


class TestExpiry:

    def test_new_cart_expires_after_retention_window(self):
        cart = Cart(owner_key="u1")
        assert not cart.is_expired()
        assert cart.is_expired(datetime.now(timezone.utc) + CART_RETENTION + timedelta(seconds=1))

    def test_touch_pushes_expiry(self):
        past = datetime(2024, 1, 1, tzinfo=timezone.utc)
        cart = Cart(owner_key="u1", updated_at=past, expires_at=past)
        now = datetime(2024, 3, 1, tzinfo=timezone.utc)
        cart.touch(now)
        assert cart.updated_at == now
        assert cart.expires_at == now + CART_RETENTION


def test_guest_owner_key():
    assert guest_owner_key("abc123") == "guest:abc123"
