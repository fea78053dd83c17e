"""Cart aggregate: a single owner's mutable selection of books.

A cart belongs to one user, or to one guest session (owner key
``guest:<session id>``). It never talks to the catalog: stock checks are
the caller's job, and prices are supplied when a live total is wanted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Iterable, Mapping

from bookstore.domain.exceptions import ValidationError
from bookstore.domain.model.value_objects import Money

# ---------------------------------------------------------------------------
# Constants for business rules
# ---------------------------------------------------------------------------
MAX_LINE_QUANTITY = 10
MAX_CART_LINES = 50
CART_RETENTION = timedelta(days=7)

GUEST_PREFIX = "guest:"


def guest_owner_key(session_id: str) -> str:
    return f"{GUEST_PREFIX}{session_id}"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class CartLine:
    book_id: str
    quantity: int
    added_at: datetime = field(default_factory=_utc_now)


@dataclass
class Cart:
    """Aggregate root for a shopping cart.

    Invariants:
    - at most one line per book id
    - every line's quantity is within [1, MAX_LINE_QUANTITY]
    - at most MAX_CART_LINES lines
    """

    owner_key: str
    lines: list[CartLine] = field(default_factory=list)
    updated_at: datetime = field(default_factory=_utc_now)
    expires_at: datetime = field(default_factory=lambda: _utc_now() + CART_RETENTION)

    # --- Mutations ------------------------------------------------------------

    def add_item(self, book_id: str, quantity: int) -> None:
        """Add *quantity* of a book, merging into an existing line (capped)."""
        _check_requested_quantity(quantity)

        line = self._find_line(book_id)
        if line is not None:
            line.quantity = min(line.quantity + quantity, MAX_LINE_QUANTITY)
            return

        if len(self.lines) >= MAX_CART_LINES:
            raise ValidationError(f"Maximum {MAX_CART_LINES} different books per cart")
        self.lines.append(
            CartLine(book_id=book_id, quantity=min(quantity, MAX_LINE_QUANTITY))
        )

    def update_quantity(self, book_id: str, quantity: int) -> None:
        """Set a line's quantity; zero or less removes the line.

        A book with no line in the cart is left alone.
        """
        if quantity <= 0:
            self.remove_item(book_id)
            return
        line = self._find_line(book_id)
        if line is not None:
            line.quantity = min(quantity, MAX_LINE_QUANTITY)

    def remove_item(self, book_id: str) -> None:
        self.lines = [line for line in self.lines if line.book_id != book_id]

    def clear(self) -> None:
        self.lines = []

    def merge(self, other_lines: Iterable[tuple[str, int]]) -> None:
        """Fold (book_id, quantity) pairs in, each as if by ``add_item``.

        New books that no longer fit under MAX_CART_LINES are dropped.
        """
        for book_id, quantity in other_lines:
            if self._find_line(book_id) is None and len(self.lines) >= MAX_CART_LINES:
                continue
            self.add_item(book_id, quantity)

    def touch(self, now: datetime | None = None) -> None:
        """Record a mutation and push the expiry window forward."""
        now = now or _utc_now()
        self.updated_at = now
        self.expires_at = now + CART_RETENTION

    # --- Computed properties --------------------------------------------------

    @property
    def is_empty(self) -> bool:
        return not self.lines

    @property
    def total_items(self) -> int:
        return sum(line.quantity for line in self.lines)

    def total_price(self, prices: Mapping[str, Money]) -> Money:
        """Live estimate from current catalog prices.

        Lines whose book has no price (e.g. removed from the catalog) do not
        contribute.
        """
        result = Money.zero()
        for line in self.lines:
            price = prices.get(line.book_id)
            if price is not None:
                result = result + price * line.quantity
        return result

    def is_expired(self, now: datetime | None = None) -> bool:
        return (now or _utc_now()) >= self.expires_at

    def quantity_of(self, book_id: str) -> int:
        line = self._find_line(book_id)
        return line.quantity if line is not None else 0

    # --- Internal helpers -----------------------------------------------------

    def _find_line(self, book_id: str) -> CartLine | None:
        for line in self.lines:
            if line.book_id == book_id:
                return line
        return None


def _check_requested_quantity(quantity: int) -> None:
    if not isinstance(quantity, int) or isinstance(quantity, bool):
        raise ValidationError(
            f"Quantity must be an integer, got {type(quantity).__name__}"
        )
    if quantity < 1 or quantity > MAX_LINE_QUANTITY:
        raise ValidationError(
            f"Quantity must be between 1 and {MAX_LINE_QUANTITY}"
        )
