"""Domain service: Stock Reservation.

Coordinates the cross-aggregate stock movements of a checkout: taking
stock for every line of a new order, and giving it back when the order
is cancelled or the checkout has to be unwound.

Checkout uses a two-phase approach. Phase 1 (``check_availability``)
reads every book and fails fast before anything is written. Phase 2
(``commit_for_order``) relies on the store's atomic conditional
decrement; a concurrent checkout can still win the race between the two
phases, in which case the lines already taken are handed back before
the failure is raised.

Every movement is keyed by order id, so both directions are safe to
repeat.
"""

from __future__ import annotations

from bookstore.domain.exceptions import BookUnavailableError, InsufficientStockError
from bookstore.domain.model.book import Book
from bookstore.domain.model.cart import Cart, CartLine
from bookstore.domain.model.order import Order
from bookstore.domain.repository.book_repository import BookRepository


class StockReservationService:

    def __init__(self, book_repo: BookRepository) -> None:
        self._book_repo = book_repo

    def check_availability(self, cart: Cart) -> list[tuple[CartLine, Book]]:
        """Phase 1: resolve every cart line against *current* stock.

        Raises BookUnavailableError for a missing or inactive book and
        InsufficientStockError for the first line that cannot be covered.
        """
        resolved: list[tuple[CartLine, Book]] = []
        for line in cart.lines:
            book = self._book_repo.get_by_id(line.book_id)
            if book is None or not book.is_active:
                raise BookUnavailableError(
                    line.book_id, book.title if book is not None else None
                )
            if book.stock < line.quantity:
                raise InsufficientStockError(book.title, book.stock)
            resolved.append((line, book))
        return resolved

    def commit_for_order(self, order: Order) -> None:
        """Phase 2: atomically decrement stock for every line of *order*.

        On a lost race, restores whatever this order already took and
        raises InsufficientStockError for the line that failed.
        """
        for line in order.items:
            taken = self._book_repo.decrement_stock_if_available(
                line.book_id, line.quantity.value, order.id  # type: ignore[arg-type]
            )
            if not taken:
                self.restore_for_order(order)
                book = self._book_repo.get_by_id(line.book_id)
                available = book.stock if book is not None and book.is_active else 0
                raise InsufficientStockError(line.title, available)

    def restore_for_order(self, order: Order) -> int:
        """Give back the stock *order* took; returns how many lines moved.

        Books the order never took from (e.g. after a partial commit) are
        left untouched.
        """
        restored = 0
        for line in order.items:
            if self._book_repo.increment_stock(
                line.book_id, line.quantity.value, order.id  # type: ignore[arg-type]
            ):
                restored += 1
        return restored

    def release_for_order(self, order: Order) -> int:
        """Drop *order* from each book's ledger once it cannot be cancelled.

        The stock stays sold; only the bookkeeping for a possible restore
        goes. Returns how many books held an entry.
        """
        released = 0
        for line in order.items:
            if self._book_repo.release_commitment(line.book_id, order.id):  # type: ignore[arg-type]
                released += 1
        return released
