"""Abstract repository for the Book aggregate (the catalog store).

Defined in the domain layer so the domain never depends on
infrastructure. The two stock operations must be atomic at the storage
layer: concurrent checkouts in separate processes may race on the same
book, and only the store can arbitrate between them.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from bookstore.domain.model.book import Book


class BookRepository(ABC):

    @abstractmethod
    def get_by_id(self, book_id: str) -> Book | None:
        """Return a book by its ID, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[Book]:
        """Return every book in the catalog."""

    @abstractmethod
    def save(self, book: Book) -> None:
        """Persist a new or updated book."""

    @abstractmethod
    def decrement_stock_if_available(
        self, book_id: str, quantity: int, order_id: int
    ) -> bool:
        """Atomically take *quantity* units for *order_id*.

        Returns False when the book is missing, inactive or short on stock.
        Returns True without touching stock when *order_id* already took
        its units from this book.
        """

    @abstractmethod
    def increment_stock(self, book_id: str, quantity: int, order_id: int) -> bool:
        """Atomically give back the units *order_id* took.

        Returns False (no change) if *order_id* holds nothing on this book.
        """

    @abstractmethod
    def release_commitment(self, book_id: str, order_id: int) -> bool:
        """Atomically drop *order_id* from the book's ledger, keeping stock.

        Called once the order can no longer be cancelled. Returns False
        if there was nothing to drop.
        """
