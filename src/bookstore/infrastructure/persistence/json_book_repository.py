"""JSON-file-backed implementation of BookRepository.

Stock changes run inside a single locked read-modify-write of the
catalog file, which is what makes them atomic across processes.
"""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path

from bookstore.domain.exceptions import InsufficientStockError
from bookstore.domain.model.book import Book
from bookstore.domain.model.value_objects import Money
from bookstore.domain.repository.book_repository import BookRepository
from bookstore.infrastructure.persistence.json_file import JsonFile


class JsonBookRepository(BookRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)

    # --- BookRepository interface ---------------------------------------------

    def get_by_id(self, book_id: str) -> Book | None:
        for raw in self._file.load():
            if raw["id"] == book_id:
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[Book]:
        return [self._to_domain(raw) for raw in self._file.load()]

    def save(self, book: Book) -> None:
        with self._file.update() as records:
            for i, raw in enumerate(records):
                if raw["id"] == book.id:
                    records[i] = self._to_raw(book)
                    break
            else:
                records.append(self._to_raw(book))

    def decrement_stock_if_available(
        self, book_id: str, quantity: int, order_id: int
    ) -> bool:
        with self._file.update() as records:
            i, book = self._find(records, book_id)
            if book is None or not book.is_active:
                return False
            try:
                book.withdraw_for_order(order_id, quantity)
            except InsufficientStockError:
                return False
            records[i] = self._to_raw(book)
        return True

    def increment_stock(self, book_id: str, quantity: int, order_id: int) -> bool:
        with self._file.update() as records:
            i, book = self._find(records, book_id)
            if book is None or not book.restore_for_order(order_id, quantity):
                return False
            records[i] = self._to_raw(book)
        return True

    def release_commitment(self, book_id: str, order_id: int) -> bool:
        with self._file.update() as records:
            i, book = self._find(records, book_id)
            if book is None or not book.release_commitment(order_id):
                return False
            records[i] = self._to_raw(book)
        return True

    # --- Serialization --------------------------------------------------------

    def _find(self, records: list[dict], book_id: str) -> tuple[int, Book | None]:
        for i, raw in enumerate(records):
            if raw["id"] == book_id:
                return i, self._to_domain(raw)
        return -1, None

    @staticmethod
    def _to_raw(book: Book) -> dict:
        return {
            "id": book.id,
            "title": book.title,
            "author": book.author,
            "price": str(book.price.amount),
            "currency": book.price.currency,
            "stock": book.stock,
            "is_active": book.is_active,
            "image_url": book.image_url,
            "committed_orders": sorted(book.committed_orders),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Book:
        return Book(
            id=raw["id"],
            title=raw["title"],
            author=raw["author"],
            price=Money(Decimal(raw["price"]), raw.get("currency", "USD")),
            stock=raw.get("stock", 0),
            is_active=raw.get("is_active", True),
            image_url=raw.get("image_url", ""),
            committed_orders=set(raw.get("committed_orders", [])),
        )
