"""Application service: Seed Catalog use case.

Loads plain book records into the catalog, replacing any book with the
same id. Used to prime an empty data directory.
"""

from __future__ import annotations

import logging

from bookstore.domain.exceptions import ValidationError
from bookstore.domain.model.book import Book
from bookstore.domain.model.value_objects import Money
from bookstore.domain.repository.book_repository import BookRepository

logger = logging.getLogger(__name__)

_REQUIRED = ("id", "title", "author", "price")


class SeedCatalogHandler:

    def __init__(self, book_repo: BookRepository) -> None:
        self._book_repo = book_repo

    def handle(self, records: list[dict]) -> list[Book]:
        books: list[Book] = []
        for raw in records:
            missing = [key for key in _REQUIRED if key not in raw]
            if missing:
                raise ValidationError(
                    f"Book record is missing: {', '.join(missing)}"
                )
            books.append(
                Book(
                    id=str(raw["id"]),
                    title=raw["title"].strip(),
                    author=raw["author"].strip(),
                    price=Money.of(raw["price"]),
                    stock=int(raw.get("stock", 0)),
                    is_active=bool(raw.get("is_active", True)),
                    image_url=raw.get("image_url", ""),
                )
            )

        for book in books:
            self._book_repo.save(book)
        logger.info("Seeded %d books", len(books))
        return books
