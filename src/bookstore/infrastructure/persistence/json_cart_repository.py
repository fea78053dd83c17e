"""JSON-file-backed implementation of CartRepository.

Carts past their ``expires_at`` are treated as gone: reads ignore them
and every write purges them from the file.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

from bookstore.domain.model.cart import Cart, CartLine
from bookstore.domain.repository.cart_repository import CartRepository
from bookstore.infrastructure.persistence.json_file import JsonFile


class JsonCartRepository(CartRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)

    # --- CartRepository interface ---------------------------------------------

    def get_by_owner(self, owner_key: str) -> Cart | None:
        now = datetime.now(timezone.utc)
        for raw in self._file.load():
            if raw["owner_key"] == owner_key:
                cart = self._to_domain(raw)
                return None if cart.is_expired(now) else cart
        return None

    def save(self, cart: Cart) -> None:
        with self._file.update() as records:
            records[:] = [
                raw for raw in self._live(records) if raw["owner_key"] != cart.owner_key
            ]
            records.append(self._to_raw(cart))

    def delete(self, owner_key: str) -> None:
        with self._file.update() as records:
            records[:] = [
                raw for raw in self._live(records) if raw["owner_key"] != owner_key
            ]

    # --- Serialization --------------------------------------------------------

    def _live(self, records: list[dict]) -> list[dict]:
        now = datetime.now(timezone.utc)
        return [
            raw for raw in records
            if datetime.fromisoformat(raw["expires_at"]) > now
        ]

    @staticmethod
    def _to_raw(cart: Cart) -> dict:
        return {
            "owner_key": cart.owner_key,
            "updated_at": cart.updated_at.isoformat(),
            "expires_at": cart.expires_at.isoformat(),
            "items": [
                {
                    "book_id": line.book_id,
                    "quantity": line.quantity,
                    "added_at": line.added_at.isoformat(),
                }
                for line in cart.lines
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Cart:
        return Cart(
            owner_key=raw["owner_key"],
            lines=[
                CartLine(
                    book_id=i["book_id"],
                    quantity=i["quantity"],
                    added_at=datetime.fromisoformat(i["added_at"]),
                )
                for i in raw["items"]
            ],
            updated_at=datetime.fromisoformat(raw["updated_at"]),
            expires_at=datetime.fromisoformat(raw["expires_at"]),
        )
