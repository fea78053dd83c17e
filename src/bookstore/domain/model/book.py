"""Book aggregate: a catalog entry together with its stock counter.

Books live independently of carts and orders. Prices change and books are
deactivated, but a book is never deleted. Stock moves only through
``withdraw_for_order`` and ``restore_for_order`` so every movement is keyed
by the order that caused it.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from bookstore.domain.exceptions import InsufficientStockError, ValidationError
from bookstore.domain.model.value_objects import Money


@dataclass
class Book:
    """Aggregate root for a sellable book.

    Invariants:
    - ``stock`` is never negative
    - an inactive book is not purchasable regardless of stock
    - ``committed_orders`` holds exactly the order ids whose withdrawal has
      been applied and that can still be cancelled
    """

    id: str
    title: str
    author: str
    price: Money
    stock: int = 0
    is_active: bool = True
    image_url: str = ""
    committed_orders: set[int] = field(default_factory=set)

    def __post_init__(self) -> None:
        if self.stock < 0:
            raise ValidationError(f"Stock for {self.title} cannot be negative")

    @property
    def is_purchasable(self) -> bool:
        return self.is_active and self.stock > 0

    def has_stock_for(self, quantity: int) -> bool:
        return self.is_active and self.stock >= quantity

    def withdraw_for_order(self, order_id: int, quantity: int) -> bool:
        """Take *quantity* units out of stock on behalf of *order_id*.

        Returns False if this order already withdrew from this book, so a
        retried checkout never decrements twice.
        """
        if quantity <= 0:
            raise ValidationError("Withdrawal quantity must be positive")
        if order_id in self.committed_orders:
            return False
        if quantity > self.stock:
            raise InsufficientStockError(self.title, self.stock)
        self.stock -= quantity
        self.committed_orders.add(order_id)
        return True

    def restore_for_order(self, order_id: int, quantity: int) -> bool:
        """Put back the units *order_id* took.

        Returns False (and leaves stock alone) if the order never withdrew
        from this book or has already been restored.
        """
        if quantity <= 0:
            raise ValidationError("Restore quantity must be positive")
        if order_id not in self.committed_orders:
            return False
        self.stock += quantity
        self.committed_orders.discard(order_id)
        return True

    def release_commitment(self, order_id: int) -> bool:
        """Forget *order_id* once its units can never come back.

        Stock is untouched. Returns False if the order held nothing here.
        """
        if order_id not in self.committed_orders:
            return False
        self.committed_orders.discard(order_id)
        return True

    def update_price(self, new_price: Money) -> None:
        """Change the book price.

        This does NOT affect any existing orders because orders
        capture a price snapshot at creation time.
        """
        if new_price.amount <= 0:
            raise ValidationError("Book price must be greater than zero")
        self.price = new_price

    def deactivate(self) -> None:
        self.is_active = False
