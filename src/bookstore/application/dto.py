"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class CartItemSpec:
    """Input: a book and how many of it (e.g. one guest-cart entry)."""

    book_id: str
    quantity: int


@dataclass(frozen=True)
class CartLineDTO:
    book_id: str
    title: str
    author: str
    quantity: int
    unit_price: str  # formatted live price, e.g. "$15.00"
    line_total: str


@dataclass(frozen=True)
class CartDTO:
    owner_key: str
    items: list[CartLineDTO]
    total_items: int
    total_price: str


@dataclass(frozen=True)
class OrderLineDTO:
    book_id: str
    title: str
    author: str
    quantity: int
    unit_price: str
    line_total: str


@dataclass(frozen=True)
class PricingDTO:
    subtotal: str
    tax: str
    shipping: str
    discount: str
    total: str


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order as displayed to the user."""

    id: int
    user_id: str
    status: str
    items: list[OrderLineDTO]
    pricing: PricingDTO
    shipping_address: str
    payment_type: str
    created_at: str
    cancellation_reason: str | None = None
    tracking_number: str | None = None
    tracking_url: str | None = None
    estimated_delivery: str | None = None
    stock_committed: bool = True


@dataclass(frozen=True)
class OrderSummaryDTO:
    total_orders: int
    total_spent: str
    average_order_value: str
    status_counts: dict[str, int] = field(default_factory=dict)
