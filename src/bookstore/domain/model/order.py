"""Order aggregate: the immutable record of a checkout.

The Order owns a frozen copy of what was bought and what it cost.
After creation only its status (and the fields that ride along with a
status change) may move, and only along ``ALLOWED_TRANSITIONS``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from bookstore.domain.exceptions import (
    ConfigurationError,
    InvalidTransitionError,
    ValidationError,
)
from bookstore.domain.model.book import Book
from bookstore.domain.model.pricing import PricingBreakdown
from bookstore.domain.model.value_objects import (
    Money,
    PaymentMethod,
    Quantity,
    ShippingAddress,
)


class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"


ALLOWED_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset(
        {OrderStatus.CONFIRMED, OrderStatus.SHIPPED, OrderStatus.CANCELLED}
    ),
    OrderStatus.CONFIRMED: frozenset(
        {
            OrderStatus.PROCESSING,
            OrderStatus.SHIPPED,
            OrderStatus.CANCELLED,
            OrderStatus.REFUNDED,
        }
    ),
    OrderStatus.PROCESSING: frozenset({OrderStatus.SHIPPED, OrderStatus.REFUNDED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED, OrderStatus.REFUNDED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
    OrderStatus.REFUNDED: frozenset(),
}

MAX_CANCELLATION_REASON = 500


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class OrderLine:
    """Snapshot of a book at order-creation time.

    Decoupled from the live Book: later price changes or deactivation
    never reach an existing order.
    """

    book_id: str
    title: str
    author: str
    unit_price: Money  # locked at order-creation time
    quantity: Quantity
    image_url: str = ""

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity.value

    @staticmethod
    def snapshot(book: Book, quantity: int) -> OrderLine:
        return OrderLine(
            book_id=book.id,
            title=book.title,
            author=book.author,
            unit_price=book.price,
            quantity=Quantity(quantity),
            image_url=book.image_url,
        )


@dataclass(frozen=True)
class TrackingInfo:
    tracking_number: str
    tracking_url: str | None = None
    estimated_delivery: datetime | None = None


@dataclass
class Order:
    """Aggregate root for customer orders.

    Use the ``Order.create()`` factory for new orders; it enforces all
    business rules.  The ``__init__`` is intentionally simple so the
    repository can reconstitute persisted orders without re-validating.
    """

    id: int | None
    user_id: str
    items: list[OrderLine]
    shipping_address: ShippingAddress
    billing_address: ShippingAddress
    payment_method: PaymentMethod
    pricing: PricingBreakdown
    status: OrderStatus = OrderStatus.PENDING
    cancellation_reason: str | None = None
    tracking: TrackingInfo | None = None
    notes: str | None = None
    stock_committed: bool = False
    created_at: datetime = field(default_factory=_utc_now)
    updated_at: datetime = field(default_factory=_utc_now)

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        order_id: int,
        user_id: str,
        items: list[OrderLine],
        shipping_address: ShippingAddress,
        payment_method: PaymentMethod,
        billing_address: ShippingAddress | None = None,
        notes: str | None = None,
    ) -> Order:
        """Create a new pending order, pricing it from the line snapshots."""
        if not user_id or not user_id.strip():
            raise ValidationError("User is required")
        if not items:
            raise ValidationError("Order must contain at least one item")

        payment_method.validate()
        missing = shipping_address.missing_fields()
        if missing:
            raise ConfigurationError(
                f"Shipping address is missing: {', '.join(missing)}"
            )

        subtotal = Money.zero()
        for item in items:
            subtotal = subtotal + item.line_total

        return Order(
            id=order_id,
            user_id=user_id,
            items=list(items),
            shipping_address=shipping_address,
            billing_address=billing_address or shipping_address,
            payment_method=payment_method,
            pricing=PricingBreakdown.for_subtotal(subtotal),
            notes=notes,
        )

    # --- State transitions ----------------------------------------------------

    def confirm(self) -> None:
        self._transition_to(OrderStatus.CONFIRMED)

    def start_processing(self) -> None:
        self._transition_to(OrderStatus.PROCESSING)

    def mark_shipped(self, tracking: TrackingInfo) -> None:
        """Record tracking details and move to SHIPPED (no stock effect)."""
        if not tracking.tracking_number or not tracking.tracking_number.strip():
            raise ValidationError("Tracking number is required")
        self._transition_to(OrderStatus.SHIPPED)
        self.tracking = tracking

    def mark_delivered(self) -> None:
        self._transition_to(OrderStatus.DELIVERED)

    def refund(self) -> None:
        self._transition_to(OrderStatus.REFUNDED)

    def cancel(self, reason: str | None = None) -> None:
        """Transition PENDING|CONFIRMED -> CANCELLED.

        Stock restoration is the caller's job and must only happen after
        this succeeds; a second cancel fails here, before any stock moves.
        """
        if reason is not None and len(reason) > MAX_CANCELLATION_REASON:
            raise ValidationError(
                f"Reason must be at most {MAX_CANCELLATION_REASON} characters"
            )
        self._transition_to(OrderStatus.CANCELLED)
        self.cancellation_reason = reason

    def mark_stock_committed(self) -> None:
        self.stock_committed = True
        self.updated_at = _utc_now()

    # --- Computed properties --------------------------------------------------

    @property
    def total(self) -> Money:
        return self.pricing.total

    @property
    def total_items(self) -> int:
        return sum(item.quantity.value for item in self.items)

    @property
    def is_terminal(self) -> bool:
        return not ALLOWED_TRANSITIONS[self.status]

    @property
    def is_cancellable(self) -> bool:
        return self.can_transition_to(OrderStatus.CANCELLED)

    def can_transition_to(self, status: OrderStatus) -> bool:
        return status in ALLOWED_TRANSITIONS[self.status]

    # --- Internal helpers -----------------------------------------------------

    def _transition_to(self, status: OrderStatus) -> None:
        if not self.can_transition_to(status):
            raise InvalidTransitionError(self.status.value, status.value)
        # Until checkout has taken every line's stock, only cancellation may follow
        if not self.stock_committed and status != OrderStatus.CANCELLED:
            raise ValidationError(
                f"Order #{self.id} has uncommitted stock; resume checkout first"
            )
        self.status = status
        self.updated_at = _utc_now()
