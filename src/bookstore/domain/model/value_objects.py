"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
Money and Quantity validate themselves so invalid values can never exist.
Addresses and payment descriptors arrive pre-validated from the boundary;
the checkout re-checks them through ``missing_fields()`` / ``validate()``.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from bookstore.domain.exceptions import ConfigurationError, ValidationError

CENTS = Decimal("0.01")


@dataclass(frozen=True)
class Money:
    """Monetary amount with currency.

    Uses Decimal to avoid floating-point rounding errors that would be
    unacceptable in financial calculations.
    """

    amount: Decimal
    currency: str = "USD"

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            raise ValidationError(
                f"Money amount must be a Decimal, got {type(self.amount).__name__}"
            )
        if self.amount < Decimal("0"):
            raise ValidationError(
                f"Money amount cannot be negative, got {self.amount}"
            )

    # --- Arithmetic helpers ---------------------------------------------------

    def __add__(self, other: Money) -> Money:
        self._assert_same_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def __sub__(self, other: Money) -> Money:
        self._assert_same_currency(other)
        result = self.amount - other.amount
        if result < Decimal("0"):
            raise ValidationError("Money subtraction would result in a negative amount")
        return Money(result, self.currency)

    def __mul__(self, factor: int) -> Money:
        if not isinstance(factor, int):
            raise TypeError(f"Can only multiply Money by int, got {type(factor).__name__}")
        return Money(self.amount * factor, self.currency)

    def __lt__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount < other.amount

    def __le__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount <= other.amount

    def __gt__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount > other.amount

    def __ge__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount >= other.amount

    def at_rate(self, rate: Decimal) -> Money:
        """Return ``self * rate`` rounded to cents (e.g. a tax amount)."""
        return Money(self.amount * rate, self.currency).rounded()

    def rounded(self) -> Money:
        """Round half-up to whole cents."""
        return Money(self.amount.quantize(CENTS, rounding=ROUND_HALF_UP), self.currency)

    # --- Display --------------------------------------------------------------

    def __str__(self) -> str:
        return f"${self.amount:.2f}"

    # --- Internal helpers -----------------------------------------------------

    def _assert_same_currency(self, other: Money) -> None:
        if self.currency != other.currency:
            raise ValidationError(
                f"Cannot combine {self.currency} with {other.currency}"
            )

    # --- Factory --------------------------------------------------------------

    @staticmethod
    def of(amount: str | float | int | Decimal) -> Money:
        """Convenient factory that coerces to Decimal safely."""
        try:
            return Money(Decimal(str(amount)))
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid money amount: {amount!r}") from exc

    @staticmethod
    def zero() -> Money:
        return Money(Decimal("0.00"))


@dataclass(frozen=True)
class Quantity:
    """A positive integer quantity.

    Enforces the invariant that you cannot order zero or negative items.
    """

    value: int

    def __post_init__(self) -> None:
        if not isinstance(self.value, int):
            raise ValidationError(
                f"Quantity must be an integer, got {type(self.value).__name__}"
            )
        if self.value <= 0:
            raise ValidationError("Quantity must be positive")

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class ShippingAddress:
    full_name: str = ""
    street: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    phone: str = ""
    country: str = "USA"

    def missing_fields(self) -> list[str]:
        """Names of required fields that are empty or whitespace."""
        return [
            f.name
            for f in fields(self)
            if not (getattr(self, f.name) or "").strip()
        ]

    def __str__(self) -> str:
        return (
            f"{self.full_name}, {self.street}, {self.city}, "
            f"{self.state} {self.zip_code}, {self.country}"
        )


PAYMENT_TYPES = ("card", "cod", "paypal", "stripe")


@dataclass(frozen=True)
class PaymentMethod:
    """Descriptor of how the customer intends to pay.

    No money moves here; the descriptor is stored on the order as given.
    """

    type: str | None
    card_last4: str | None = None
    card_brand: str | None = None
    payment_intent_id: str | None = None

    def validate(self) -> None:
        if not self.type or not self.type.strip():
            raise ConfigurationError("Payment method type is required")
        if self.type not in PAYMENT_TYPES:
            raise ConfigurationError(
                f"Unsupported payment method '{self.type}' "
                f"(expected one of: {', '.join(PAYMENT_TYPES)})"
            )
