"""Order pricing, computed once at checkout and frozen into the order."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from bookstore.domain.model.value_objects import Money

TAX_RATE = Decimal("0.08")
FREE_SHIPPING_OVER = Money(Decimal("50.00"))
FLAT_SHIPPING = Money(Decimal("9.99"))


@dataclass(frozen=True)
class PricingBreakdown:
    subtotal: Money
    tax: Money
    shipping: Money
    discount: Money
    total: Money

    @staticmethod
    def for_subtotal(subtotal: Money, discount: Money | None = None) -> PricingBreakdown:
        """Derive tax, shipping and total from a subtotal.

        Shipping is free only when the subtotal is strictly above the
        threshold; exactly $50.00 still pays the flat rate.
        """
        discount = discount or Money.zero()
        tax = subtotal.at_rate(TAX_RATE)
        shipping = Money.zero() if subtotal > FREE_SHIPPING_OVER else FLAT_SHIPPING
        total = (subtotal + tax + shipping - discount).rounded()
        return PricingBreakdown(
            subtotal=subtotal.rounded(),
            tax=tax,
            shipping=shipping,
            discount=discount,
            total=total,
        )
