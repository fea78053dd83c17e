"""Unit tests for checkout pricing."""

import pytest

from bookstore.domain.model.pricing import PricingBreakdown
from bookstore.domain.model.value_objects import Money


class TestPricingBreakdown:

    def test_free_shipping_scenario(self):
        pricing = PricingBreakdown.for_subtotal(Money.of("70.00"))
        assert pricing.tax == Money.of("5.60")
        assert pricing.shipping == Money.of("0")
        assert pricing.total == Money.of("75.60")

    def test_flat_shipping_scenario(self):
        pricing = PricingBreakdown.for_subtotal(Money.of("20.00"))
        assert pricing.tax == Money.of("1.60")
        assert pricing.shipping == Money.of("9.99")
        assert pricing.total == Money.of("31.59")

    def test_exactly_fifty_still_pays_shipping(self):
        pricing = PricingBreakdown.for_subtotal(Money.of("50.00"))
        assert pricing.shipping == Money.of("9.99")

    def test_just_over_fifty_ships_free(self):
        pricing = PricingBreakdown.for_subtotal(Money.of("50.01"))
        assert pricing.shipping == Money.of("0")

    @pytest.mark.parametrize("subtotal", ["0.01", "12.99", "33.33", "49.99", "123.45"])
    def test_total_is_sum_of_parts(self, subtotal):
        pricing = PricingBreakdown.for_subtotal(Money.of(subtotal))
        assert pricing.discount == Money.zero()
        assert pricing.total == pricing.subtotal + pricing.tax + pricing.shipping
