"""Unit tests for domain value objects."""

from decimal import Decimal

import pytest

from bookstore.domain.exceptions import ConfigurationError, ValidationError
from bookstore.domain.model.value_objects import (
    Money,
    PaymentMethod,
    Quantity,
    ShippingAddress,
)


# ── Money ────────────────────────────────────────────────────────────────────


class TestMoney:

    def test_creation(self):
        m = Money(Decimal("10.50"))
        assert m.amount == Decimal("10.50")
        assert m.currency == "USD"

    def test_of_factory_from_string(self):
        assert Money.of("25.99").amount == Decimal("25.99")

    def test_of_factory_rejects_garbage(self):
        with pytest.raises(ValidationError, match="Invalid money amount"):
            Money.of("twelve")

    def test_negative_amount_rejected(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            Money(Decimal("-1"))

    def test_float_amount_rejected(self):
        with pytest.raises(ValidationError, match="must be a Decimal"):
            Money(10.5)  # type: ignore[arg-type]

    def test_addition_and_multiplication(self):
        assert Money.of("7.50") * 3 + Money.of("1") == Money.of("23.50")

    def test_subtraction_going_negative_rejected(self):
        with pytest.raises(ValidationError, match="negative amount"):
            Money.of("5") - Money.of("10")

    def test_currency_mismatch_rejected(self):
        with pytest.raises(ValidationError, match="Cannot combine"):
            Money(Decimal("10"), "USD") + Money(Decimal("5"), "EUR")

    def test_at_rate_rounds_half_up_to_cents(self):
        assert Money.of("1.5625").at_rate(Decimal("0.08")) == Money.of("0.13")
        assert Money.of("70").at_rate(Decimal("0.08")) == Money.of("5.60")

    def test_str_formatting(self):
        assert str(Money.of("15")) == "$15.00"
        assert str(Money.of("9.5")) == "$9.50"

    def test_comparison_operators(self):
        assert Money.of("5") < Money.of("10")
        assert Money.of("10") > Money.of("5")
        assert Money.of("10") >= Money.of("10")


# ── Quantity ─────────────────────────────────────────────────────────────────


class TestQuantity:

    def test_valid_quantity(self):
        assert Quantity(5).value == 5

    def test_zero_rejected(self):
        with pytest.raises(ValidationError, match="must be positive"):
            Quantity(0)


# ── Address / payment ────────────────────────────────────────────────────────


class TestShippingAddress:

    def test_complete_address_has_no_missing_fields(self):
        address = ShippingAddress(
            full_name="Ada Lovelace", street="12 Analytical Way", city="London",
            state="LN", zip_code="10001", phone="+1 555 0100",
        )
        assert address.missing_fields() == []

    def test_blank_fields_reported(self):
        address = ShippingAddress(full_name="Ada", street="   ", city="London")
        assert address.missing_fields() == ["street", "state", "zip_code", "phone"]


class TestPaymentMethod:

    def test_known_type_passes(self):
        PaymentMethod(type="card", card_last4="4242").validate()

    @pytest.mark.parametrize("value", [None, "", "  "])
    def test_missing_type_rejected(self, value):
        with pytest.raises(ConfigurationError, match="type is required"):
            PaymentMethod(type=value).validate()

    def test_unknown_type_rejected(self):
        with pytest.raises(ConfigurationError, match="Unsupported payment method"):
            PaymentMethod(type="barter").validate()
