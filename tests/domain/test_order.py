"""Unit tests for the Order aggregate and its state machine."""

import pytest

from bookstore.domain.exceptions import (
    ConfigurationError,
    InvalidTransitionError,
    ValidationError,
)
from bookstore.domain.model.book import Book
from bookstore.domain.model.order import Order, OrderLine, OrderStatus, TrackingInfo
from bookstore.domain.model.value_objects import (
    Money,
    PaymentMethod,
    Quantity,
    ShippingAddress,
)

ADDRESS = ShippingAddress(
    full_name="Ada Lovelace", street="12 Analytical Way", city="London",
    state="LN", zip_code="10001", phone="+1 555 0100",
)
CARD = PaymentMethod(type="card", card_last4="4242", card_brand="visa")


def _make_item(title: str = "Dune", qty: int = 1, price: str = "20.00") -> OrderLine:
    """Helper to build a valid line snapshot."""
    return OrderLine(
        book_id="1",
        title=title,
        author="Frank Herbert",
        unit_price=Money.of(price),
        quantity=Quantity(qty),
    )


def _make_order(
    status: OrderStatus = OrderStatus.PENDING, committed: bool = True
) -> Order:
    order = Order.create(1, "alice", [_make_item()], ADDRESS, CARD)
    order.status = status
    order.stock_committed = committed
    return order


class TestOrderCreation:

    def test_happy_path(self):
        order = Order.create(
            1, "alice",
            [_make_item(qty=2, price="10.00"), _make_item("Emma", qty=1, price="50.00")],
            ADDRESS, CARD,
        )
        assert order.status == OrderStatus.PENDING
        assert order.pricing.subtotal == Money.of("70.00")
        assert order.pricing.tax == Money.of("5.60")
        assert order.pricing.shipping == Money.of("0")
        assert order.total == Money.of("75.60")
        assert order.stock_committed is False

    def test_billing_defaults_to_shipping(self):
        order = Order.create(1, "alice", [_make_item()], ADDRESS, CARD)
        assert order.billing_address == ADDRESS

    def test_no_items_rejected(self):
        with pytest.raises(ValidationError, match="at least one item"):
            Order.create(1, "alice", [], ADDRESS, CARD)

    def test_missing_payment_type_rejected(self):
        with pytest.raises(ConfigurationError, match="Payment method type"):
            Order.create(1, "alice", [_make_item()], ADDRESS, PaymentMethod(type=None))

    def test_incomplete_address_rejected(self):
        with pytest.raises(ConfigurationError, match="zip_code"):
            Order.create(
                1, "alice", [_make_item()],
                ShippingAddress(full_name="Ada", street="1 Way", city="X", state="Y", phone="1"),
                CARD,
            )


class TestOrderLineSnapshot:

    def test_snapshot_is_decoupled_from_book(self):
        book = Book(
            id="7", title="Emma", author="Jane Austen",
            price=Money.of("9.00"), stock=5, image_url="emma.jpg",
        )
        line = OrderLine.snapshot(book, 2)
        book.update_price(Money.of("99.00"))
        book.title = "Emma (Annotated)"

        assert line.unit_price == Money.of("9.00")
        assert line.title == "Emma"
        assert line.image_url == "emma.jpg"
        assert line.line_total == Money.of("18.00")


class TestCancel:

    @pytest.mark.parametrize("status", [OrderStatus.PENDING, OrderStatus.CONFIRMED])
    def test_cancel_from_early_status(self, status):
        order = _make_order(status)
        order.cancel("Changed my mind")
        assert order.status == OrderStatus.CANCELLED
        assert order.cancellation_reason == "Changed my mind"

    @pytest.mark.parametrize(
        "status",
        [
            OrderStatus.PROCESSING,
            OrderStatus.SHIPPED,
            OrderStatus.DELIVERED,
            OrderStatus.CANCELLED,
            OrderStatus.REFUNDED,
        ],
    )
    def test_cancel_from_later_status_rejected(self, status):
        order = _make_order(status)
        with pytest.raises(InvalidTransitionError) as exc_info:
            order.cancel()
        assert exc_info.value.from_status == status.value
        assert exc_info.value.to_status == "cancelled"
        assert order.status == status

    def test_overlong_reason_rejected(self):
        order = _make_order()
        with pytest.raises(ValidationError, match="at most 500"):
            order.cancel("x" * 501)
        assert order.status == OrderStatus.PENDING

    def test_reason_of_exactly_500_characters_accepted(self):
        order = _make_order()
        order.cancel("x" * 500)
        assert order.status == OrderStatus.CANCELLED


class TestLifecycle:

    def test_full_happy_path(self):
        order = _make_order()
        order.confirm()
        order.start_processing()
        order.mark_shipped(TrackingInfo(tracking_number="1Z999"))
        order.mark_delivered()
        assert order.status == OrderStatus.DELIVERED
        assert order.is_terminal
        assert order.tracking.tracking_number == "1Z999"

    def test_ship_requires_tracking_number(self):
        order = _make_order(OrderStatus.CONFIRMED)
        with pytest.raises(ValidationError, match="Tracking number"):
            order.mark_shipped(TrackingInfo(tracking_number=" "))
        assert order.status == OrderStatus.CONFIRMED

    def test_cannot_deliver_before_shipping(self):
        order = _make_order(OrderStatus.CONFIRMED)
        with pytest.raises(InvalidTransitionError):
            order.mark_delivered()

    def test_refund_after_shipping(self):
        order = _make_order(OrderStatus.SHIPPED)
        order.refund()
        assert order.status == OrderStatus.REFUNDED

    def test_pending_cannot_be_refunded(self):
        with pytest.raises(InvalidTransitionError):
            _make_order().refund()

    @pytest.mark.parametrize(
        "status", [OrderStatus.DELIVERED, OrderStatus.CANCELLED, OrderStatus.REFUNDED]
    )
    def test_terminal_states_go_nowhere(self, status):
        order = _make_order(status)
        assert order.is_terminal
        assert not any(order.can_transition_to(s) for s in OrderStatus)


class TestUncommittedStock:

    def test_only_cancellation_allowed(self):
        order = _make_order(committed=False)
        with pytest.raises(ValidationError, match="resume checkout first"):
            order.confirm()
        with pytest.raises(ValidationError, match="resume checkout first"):
            order.mark_shipped(TrackingInfo(tracking_number="1Z999"))
        assert order.status == OrderStatus.PENDING
        assert order.tracking is None

        order.cancel()
        assert order.status == OrderStatus.CANCELLED

    def test_illegal_move_still_reported_as_transition_error(self):
        with pytest.raises(InvalidTransitionError):
            _make_order(committed=False).refund()

    def test_cancellable_only_before_processing(self):
        assert _make_order(OrderStatus.CONFIRMED).is_cancellable
        assert not _make_order(OrderStatus.PROCESSING).is_cancellable
