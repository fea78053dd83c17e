"""Application service: Create Order (checkout) use case.

Turns the user's cart into a pending order. Cart, stock and ledger live
in separate documents with no shared transaction, so the commit is a
saga keyed by the order id:

  a. snapshot every cart line (title, author, price, image)
  b. persist the order as PENDING, ``stock_committed=False``
  c. atomically decrement stock per line, then mark the order committed
  d. clear the cart

A failure in (b) leaves nothing behind. A lost stock race in (c) is
unwound here: stock already taken is handed back and the order is
cancelled. Any other failure in (c) leaves a pending, uncommitted order
that ``ResumeCheckoutHandler`` can finish, because decrements are
idempotent per order id. A failure in (d) is logged and ignored; the
order is already correct.
"""

from __future__ import annotations

import logging

from bookstore.application.dto import OrderDTO
from bookstore.application.mapping import order_to_dto
from bookstore.domain.exceptions import (
    EmptyCartError,
    EntityNotFoundError,
    InsufficientStockError,
    ValidationError,
)
from bookstore.domain.model.order import Order, OrderLine, OrderStatus
from bookstore.domain.model.value_objects import PaymentMethod, ShippingAddress
from bookstore.domain.repository.book_repository import BookRepository
from bookstore.domain.repository.cart_repository import CartRepository
from bookstore.domain.repository.order_repository import OrderRepository
from bookstore.domain.service.stock_reservation_service import (
    StockReservationService,
)

logger = logging.getLogger(__name__)

LOST_RACE_REASON = "Insufficient stock at checkout"


class CreateOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        book_repo: BookRepository,
        cart_repo: CartRepository,
    ) -> None:
        self._order_repo = order_repo
        self._book_repo = book_repo
        self._cart_repo = cart_repo

    def handle(
        self,
        user_id: str,
        shipping_address: ShippingAddress,
        payment_method: PaymentMethod,
        billing_address: ShippingAddress | None = None,
        notes: str | None = None,
    ) -> OrderDTO:
        """Check out *user_id*'s cart.

        Validation happens in a fixed order: empty cart, then every
        line against current stock, then payment and address data.
        Nothing is written until all of it passes.
        """
        cart = self._cart_repo.get_by_owner(user_id)
        if cart is None or cart.is_empty:
            raise EmptyCartError(user_id)

        svc = StockReservationService(self._book_repo)
        resolved = svc.check_availability(cart)

        # (a) snapshot at today's prices
        lines = [OrderLine.snapshot(book, line.quantity) for line, book in resolved]

        # Payment/address problems surface in create(), before any write
        order = Order.create(
            order_id=self._order_repo.next_id(),
            user_id=user_id,
            items=lines,
            shipping_address=shipping_address,
            payment_method=payment_method,
            billing_address=billing_address,
            notes=notes,
        )

        # (b) persist as pending under its idempotency key
        self._order_repo.save(order)
        logger.info(
            "Order #%s recorded for %s (total %s)", order.id, user_id, order.total
        )

        # (c) take stock
        try:
            svc.commit_for_order(order)
        except InsufficientStockError:
            logger.warning(
                "Order #%s lost a stock race; stock restored and order cancelled",
                order.id,
            )
            order.cancel(LOST_RACE_REASON)
            self._order_repo.save(order)
            raise
        order.mark_stock_committed()
        self._order_repo.save(order)

        # (d) empty the cart
        _clear_cart(self._cart_repo, user_id, order.id)  # type: ignore[arg-type]

        return order_to_dto(order)


class ResumeCheckoutHandler:
    """Finish a checkout whose stock step was interrupted.

    Re-runs steps (c) and (d) for a PENDING order that is not yet marked
    committed. Books that already gave stock to this order are skipped by
    the store, so only the missing decrements happen.
    """

    def __init__(
        self,
        order_repo: OrderRepository,
        book_repo: BookRepository,
        cart_repo: CartRepository,
    ) -> None:
        self._order_repo = order_repo
        self._book_repo = book_repo
        self._cart_repo = cart_repo

    def handle(self, order_id: int, user_id: str) -> OrderDTO:
        order = self._order_repo.find_for_user(order_id, user_id)
        if order is None:
            raise EntityNotFoundError(f"Order #{order_id} not found")
        if order.stock_committed:
            return order_to_dto(order)
        if order.status != OrderStatus.PENDING:
            raise ValidationError(
                f"Cannot resume checkout for order in {order.status.value} status"
            )

        svc = StockReservationService(self._book_repo)
        try:
            svc.commit_for_order(order)
        except InsufficientStockError:
            logger.warning("Resumed order #%s could not get stock; cancelling", order_id)
            order.cancel(LOST_RACE_REASON)
            self._order_repo.save(order)
            raise
        order.mark_stock_committed()
        self._order_repo.save(order)
        logger.info("Order #%s checkout resumed and committed", order_id)

        # The cart may have changed since the crash; take out only what was ordered
        _clear_cart(
            self._cart_repo, user_id, order_id,
            book_ids=[line.book_id for line in order.items],
        )
        return order_to_dto(order)


def _clear_cart(
    cart_repo: CartRepository,
    owner_key: str,
    order_id: int,
    book_ids: list[str] | None = None,
) -> None:
    """Step (d). The order already stands, so a failure here is only logged.

    With *book_ids* only those lines are removed; otherwise the cart is
    emptied.
    """
    try:
        cart = cart_repo.get_by_owner(owner_key)
        if cart is not None:
            if book_ids is None:
                cart.clear()
            else:
                for book_id in book_ids:
                    cart.remove_item(book_id)
            cart.touch()
            cart_repo.save(cart)
    except OSError:
        logger.warning(
            "Order #%s committed but cart %s could not be cleared",
            order_id, owner_key, exc_info=True,
        )
