"""Domain -> DTO mapping shared by the cart and order use cases."""

from __future__ import annotations

from bookstore.application.dto import (
    CartDTO,
    CartLineDTO,
    OrderDTO,
    OrderLineDTO,
    PricingDTO,
)
from bookstore.domain.model.cart import Cart
from bookstore.domain.model.order import Order
from bookstore.domain.model.value_objects import Money
from bookstore.domain.repository.book_repository import BookRepository


def cart_to_dto(cart: Cart, book_repo: BookRepository) -> CartDTO:
    """Render a cart with *live* catalog prices.

    Lines whose book has vanished from the catalog are still listed, with
    a zero price, so the user can see and remove them.
    """
    items: list[CartLineDTO] = []
    prices: dict[str, Money] = {}
    for line in cart.lines:
        book = book_repo.get_by_id(line.book_id)
        if book is None:
            items.append(
                CartLineDTO(
                    book_id=line.book_id,
                    title="(unavailable)",
                    author="",
                    quantity=line.quantity,
                    unit_price=str(Money.zero()),
                    line_total=str(Money.zero()),
                )
            )
            continue
        prices[book.id] = book.price
        items.append(
            CartLineDTO(
                book_id=book.id,
                title=book.title,
                author=book.author,
                quantity=line.quantity,
                unit_price=str(book.price),
                line_total=str(book.price * line.quantity),
            )
        )
    return CartDTO(
        owner_key=cart.owner_key,
        items=items,
        total_items=cart.total_items,
        total_price=str(cart.total_price(prices)),
    )


def order_to_dto(order: Order) -> OrderDTO:
    tracking = order.tracking
    return OrderDTO(
        id=order.id,  # type: ignore[arg-type]
        user_id=order.user_id,
        status=order.status.value,
        items=[
            OrderLineDTO(
                book_id=item.book_id,
                title=item.title,
                author=item.author,
                quantity=item.quantity.value,
                unit_price=str(item.unit_price),
                line_total=str(item.line_total),
            )
            for item in order.items
        ],
        pricing=PricingDTO(
            subtotal=str(order.pricing.subtotal),
            tax=str(order.pricing.tax),
            shipping=str(order.pricing.shipping),
            discount=str(order.pricing.discount),
            total=str(order.pricing.total),
        ),
        shipping_address=str(order.shipping_address),
        payment_type=order.payment_method.type or "",
        created_at=order.created_at.strftime("%Y-%m-%d %H:%M UTC"),
        cancellation_reason=order.cancellation_reason,
        tracking_number=tracking.tracking_number if tracking else None,
        tracking_url=tracking.tracking_url if tracking else None,
        estimated_delivery=(
            tracking.estimated_delivery.strftime("%Y-%m-%d")
            if tracking and tracking.estimated_delivery
            else None
        ),
        stock_committed=order.stock_committed,
    )
