"""CLI commands for checkout and the Order aggregate."""

from __future__ import annotations

from datetime import datetime

import click

from bookstore.application.advance_order import AdvanceOrderHandler
from bookstore.application.cancel_order import CancelOrderHandler
from bookstore.application.create_order import CreateOrderHandler, ResumeCheckoutHandler
from bookstore.application.dto import OrderDTO
from bookstore.application.list_orders import ListOrdersHandler, OrderSummaryHandler
from bookstore.application.ship_order import ShipOrderHandler
from bookstore.application.show_order import ShowOrderHandler
from bookstore.domain.exceptions import DomainException
from bookstore.domain.model.value_objects import (
    PAYMENT_TYPES,
    PaymentMethod,
    ShippingAddress,
)
from bookstore.infrastructure.bootstrap import (
    book_repository,
    cart_repository,
    order_repository,
)


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order #{dto.id}  (status={dto.status})")
    click.echo(f"User:     {dto.user_id}")
    click.echo(f"Created:  {dto.created_at}")
    click.echo(f"Ship to:  {dto.shipping_address}")
    click.echo(f"Payment:  {dto.payment_type}")
    if dto.tracking_number:
        click.echo(f"Tracking: {dto.tracking_number}")
    if dto.cancellation_reason:
        click.echo(f"Reason:   {dto.cancellation_reason}")
    if not dto.stock_committed and dto.status == "pending":
        click.echo("Warning:  stock not fully committed; run 'order resume'.")
    click.echo()

    click.echo(f"  {'Title':<28} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*56}")
    for item in dto.items:
        click.echo(
            f"  {item.title[:28]:<28} {item.quantity:>5} {item.unit_price:>10} {item.line_total:>10}"
        )
    click.echo(f"  {'-'*56}")
    click.echo(f"  {'Subtotal':<35} {dto.pricing.subtotal:>20}")
    click.echo(f"  {'Tax':<35} {dto.pricing.tax:>20}")
    click.echo(f"  {'Shipping':<35} {dto.pricing.shipping:>20}")
    click.echo(f"  {'Order Total':<35} {dto.pricing.total:>20}")


@click.command("checkout")
@click.option("--user", required=True, help="User ID whose cart is checked out.")
@click.option("--name", "full_name", required=True, help="Recipient full name.")
@click.option("--street", required=True)
@click.option("--city", required=True)
@click.option("--state", required=True)
@click.option("--zip", "zip_code", required=True, help="ZIP code.")
@click.option("--phone", required=True)
@click.option("--country", default="USA", show_default=True)
@click.option("--payment", required=True, type=click.Choice(PAYMENT_TYPES), help="Payment method.")
@click.option("--card-last4", default=None)
@click.option("--card-brand", default=None)
@click.option("--notes", default=None)
def order_checkout(
    user: str,
    full_name: str,
    street: str,
    city: str,
    state: str,
    zip_code: str,
    phone: str,
    country: str,
    payment: str,
    card_last4: str | None,
    card_brand: str | None,
    notes: str | None,
) -> None:
    """Turn a user's cart into a pending order."""
    handler = CreateOrderHandler(
        order_repo=order_repository(),
        book_repo=book_repository(),
        cart_repo=cart_repository(),
    )
    address = ShippingAddress(
        full_name=full_name,
        street=street,
        city=city,
        state=state,
        zip_code=zip_code,
        phone=phone,
        country=country,
    )
    method = PaymentMethod(type=payment, card_last4=card_last4, card_brand=card_brand)

    try:
        dto = handler.handle(user, address, method, notes=notes)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{dto.id} created.")
    _display_order(dto)


@click.command("show")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to display.")
@click.option("--user", required=True, help="User ID owning the order.")
def order_show(order_id: int, user: str) -> None:
    """Show details of an existing order."""
    handler = ShowOrderHandler(order_repo=order_repository())

    try:
        dto = handler.handle(order_id, user)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)


@click.command("list")
@click.option("--user", required=True, help="User ID.")
@click.option("--status", default=None, help="Only orders in this status.")
def order_list(user: str, status: str | None) -> None:
    """List a user's orders, newest first."""
    handler = ListOrdersHandler(order_repo=order_repository())

    try:
        orders = handler.handle(user, status)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not orders:
        click.echo("No orders found.")
        return

    click.echo(f"{'ID':<6} {'Created':<22} {'Status':<12} {'Items':>5} {'Total':>10}")
    click.echo("-" * 59)
    for dto in orders:
        count = sum(item.quantity for item in dto.items)
        click.echo(
            f"{dto.id:<6} {dto.created_at:<22} {dto.status:<12} {count:>5} {dto.pricing.total:>10}"
        )


@click.command("summary")
@click.option("--user", required=True, help="User ID.")
def order_summary(user: str) -> None:
    """Show order statistics for a user."""
    summary = OrderSummaryHandler(order_repo=order_repository()).handle(user)

    click.echo(f"Orders:        {summary.total_orders}")
    click.echo(f"Total spent:   {summary.total_spent}")
    click.echo(f"Average order: {summary.average_order_value}")
    for status, count in sorted(summary.status_counts.items()):
        click.echo(f"  {status:<12} {count:>4}")


@click.command("cancel")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to cancel.")
@click.option("--user", required=True, help="User ID owning the order.")
@click.option("--reason", default=None, help="Why the order is cancelled.")
def order_cancel(order_id: int, user: str, reason: str | None) -> None:
    """Cancel a pending or confirmed order (restores stock)."""
    handler = CancelOrderHandler(
        order_repo=order_repository(),
        book_repo=book_repository(),
    )

    try:
        handler.handle(order_id, user, reason)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{order_id} cancelled, stock restored.")


@click.command("resume")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to resume.")
@click.option("--user", required=True, help="User ID owning the order.")
def order_resume(order_id: int, user: str) -> None:
    """Finish an interrupted checkout (safe to repeat)."""
    handler = ResumeCheckoutHandler(
        order_repo=order_repository(),
        book_repo=book_repository(),
        cart_repo=cart_repository(),
    )

    try:
        handler.handle(order_id, user)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{order_id} stock committed.")


@click.command("ship")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to ship.")
@click.option("--tracking", "tracking_number", required=True, help="Tracking number.")
@click.option("--tracking-url", default=None)
@click.option(
    "--eta", "estimated_delivery", default=None,
    type=click.DateTime(formats=["%Y-%m-%d"]), help="Estimated delivery date.",
)
def order_ship(
    order_id: int,
    tracking_number: str,
    tracking_url: str | None,
    estimated_delivery: datetime | None,
) -> None:
    """Record tracking details and mark an order shipped."""
    handler = ShipOrderHandler(
        order_repo=order_repository(),
        book_repo=book_repository(),
    )

    try:
        handler.handle(order_id, tracking_number, tracking_url, estimated_delivery)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{order_id} shipped with tracking {tracking_number}.")


@click.command("advance")
@click.option("--id", "order_id", required=True, type=int, help="Order ID.")
@click.option(
    "--status", required=True,
    type=click.Choice(["confirmed", "processing", "delivered", "refunded"]),
    help="Status to move to.",
)
def order_advance(order_id: int, status: str) -> None:
    """Move an order to its next status."""
    handler = AdvanceOrderHandler(
        order_repo=order_repository(),
        book_repo=book_repository(),
    )

    try:
        dto = handler.handle(order_id, status)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{order_id} is now {dto.status}.")
