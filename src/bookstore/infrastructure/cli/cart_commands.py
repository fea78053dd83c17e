"""CLI commands for the Cart aggregate."""

from __future__ import annotations

import click

from bookstore.application.add_to_cart import AddToCartHandler
from bookstore.application.clear_cart import ClearCartHandler
from bookstore.application.dto import CartDTO
from bookstore.application.merge_guest_cart import MergeGuestCartHandler
from bookstore.application.remove_from_cart import RemoveFromCartHandler
from bookstore.application.show_cart import ShowCartHandler
from bookstore.application.update_cart_item import UpdateCartItemHandler
from bookstore.domain.exceptions import DomainException
from bookstore.domain.model.cart import MAX_LINE_QUANTITY, guest_owner_key
from bookstore.infrastructure.bootstrap import book_repository, cart_repository


def _with_owner(func):
    """Add the --user / --guest pair that identifies a cart."""
    func = click.option("--guest", default=None, help="Guest session ID owning the cart.")(func)
    func = click.option("--user", default=None, help="User ID owning the cart.")(func)
    return func


def _owner_key(user: str | None, guest: str | None) -> str:
    if bool(user) == bool(guest):
        raise click.UsageError("Give exactly one of --user or --guest.")
    return user if user else guest_owner_key(guest)  # type: ignore[arg-type]


def _display_cart(dto: CartDTO) -> None:
    """Shared formatting for displaying a cart."""
    if not dto.items:
        click.echo(f"Cart for {dto.owner_key} is empty.")
        return

    click.echo(f"Cart for {dto.owner_key}")
    click.echo()
    click.echo(f"  {'Book':<6} {'Title':<24} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*58}")
    for item in dto.items:
        click.echo(
            f"  {item.book_id:<6} {item.title[:24]:<24} {item.quantity:>5} "
            f"{item.unit_price:>10} {item.line_total:>10}"
        )
    click.echo(f"  {'-'*58}")
    click.echo(f"  {'Items':<31} {dto.total_items:>5} {dto.total_price:>21}")


@click.command("show")
@_with_owner
def cart_show(user: str | None, guest: str | None) -> None:
    """Show a cart with live prices."""
    handler = ShowCartHandler(cart_repo=cart_repository(), book_repo=book_repository())
    _display_cart(handler.handle(_owner_key(user, guest)))


@click.command("add")
@_with_owner
@click.option("--book", "book_id", required=True, help="Book ID.")
@click.option(
    "--quantity", default=1, show_default=True,
    type=click.IntRange(1, MAX_LINE_QUANTITY), help="How many to add.",
)
def cart_add(user: str | None, guest: str | None, book_id: str, quantity: int) -> None:
    """Add a book to a cart."""
    handler = AddToCartHandler(cart_repo=cart_repository(), book_repo=book_repository())

    try:
        dto = handler.handle(_owner_key(user, guest), book_id, quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_cart(dto)


@click.command("update")
@_with_owner
@click.option("--book", "book_id", required=True, help="Book ID.")
@click.option(
    "--quantity", required=True, type=click.IntRange(0, MAX_LINE_QUANTITY),
    help="New quantity (0 removes the book).",
)
def cart_update(user: str | None, guest: str | None, book_id: str, quantity: int) -> None:
    """Change the quantity of a book in a cart."""
    handler = UpdateCartItemHandler(
        cart_repo=cart_repository(), book_repo=book_repository()
    )

    try:
        dto = handler.handle(_owner_key(user, guest), book_id, quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_cart(dto)


@click.command("remove")
@_with_owner
@click.option("--book", "book_id", required=True, help="Book ID.")
def cart_remove(user: str | None, guest: str | None, book_id: str) -> None:
    """Remove a book from a cart."""
    handler = RemoveFromCartHandler(
        cart_repo=cart_repository(), book_repo=book_repository()
    )

    try:
        dto = handler.handle(_owner_key(user, guest), book_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_cart(dto)


@click.command("clear")
@_with_owner
def cart_clear(user: str | None, guest: str | None) -> None:
    """Empty a cart."""
    handler = ClearCartHandler(cart_repo=cart_repository(), book_repo=book_repository())

    try:
        handler.handle(_owner_key(user, guest))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo("Cart cleared.")


@click.command("merge")
@click.option("--user", required=True, help="User ID receiving the items.")
@click.option("--guest", required=True, help="Guest session ID to merge from.")
def cart_merge(user: str, guest: str) -> None:
    """Fold a guest cart into a user's cart after sign-in."""
    carts = cart_repository()
    handler = MergeGuestCartHandler(
        cart_repo=carts, book_repo=book_repository(), guest_cart_repo=carts
    )

    try:
        dto = handler.handle_session(user, guest_owner_key(guest))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_cart(dto)
