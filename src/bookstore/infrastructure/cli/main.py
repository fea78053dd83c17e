import click

from bookstore.infrastructure.bootstrap import settings
from bookstore.infrastructure.cli.book_commands import book_list, book_seed
from bookstore.infrastructure.cli.cart_commands import (
    cart_add,
    cart_clear,
    cart_merge,
    cart_remove,
    cart_show,
    cart_update,
)
from bookstore.infrastructure.cli.order_commands import (
    order_advance,
    order_cancel,
    order_checkout,
    order_list,
    order_resume,
    order_ship,
    order_show,
    order_summary,
)
from bookstore.infrastructure.logging_config import setup_logging


@click.group()
@click.option("--log-level", default=None, help="Override BOOKSTORE_LOG_LEVEL.")
def cli(log_level: str | None) -> None:
    """Bookstore carts, checkout and orders."""
    try:
        current = settings()
    except ValueError as exc:
        raise click.ClickException(str(exc))
    setup_logging(log_level or current.log_level)


@cli.group()
def book() -> None:
    """Inspect and seed the catalog."""


@cli.group()
def cart() -> None:
    """Manage a shopping cart."""


@cli.group()
def order() -> None:
    """Check out and manage orders."""


# Register subcommands
book.add_command(book_list)
book.add_command(book_seed)
cart.add_command(cart_add)
cart.add_command(cart_clear)
cart.add_command(cart_merge)
cart.add_command(cart_remove)
cart.add_command(cart_show)
cart.add_command(cart_update)
order.add_command(order_advance)
order.add_command(order_cancel)
order.add_command(order_checkout)
order.add_command(order_list)
order.add_command(order_resume)
order.add_command(order_ship)
order.add_command(order_show)
order.add_command(order_summary)
