"""CLI commands for the catalog."""

from __future__ import annotations

import json
from pathlib import Path

import click

from bookstore.application.seed_catalog import SeedCatalogHandler
from bookstore.domain.exceptions import DomainException
from bookstore.infrastructure.bootstrap import book_repository


@click.command("seed")
@click.option(
    "--file", "file_path", required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="JSON list of book records.",
)
def book_seed(file_path: Path) -> None:
    """Load books from a JSON file into the catalog."""
    try:
        records = json.loads(file_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise click.ClickException(f"Invalid JSON in {file_path}: {exc}")

    handler = SeedCatalogHandler(book_repo=book_repository())
    try:
        books = handler.handle(records)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Seeded {len(books)} books.")


@click.command("list")
def book_list() -> None:
    """List all books with price and stock."""
    books = book_repository().list_all()

    if not books:
        click.echo("No books found.")
        return

    click.echo(f"{'ID':<6} {'Title':<30} {'Price':>10} {'Stock':>6}  Status")
    click.echo("-" * 64)
    for b in books:
        status = "active" if b.is_active else "inactive"
        click.echo(
            f"{b.id:<6} {b.title[:30]:<30} {str(b.price):>10} {b.stock:>6}  {status}"
        )
