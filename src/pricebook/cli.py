"""Command line interface for managing the product catalog.

Examples:
    pricebook init-db
    pricebook add 8000500310427 "Kinder Kinderini 100g" 7.56 --weight 100g
    pricebook set-rate 90000
"""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import NoReturn

import typer
from rich.console import Console
from rich.table import Table

from src.pricebook.core.exceptions import PricebookError
from src.pricebook.core.services import DbSessionService, PricingEngine
from src.pricebook.entities.service.product import ProductRepository
from src.pricebook.runtime.context import get_config
from src.pricebook.runtime.init_db import init_db

console = Console()

app = typer.Typer(
    name="pricebook",
    help="Pricebook CLI - manage products and the exchange rate",
    rich_markup_mode="rich",
)


@contextmanager
def _store() -> Iterator[tuple[ProductRepository, PricingEngine]]:
    pricing = PricingEngine(get_config().pricing.default_exchange_rate)
    with DbSessionService().session_scope() as session:
        yield ProductRepository(session, pricing), pricing


def _fail(error: PricebookError) -> NoReturn:
    console.print(f"[red]✗ {error}[/red]")
    raise typer.Exit(code=1)


@app.command("init-db")
def init_db_command(
    seed: bool = typer.Option(True, "--seed/--no-seed", help="Insert the configured seed products"),
) -> None:
    """Create the database tables."""
    seeded = init_db(seed=seed)
    console.print(f"[green]✓[/green] Database ready ({seeded} products seeded)")


@app.command("list")
def list_command() -> None:
    """Show every product, newest first."""
    pricing_config = get_config().pricing
    with _store() as (store, _):
        products = store.list_all()

    table = Table(title="Products")
    table.add_column("Barcode", style="cyan")
    table.add_column("Name")
    table.add_column("Weight")
    table.add_column(pricing_config.reference_currency, justify="right")
    table.add_column(pricing_config.secondary_currency, justify="right")
    table.add_column("Rate", justify="right")
    for product in products:
        table.add_row(
            product.barcode,
            product.name,
            product.weight,
            f"{product.price_reference:.2f}",
            f"{product.price_converted:,}",
            f"{product.exchange_rate:g}",
        )
    console.print(table)


@app.command("add")
def add_command(
    barcode: str = typer.Argument(..., help="Product barcode"),
    name: str = typer.Argument(..., help="Product name"),
    price: float = typer.Argument(..., help="Price in the reference currency"),
    weight: str = typer.Option("", "--weight", "-w", help="Free-form weight, e.g. 100g"),
    rate: float | None = typer.Option(None, "--rate", "-r", help="Exchange rate (defaults to configured rate)"),
) -> None:
    """Add a product."""
    try:
        with _store() as (store, _):
            product = store.create(barcode, name, price, weight=weight, exchange_rate=rate)
    except PricebookError as e:
        _fail(e)
    console.print(
        f"[green]✓[/green] Added {product.barcode} {product.name}: "
        f"{product.price_reference} -> {product.price_converted:,}"
    )


@app.command("set-rate")
def set_rate_command(
    rate: float = typer.Argument(..., help="New exchange rate applied to every product"),
) -> None:
    """Reprice every product under a new exchange rate."""
    try:
        with _store() as (store, pricing):
            updated = pricing.update_exchange_rate_for_all(store, rate)
    except PricebookError as e:
        _fail(e)
    console.print(f"[green]✓[/green] Repriced {updated} products at {rate:g}")


if __name__ == "__main__":
    app()
