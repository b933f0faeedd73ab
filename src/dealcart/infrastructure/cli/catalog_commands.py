"""CLI commands for browsing products and deals."""

from __future__ import annotations

import click

from dealcart.application.list_deals import ListDealsHandler
from dealcart.application.list_products import ListProductsHandler
from dealcart.application.show_deal import ShowDealHandler
from dealcart.domain.exceptions import DomainException
from dealcart.domain.model.deal import DealStatus
from dealcart.infrastructure.bootstrap import clock, product_repository


@click.command("list")
def product_list() -> None:
    """List all products with their current price."""
    handler = ListProductsHandler(product_repo=product_repository(), clock=clock())

    try:
        products = handler.handle()
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<6} {'Name':<20} {'Price':>14} {'Now':>14} {'Stock':>6}  Sizes")
    click.echo("-" * 76)
    for p in products:
        sizes = ", ".join(f"{s.size}:{s.stock}" for s in p.sizes) or "-"
        click.echo(
            f"{p.id:<6} {p.name:<20} {p.base_price:>14} {p.unit_price:>14} {p.stock:>6}  {sizes}"
        )


@click.command("show")
@click.option("--id", "deal_id", required=True, help="Deal ID to display.")
def deal_show(deal_id: str) -> None:
    """Show a deal's effective status and the prices it gives."""
    handler = ShowDealHandler(product_repo=product_repository(), clock=clock())

    try:
        dto = handler.handle(deal_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    badge = "  [FLASH SALE]" if dto.is_flash_sale else ""
    click.echo(f"Deal {dto.id}: {dto.title}{badge}")
    click.echo(f"Type:      {dto.kind} ({dto.value})")
    click.echo(f"Status:    {dto.effective_status} (stored {dto.declared_status})")
    click.echo(f"Ends in:   {dto.time_remaining}")
    if dto.uses_remaining is not None:
        click.echo(f"Uses left: {dto.uses_remaining}")
    click.echo()
    for p in dto.products:
        click.echo(
            f"  {p.product_name:<20} {p.original_price:>14} -> {p.discounted_price:>14}"
            f"  (-{p.discount_percentage}%)"
        )


@click.command("list")
@click.option(
    "--status",
    type=click.Choice([s.value for s in DealStatus], case_sensitive=False),
    default=None,
    help="Only deals with this effective status.",
)
@click.option(
    "--flash-sale/--no-flash-sale",
    default=None,
    help="Only flash sales, or only regular deals.",
)
def deal_list(status: str | None, flash_sale: bool | None) -> None:
    """List deals with their effective status, soonest-ending first."""
    handler = ListDealsHandler(product_repo=product_repository(), clock=clock())

    try:
        deals = handler.handle(
            status=DealStatus(status.upper()) if status else None,
            flash_sale=flash_sale,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not deals:
        click.echo("No deals found.")
        return

    click.echo(f"{'ID':<14} {'Title':<24} {'Type':<13} {'Status':<9} {'Ends in':>12}  Products")
    click.echo("-" * 90)
    for d in deals:
        title = f"{d.title} [FLASH]" if d.is_flash_sale else d.title
        names = ", ".join(p.product_name for p in d.products) or "-"
        click.echo(
            f"{d.id:<14} {title:<24} {d.kind:<13} {d.effective_status:<9} "
            f"{d.time_remaining:>12}  {names}"
        )
