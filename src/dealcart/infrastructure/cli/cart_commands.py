"""CLI commands for the Cart aggregate."""

from __future__ import annotations

import click

from dealcart.application.add_deal_item import AddDealItemHandler
from dealcart.application.add_item import AddItemHandler
from dealcart.application.clear_cart import ClearCartHandler
from dealcart.application.dto import CartChangeDTO, CartDTO
from dealcart.application.remove_item import RemoveItemHandler
from dealcart.application.revalidate_cart import RevalidateCartHandler
from dealcart.application.show_cart import ShowCartHandler
from dealcart.application.update_quantity import UpdateQuantityHandler
from dealcart.domain.exceptions import DomainException
from dealcart.infrastructure.bootstrap import (
    cart_repository,
    clock,
    default_session,
    product_repository,
)

session_option = click.option(
    "--session",
    default=default_session,
    show_default="$DEALCART_SESSION or 'default'",
    help="Cart session id.",
)


def _display_cart(dto: CartDTO) -> None:
    """Shared formatting for displaying a cart."""
    if not dto.items:
        click.echo("Cart is empty.")
        return

    click.echo(
        f"  {'Line':<10} {'Product':<20} {'Size':<5} {'Qty':>4} {'Price':>14} {'Total':>14}  State"
    )
    click.echo(f"  {'-'*80}")
    for item in dto.items:
        price = item.unit_price
        if item.discount_percentage:
            price = f"{price} -{item.discount_percentage}%"
        click.echo(
            f"  {item.line_id[:10]:<10} {item.product_name:<20} {item.size or '-':<5} "
            f"{item.quantity:>4} {price:>14} {item.line_total:>14}  {item.state}"
        )
    click.echo(f"  {'-'*80}")
    click.echo(f"  {'Items':<20} {dto.total_items:>10}")
    click.echo(f"  {'You save':<20} {dto.total_discount:>10}")
    click.echo(f"  {'Cart Total':<20} {dto.total_amount:>10}")
    if not dto.checkout_ready:
        click.echo("  Review the STALE lines before checking out.")


def _display_change(dto: CartChangeDTO) -> None:
    for message in dto.messages:
        click.echo(message)
    click.echo()
    _display_cart(dto.cart)


@click.command("add")
@session_option
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--quantity", default=1, show_default=True, type=int, help="Units to add.")
@click.option("--size", default=None, help="Size label, for products with sizes.")
def cart_add(session: str, product_id: str, quantity: int, size: str | None) -> None:
    """Add a product to the cart."""
    handler = AddItemHandler(
        cart_repo=cart_repository(),
        product_repo=product_repository(),
        clock=clock(),
    )

    try:
        dto = handler.handle(session, product_id, quantity, size)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_change(dto)


@click.command("add-deal")
@session_option
@click.option("--deal", "deal_id", required=True, help="Deal ID.")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--quantity", default=1, show_default=True, type=int, help="Units to add.")
@click.option("--size", default=None, help="Size label, for products with sizes.")
def cart_add_deal(
    session: str, deal_id: str, product_id: str, quantity: int, size: str | None
) -> None:
    """Add a product at its deal price (the deal must be active)."""
    handler = AddDealItemHandler(
        cart_repo=cart_repository(),
        product_repo=product_repository(),
        clock=clock(),
    )

    try:
        dto = handler.handle(session, deal_id, product_id, quantity, size)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_change(dto)


@click.command("update")
@session_option
@click.option("--line", "line_id", required=True, help="Cart line ID.")
@click.option("--quantity", required=True, type=int, help="New quantity (0 removes).")
def cart_update(session: str, line_id: str, quantity: int) -> None:
    """Change a line's quantity (clamped to available stock)."""
    handler = UpdateQuantityHandler(
        cart_repo=cart_repository(),
        product_repo=product_repository(),
        clock=clock(),
    )

    try:
        dto = handler.handle(session, line_id, quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_change(dto)


@click.command("remove")
@session_option
@click.option("--line", "line_id", required=True, help="Cart line ID.")
def cart_remove(session: str, line_id: str) -> None:
    """Remove a line from the cart."""
    handler = RemoveItemHandler(cart_repo=cart_repository())

    try:
        dto = handler.handle(session, line_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_change(dto)


@click.command("clear")
@session_option
def cart_clear(session: str) -> None:
    """Remove every line from the cart."""
    dto = ClearCartHandler(cart_repo=cart_repository()).handle(session)
    click.echo(f"Cart cleared ({len(dto.messages)} lines removed).")


@click.command("revalidate")
@session_option
def cart_revalidate(session: str) -> None:
    """Re-check every line against the current products and deals."""
    handler = RevalidateCartHandler(
        cart_repo=cart_repository(),
        product_repo=product_repository(),
        clock=clock(),
    )

    try:
        dto = handler.handle(session)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not dto.messages:
        click.echo("Cart is up to date.")
        click.echo()
    _display_change(dto)


@click.command("show")
@session_option
def cart_show(session: str) -> None:
    """Show the cart as last saved."""
    dto = ShowCartHandler(cart_repo=cart_repository()).handle(session)
    _display_cart(dto)
