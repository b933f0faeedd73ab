import logging

import click

from dealcart.infrastructure.cli.cart_commands import (
    cart_add,
    cart_add_deal,
    cart_clear,
    cart_remove,
    cart_revalidate,
    cart_show,
    cart_update,
)
from dealcart.infrastructure.cli.catalog_commands import deal_list, deal_show, product_list


@click.group()
@click.option("-v", "--verbose", is_flag=True, default=False, help="Log line transitions.")
def cli(verbose: bool) -> None:
    """dealcart — deal pricing and cart reconciliation"""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.group()
def cart() -> None:
    """Manage the shopping cart."""


@cli.group()
def product() -> None:
    """Browse products."""


@cli.group()
def deal() -> None:
    """Inspect deals."""


# Register subcommands
cart.add_command(cart_add)
cart.add_command(cart_add_deal)
cart.add_command(cart_update)
cart.add_command(cart_remove)
cart.add_command(cart_clear)
cart.add_command(cart_revalidate)
cart.add_command(cart_show)
product.add_command(product_list)
deal.add_command(deal_list)
deal.add_command(deal_show)
