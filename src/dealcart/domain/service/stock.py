"""Domain service: purchasable quantity bound.

The bound is advisory.  It gives the shopper immediate feedback and clamps
cart quantities; the order service re-checks and decrements stock
atomically at checkout.
"""

from __future__ import annotations

from dealcart.domain.model.product import Product


def max_quantity(product: Product, selected_size: str | None = None) -> int:
    """Return how many units of *product* (in *selected_size*) can be bought.

    Sized products need a size; a missing or unknown size yields 0, as does
    a size that is sold out.  Unsized products ignore *selected_size*.
    """
    if not product.has_sizes:
        return product.stock

    entry = product.find_size(selected_size)
    if entry is None:
        return 0
    return entry.stock
