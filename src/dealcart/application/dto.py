"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CartLineDTO:
    """Output: a single cart line as displayed to the user."""

    line_id: str
    product_id: str
    product_name: str
    size: str | None
    quantity: int
    unit_price: str  # formatted, e.g. "Rp80,000"
    base_price: str
    discount_percentage: int
    line_total: str
    state: str
    deal_id: str | None
    stale_reasons: list[str]
    requested_quantity: int | None


@dataclass(frozen=True)
class CartDTO:
    """Output: a complete cart as displayed to the user."""

    session_id: str
    items: list[CartLineDTO]
    total_items: int
    total_amount: str
    total_discount: str
    checkout_ready: bool


@dataclass(frozen=True)
class CartChangeDTO:
    """Output: the cart after a mutation plus one message per line transition."""

    cart: CartDTO
    messages: list[str]


@dataclass(frozen=True)
class SizeDTO:
    size: str
    stock: int


@dataclass(frozen=True)
class ProductDTO:
    id: str
    name: str
    base_price: str
    unit_price: str
    discount_percentage: int
    deal_title: str | None
    stock: int
    sizes: list[SizeDTO]


@dataclass(frozen=True)
class DealProductDTO:
    """A product covered by a deal, priced as of now."""

    product_id: str
    product_name: str
    original_price: str
    discounted_price: str
    discount_amount: str
    discount_percentage: int


@dataclass(frozen=True)
class DealDTO:
    id: str
    title: str
    kind: str
    value: str
    declared_status: str
    effective_status: str
    is_flash_sale: bool
    time_remaining: str
    uses_remaining: int | None
    products: list[DealProductDTO]
