"""Domain -> DTO mapping shared by the use cases."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from dealcart.application.dto import (
    CartChangeDTO,
    CartDTO,
    CartLineDTO,
    DealDTO,
    DealProductDTO,
)
from dealcart.domain.model.cart import Cart, CartLine
from dealcart.domain.model.deal import Deal
from dealcart.domain.model.product import Product
from dealcart.domain.service.cart_reconciler import CartChange
from dealcart.domain.service.deal_status import effective_status, format_time_remaining
from dealcart.domain.service.pricing import compute_price


def line_to_dto(line: CartLine) -> CartLineDTO:
    return CartLineDTO(
        line_id=line.id,
        product_id=line.product_id,
        product_name=line.product_name,
        size=line.selected_size,
        quantity=line.quantity,
        unit_price=str(line.unit_price),
        base_price=str(line.quote.base_price),
        discount_percentage=line.quote.discount_percentage,
        line_total=str(line.line_total),
        state=line.state.value,
        deal_id=line.deal_id,
        stale_reasons=sorted(reason.value for reason in line.stale_reasons),
        requested_quantity=line.requested_quantity,
    )


def cart_to_dto(cart: Cart) -> CartDTO:
    totals = cart.totals
    return CartDTO(
        session_id=cart.session_id,
        items=[line_to_dto(line) for line in cart.lines],
        total_items=totals.total_items,
        total_amount=str(totals.total_amount),
        total_discount=str(totals.total_discount),
        checkout_ready=cart.is_checkout_ready,
    )


def change_to_dto(change: CartChange) -> CartChangeDTO:
    return CartChangeDTO(
        cart=cart_to_dto(change.cart),
        messages=[t.message for t in change.transitions],
    )


def deal_to_dto(deal: Deal, products: Iterable[Product], now: datetime) -> DealDTO:
    """Describe *deal* at *now*, pricing each product it covers."""
    covered: list[DealProductDTO] = []
    for product in products:
        if not deal.applies_to(product.id):
            continue
        quote = compute_price(product.base_price, deal, now)
        covered.append(
            DealProductDTO(
                product_id=product.id,
                product_name=product.name,
                original_price=str(product.base_price),
                discounted_price=str(quote.unit_price),
                discount_amount=str(quote.discount_amount),
                discount_percentage=quote.discount_percentage,
            )
        )

    return DealDTO(
        id=deal.id,
        title=deal.title,
        kind=deal.kind.value,
        value=str(deal.value),
        declared_status=deal.status.value,
        effective_status=effective_status(deal, now).value,
        is_flash_sale=deal.is_flash_sale,
        time_remaining=format_time_remaining(deal, now),
        uses_remaining=deal.uses_remaining,
        products=covered,
    )
