"""Domain service: deal pricing.

Turns a product's base price and its (optional) deal into the unit price
a cart line is charged.  Pure arithmetic; the deal is only applied when it
is usable at the given instant.
"""

from __future__ import annotations

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

from dealcart.domain.exceptions import InvalidPriceInput
from dealcart.domain.model.deal import HUNDRED, Deal, DealKind
from dealcart.domain.model.value_objects import Money, PriceQuote
from dealcart.domain.service.deal_status import is_usable


def _round_percentage(value: Decimal) -> int:
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def compute_price(base_price: Money, deal: Deal | None, now: datetime) -> PriceQuote:
    """Price one unit of a product at instant *now*.

    - no deal, or deal not usable: full base price
    - PERCENTAGE and FLASH_SALE: ``base * value / 100`` off
    - FIXED_AMOUNT: ``value`` off, never more than the base price

    Raises InvalidPriceInput if *base_price* is not positive.
    """
    if base_price.amount <= 0:
        raise InvalidPriceInput(
            f"Base price must be greater than zero, got {base_price.amount}"
        )

    if deal is None or not is_usable(deal, now):
        return PriceQuote(
            unit_price=base_price,
            discount_amount=Money.zero(base_price.currency),
            discount_percentage=0,
        )

    if deal.kind is DealKind.FIXED_AMOUNT:
        discount = base_price.min(Money(deal.value, base_price.currency)).quantized()
        percentage = _round_percentage(discount.amount / base_price.amount * HUNDRED)
    else:
        # FLASH_SALE only differs from PERCENTAGE in its badge and window.
        discount = Money(base_price.amount * deal.value / HUNDRED, base_price.currency)
        discount = discount.quantized().min(base_price)
        percentage = _round_percentage(deal.value)

    return PriceQuote(
        unit_price=base_price - discount,
        discount_amount=discount,
        discount_percentage=percentage,
        applied_deal_id=deal.id,
    )
