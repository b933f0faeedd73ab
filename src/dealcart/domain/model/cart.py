"""Cart aggregate — a session's ordered list of cart lines.

Cart and CartLine are immutable.  Every mutation produces a new Cart so the
lines and the totals derived from them can never disagree.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum

from dealcart.domain.exceptions import LineNotFound, ValidationError
from dealcart.domain.model.product import size_key
from dealcart.domain.model.value_objects import DEFAULT_CURRENCY, Money, PriceQuote


class LineState(Enum):
    DRAFT = "DRAFT"
    VALID = "VALID"
    STALE = "STALE"
    REMOVED = "REMOVED"


class StaleReason(Enum):
    STOCK_REDUCED = "STOCK_REDUCED"
    PRICE_CHANGED = "PRICE_CHANGED"
    DEAL_NOT_USABLE = "DEAL_NOT_USABLE"
    PRODUCT_UNAVAILABLE = "PRODUCT_UNAVAILABLE"


@dataclass(frozen=True)
class CartLine:
    """One product (+ size) entry in the cart with its price snapshot.

    ``quote`` is the price taken at the last validation.  ``deal_id`` is
    only set for lines added through a deal, so revalidation can tell that
    the deal the shopper picked has gone away.  ``requested_quantity``
    remembers what the shopper asked for when the quantity was clamped.
    """

    id: str
    product_id: str
    product_name: str
    quantity: int
    quote: PriceQuote
    selected_size: str | None = None
    deal_id: str | None = None
    state: LineState = LineState.DRAFT
    stale_reasons: frozenset[StaleReason] = field(default_factory=frozenset)
    requested_quantity: int | None = None

    def __post_init__(self) -> None:
        if not self.id:
            raise ValidationError("Cart line id is required")
        if not self.product_id:
            raise ValidationError("Cart line product id is required")
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int):
            raise ValidationError(
                f"Cart line quantity must be an integer, got {type(self.quantity).__name__}"
            )
        if self.quantity < 0:
            raise ValidationError(f"Cart line quantity cannot be negative, got {self.quantity}")
        # Only a clamped (STALE) or dropped line may hold nothing.
        if self.quantity == 0 and self.state not in (LineState.STALE, LineState.REMOVED):
            raise ValidationError(
                f"A {self.state.value} cart line must hold at least one unit"
            )
        object.__setattr__(self, "stale_reasons", frozenset(self.stale_reasons))

    @property
    def unit_price(self) -> Money:
        return self.quote.unit_price

    @property
    def line_total(self) -> Money:
        return self.quote.unit_price * self.quantity

    @property
    def line_discount(self) -> Money:
        return self.quote.discount_amount * self.quantity

    @property
    def is_stale(self) -> bool:
        return self.state is LineState.STALE

    @property
    def counts_toward_totals(self) -> bool:
        return self.state in (LineState.VALID, LineState.STALE)

    def matches(self, product_id: str, size: str | None, deal_id: str | None) -> bool:
        """True if an add of (product, size, deal) should merge into this line."""
        if self.product_id != product_id or self.deal_id != deal_id:
            return False
        return size_key(self.selected_size) == size_key(size)

    def with_state(self, state: LineState, **changes) -> CartLine:
        return replace(self, state=state, **changes)


@dataclass(frozen=True)
class CartTotals:
    total_items: int
    total_amount: Money
    total_discount: Money


def compute_totals(lines, currency: str = DEFAULT_CURRENCY) -> CartTotals:
    """Aggregate VALID and STALE lines.  STALE lines count at their clamped
    quantity.  Always derived from scratch; there is no running total."""
    items = 0
    amount = Money.zero(currency)
    discount = Money.zero(currency)
    for line in lines:
        if not line.counts_toward_totals:
            continue
        items += line.quantity
        amount = amount + line.line_total
        discount = discount + line.line_discount
    return CartTotals(total_items=items, total_amount=amount, total_discount=discount)


@dataclass(frozen=True)
class Cart:
    """Aggregate root for a shopper's in-progress cart.

    Lines are kept in insertion order for display.
    """

    session_id: str
    lines: tuple[CartLine, ...] = ()
    currency: str = DEFAULT_CURRENCY

    def __post_init__(self) -> None:
        object.__setattr__(self, "lines", tuple(self.lines))

    # --- Queries --------------------------------------------------------------

    @property
    def totals(self) -> CartTotals:
        return compute_totals(self.lines, self.currency)

    @property
    def is_empty(self) -> bool:
        return not self.lines

    @property
    def stale_lines(self) -> tuple[CartLine, ...]:
        return tuple(line for line in self.lines if line.is_stale)

    @property
    def is_checkout_ready(self) -> bool:
        """Non-empty and every line acknowledged by the shopper."""
        return bool(self.lines) and not self.stale_lines

    def get_line(self, line_id: str) -> CartLine:
        for line in self.lines:
            if line.id == line_id:
                return line
        raise LineNotFound(f"Cart line '{line_id}' not found")

    def find_line(self, product_id: str, size: str | None, deal_id: str | None) -> CartLine | None:
        for line in self.lines:
            if line.matches(product_id, size, deal_id):
                return line
        return None

    def is_in_cart(self, product_id: str) -> bool:
        return any(line.product_id == product_id for line in self.lines)

    def item_quantity(self, product_id: str) -> int:
        """Units of *product_id* across all of its lines (sizes, deals)."""
        return sum(line.quantity for line in self.lines if line.product_id == product_id)

    def units_held(
        self, product_id: str, size: str | None, exclude_line_id: str | None = None
    ) -> int:
        """Units of one product/size combination across lines, deal or not."""
        key = size_key(size)
        return sum(
            line.quantity
            for line in self.lines
            if line.id != exclude_line_id
            and line.product_id == product_id
            and size_key(line.selected_size) == key
        )

    # --- Next-state builders --------------------------------------------------

    def with_lines(self, lines) -> Cart:
        return replace(self, lines=tuple(lines))

    def with_line(self, line: CartLine) -> Cart:
        """Replace the line with the same id, or append it."""
        lines = list(self.lines)
        for i, existing in enumerate(lines):
            if existing.id == line.id:
                lines[i] = line
                return self.with_lines(lines)
        lines.append(line)
        return self.with_lines(lines)

    def without_line(self, line_id: str) -> Cart:
        self.get_line(line_id)
        return self.with_lines(line for line in self.lines if line.id != line_id)
