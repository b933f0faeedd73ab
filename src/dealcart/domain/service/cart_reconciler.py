"""Domain service: cart reconciliation.

Keeps a shopper's cart consistent with the latest product/deal snapshot.
Every operation computes the next Cart from the current Cart plus a
Catalog snapshot and returns it inside a CartChange; nothing is patched in
place, so the lines and the totals derived from them always agree.

Validation here is advisory.  Stock and deal usage counters belong to the
order service, which re-checks them atomically at checkout.  The
reconciler's job is to reject obviously invalid requests and to surface
staleness as explicit line transitions.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import datetime

from dealcart.domain.exceptions import (
    DealNotUsable,
    EntityNotFoundError,
    InvalidSizeSelection,
    StockExceeded,
    ValidationError,
)
from dealcart.domain.model.cart import Cart, CartLine, LineState, StaleReason
from dealcart.domain.model.product import Catalog, Product, size_key
from dealcart.domain.model.value_objects import Quantity
from dealcart.domain.service.deal_status import effective_status, is_usable
from dealcart.domain.service.pricing import compute_price
from dealcart.domain.service.stock import max_quantity

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LineTransition:
    """A state change of one cart line, reported back to the caller."""

    line_id: str
    product_name: str
    previous: LineState
    current: LineState
    reasons: frozenset[StaleReason] = field(default_factory=frozenset)
    available: int | None = None

    @property
    def message(self) -> str:
        if self.current is LineState.REMOVED:
            if StaleReason.PRODUCT_UNAVAILABLE in self.reasons:
                return f"{self.product_name} is no longer available and was removed"
            return f"{self.product_name} removed from cart"
        if self.current is LineState.STALE:
            parts = []
            if StaleReason.STOCK_REDUCED in self.reasons:
                parts.append(f"reduced to {self.available} available")
            if StaleReason.DEAL_NOT_USABLE in self.reasons:
                parts.append("deal no longer available")
            if StaleReason.PRICE_CHANGED in self.reasons:
                parts.append("price changed")
            return f"{self.product_name}: " + ", ".join(parts or ["needs review"])
        if self.previous is LineState.DRAFT:
            return f"{self.product_name} added to cart"
        return f"{self.product_name} updated"


@dataclass(frozen=True)
class CartChange:
    cart: Cart
    transitions: tuple[LineTransition, ...] = ()

    @property
    def removed(self) -> tuple[LineTransition, ...]:
        return tuple(t for t in self.transitions if t.current is LineState.REMOVED)


def _new_line_id() -> str:
    return uuid.uuid4().hex


class CartReconciler:

    def __init__(self, id_factory: Callable[[], str] | None = None) -> None:
        self._new_id = id_factory or _new_line_id

    # --- Adding ---------------------------------------------------------------

    def add_item(
        self,
        cart: Cart,
        catalog: Catalog,
        product_id: str,
        quantity: int = 1,
        size: str | None = None,
        *,
        now: datetime,
    ) -> CartChange:
        """Add *quantity* units of a product at its current price.

        Merges into an existing line for the same product and size.
        Rejects (never clamps) when the quantity exceeds the stock bound.
        """
        product = self._require_product(catalog, product_id)
        return self._add(cart, product, quantity, size, None, now)

    def add_deal_item(
        self,
        cart: Cart,
        catalog: Catalog,
        deal_id: str,
        product_id: str,
        quantity: int = 1,
        size: str | None = None,
        *,
        now: datetime,
    ) -> CartChange:
        """Like :meth:`add_item`, but the deal must be usable right now.

        The deal id is pinned on the line, so a later revalidation flags
        the line if the deal expires or runs out of uses.
        """
        product = self._require_product(catalog, product_id)
        deal = product.deal
        if deal is None or deal.id != deal_id:
            raise DealNotUsable(
                f"Deal '{deal_id}' does not apply to product '{product.name}'"
            )
        if not is_usable(deal, now):
            raise DealNotUsable(
                f"Deal '{deal.title}' is {effective_status(deal, now).value}"
            )
        return self._add(cart, product, quantity, size, deal.id, now)

    def _add(
        self,
        cart: Cart,
        product: Product,
        quantity: int,
        size: str | None,
        deal_id: str | None,
        now: datetime,
    ) -> CartChange:
        Quantity(quantity)
        cart = self._match_currency(cart, product)
        label = self._resolve_size(product, size)
        bound = max_quantity(product, label)
        if bound == 0:
            raise StockExceeded(f"{self._describe(product, label)} is out of stock", available=0)

        # Regular and deal lines for the same size draw on one stock count.
        held = cart.units_held(product.id, label)
        if held + quantity > bound:
            if held:
                raise StockExceeded(
                    f"Cannot add {quantity} x {self._describe(product, label)}: "
                    f"{held} already in cart, {bound} available",
                    available=max(bound - held, 0),
                )
            raise StockExceeded(
                f"Cannot add {quantity} x {self._describe(product, label)}: "
                f"only {bound} available",
                available=bound,
            )

        quote = compute_price(product.base_price, product.deal, now)
        existing = cart.find_line(product.id, label, deal_id)

        if existing is not None:
            wanted = existing.quantity + quantity
            line = existing.with_state(
                LineState.VALID,
                quantity=wanted,
                quote=quote,
                stale_reasons=frozenset(),
                requested_quantity=None,
            )
            previous = existing.state
        else:
            draft = CartLine(
                id=self._new_id(),
                product_id=product.id,
                product_name=product.name,
                quantity=quantity,
                quote=quote,
                selected_size=label,
                deal_id=deal_id,
            )
            line = draft.with_state(LineState.VALID)
            previous = draft.state

        transition = LineTransition(line.id, line.product_name, previous, line.state)
        self._log(transition)
        return CartChange(cart.with_line(line), (transition,))

    # --- Mutating existing lines ----------------------------------------------

    def update_quantity(
        self,
        cart: Cart,
        catalog: Catalog,
        line_id: str,
        quantity: int,
        *,
        now: datetime,
    ) -> CartChange:
        """Set a line's quantity, validating it against *catalog*.

        ``quantity <= 0`` removes the line.  A quantity above the stock
        left after the cart's other lines of the same size is clamped and the line marked STALE.  Otherwise the line is
        re-priced and becomes VALID, which is how the shopper acknowledges
        a STALE line.
        """
        line = cart.get_line(line_id)

        if quantity <= 0:
            return self._remove(cart, line, frozenset())
        Quantity(quantity)

        product = catalog.get(line.product_id)
        if product is None or not self._size_exists(product, line.selected_size):
            return self._remove(cart, line, frozenset({StaleReason.PRODUCT_UNAVAILABLE}))

        bound = max(
            max_quantity(product, line.selected_size)
            - cart.units_held(line.product_id, line.selected_size, exclude_line_id=line.id),
            0,
        )
        quote = compute_price(product.base_price, product.deal, now)
        deal_id = line.deal_id if self._pinned_deal_usable(line, product, now) else None

        if quantity > bound:
            updated = line.with_state(
                LineState.STALE,
                quantity=bound,
                quote=quote,
                deal_id=deal_id,
                stale_reasons=frozenset({StaleReason.STOCK_REDUCED}),
                requested_quantity=quantity,
            )
            available = bound
        else:
            updated = line.with_state(
                LineState.VALID,
                quantity=quantity,
                quote=quote,
                deal_id=deal_id,
                stale_reasons=frozenset(),
                requested_quantity=None,
            )
            available = None

        transition = LineTransition(
            line.id, line.product_name, line.state, updated.state,
            updated.stale_reasons, available,
        )
        self._log(transition)
        return CartChange(cart.with_line(updated), (transition,))

    def remove_item(self, cart: Cart, line_id: str) -> CartChange:
        line = cart.get_line(line_id)
        return self._remove(cart, line, frozenset())

    def clear(self, cart: Cart) -> CartChange:
        transitions = tuple(
            LineTransition(line.id, line.product_name, line.state, LineState.REMOVED)
            for line in cart.lines
        )
        for transition in transitions:
            self._log(transition)
        return CartChange(cart.with_lines(()), transitions)

    # --- Reconciliation -------------------------------------------------------

    def revalidate(self, cart: Cart, catalog: Catalog, *, now: datetime) -> CartChange:
        """Re-check every line against a fresh *catalog* snapshot.

        Lines whose price changed, whose pinned deal is no longer usable,
        or whose quantity is above the new stock bound become STALE and
        take the new price and clamped quantity.  Lines whose product or
        size disappeared are removed.  STALE lines stay STALE until the
        shopper acts.  Lines sharing a product and size split its stock in
        cart order.  Idempotent for a given snapshot and instant.
        """
        kept: list[CartLine] = []
        transitions: list[LineTransition] = []
        remaining: dict[tuple[str, str | None], int] = {}

        for line in cart.lines:
            product = catalog.get(line.product_id)
            if product is None or not self._size_exists(product, line.selected_size):
                transition = LineTransition(
                    line.id, line.product_name, line.state, LineState.REMOVED,
                    frozenset({StaleReason.PRODUCT_UNAVAILABLE}),
                )
                self._log(transition)
                transitions.append(transition)
                continue

            key = (product.id, size_key(line.selected_size))
            if key not in remaining:
                remaining[key] = max_quantity(product, line.selected_size)
            updated, available = self._revalidate_line(line, product, remaining[key], now)
            remaining[key] -= updated.quantity
            kept.append(updated)
            if updated != line:
                transition = LineTransition(
                    line.id, line.product_name, line.state, updated.state,
                    updated.stale_reasons, available,
                )
                self._log(transition)
                transitions.append(transition)

        return CartChange(cart.with_lines(kept), tuple(transitions))

    def _revalidate_line(
        self, line: CartLine, product: Product, bound: int, now: datetime
    ) -> tuple[CartLine, int | None]:
        quote = compute_price(product.base_price, product.deal, now)

        reasons: set[StaleReason] = set()
        if quote != line.quote:
            reasons.add(StaleReason.PRICE_CHANGED)
        if line.deal_id is not None and not self._pinned_deal_usable(line, product, now):
            reasons.add(StaleReason.DEAL_NOT_USABLE)

        available = None
        requested = line.requested_quantity
        quantity = line.quantity
        if bound < quantity:
            reasons.add(StaleReason.STOCK_REDUCED)
            requested = requested if requested is not None else quantity
            quantity = bound
            available = bound

        if not reasons:
            return line, None

        updated = line.with_state(
            LineState.STALE,
            quantity=quantity,
            quote=quote,
            stale_reasons=line.stale_reasons | reasons,
            requested_quantity=requested,
        )
        return updated, available

    # --- Internal helpers -----------------------------------------------------

    def _remove(
        self, cart: Cart, line: CartLine, reasons: frozenset[StaleReason]
    ) -> CartChange:
        transition = LineTransition(
            line.id, line.product_name, line.state, LineState.REMOVED, reasons
        )
        self._log(transition)
        return CartChange(cart.without_line(line.id), (transition,))

    @staticmethod
    def _require_product(catalog: Catalog, product_id: str) -> Product:
        product = catalog.get(product_id)
        if product is None:
            raise EntityNotFoundError(f"Product '{product_id}' not found")
        return product

    @staticmethod
    def _match_currency(cart: Cart, product: Product) -> Cart:
        currency = product.base_price.currency
        if cart.currency == currency:
            return cart
        if cart.is_empty:
            return replace(cart, currency=currency)
        raise ValidationError(
            f"Cannot add {product.name} priced in {currency} to a {cart.currency} cart"
        )

    @staticmethod
    def _resolve_size(product: Product, size: str | None) -> str | None:
        """Return the catalog's own spelling of *size*, or None if unsized."""
        if not product.has_sizes:
            return None
        if size is None or not size.strip():
            raise InvalidSizeSelection(f"Please choose a size for {product.name}")
        entry = product.find_size(size)
        if entry is None:
            available = ", ".join(s.size for s in product.sizes)
            raise InvalidSizeSelection(
                f"Size '{size}' is not available for {product.name} (choose from {available})"
            )
        return entry.size

    @staticmethod
    def _size_exists(product: Product, size: str | None) -> bool:
        if not product.has_sizes:
            return True
        return product.find_size(size) is not None

    @staticmethod
    def _pinned_deal_usable(line: CartLine, product: Product, now: datetime) -> bool:
        deal = product.deal
        return deal is not None and deal.id == line.deal_id and is_usable(deal, now)

    @staticmethod
    def _describe(product: Product, size: str | None) -> str:
        return f"{product.name} (size {size})" if size else product.name

    @staticmethod
    def _log(transition: LineTransition) -> None:
        level = logging.DEBUG
        if transition.current in (LineState.STALE, LineState.REMOVED):
            level = logging.INFO
        logger.log(
            level,
            "line %s %s -> %s: %s",
            transition.line_id,
            transition.previous.value,
            transition.current.value,
            transition.message,
        )
