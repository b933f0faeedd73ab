"""JSON-file-backed implementation of CartRepository.

All sessions share one file, keyed by session id.
"""

from __future__ import annotations

import json
import logging
from decimal import Decimal
from pathlib import Path

from dealcart.domain.model.cart import Cart, CartLine, LineState, StaleReason
from dealcart.domain.model.value_objects import DEFAULT_CURRENCY, Money, PriceQuote
from dealcart.domain.repository.cart_repository import CartRepository

logger = logging.getLogger(__name__)


class JsonCartRepository(CartRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._ensure_file()

    # --- CartRepository interface ---------------------------------------------

    def get(self, session_id: str) -> Cart:
        raw = self._load_raw().get(session_id)
        if raw is None:
            return Cart(session_id=session_id)
        return self._to_domain(session_id, raw)

    def save(self, cart: Cart) -> None:
        carts = self._load_raw()
        carts[cart.session_id] = self._to_raw(cart)
        self._persist_raw(carts)
        logger.debug("saved cart %s with %d lines", cart.session_id, len(cart.lines))

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(cart: Cart) -> dict:
        return {
            "currency": cart.currency,
            "lines": [
                {
                    "id": line.id,
                    "product_id": line.product_id,
                    "product_name": line.product_name,
                    "selected_size": line.selected_size,
                    "quantity": line.quantity,
                    "deal_id": line.deal_id,
                    "state": line.state.value,
                    "stale_reasons": sorted(r.value for r in line.stale_reasons),
                    "requested_quantity": line.requested_quantity,
                    "unit_price": str(line.quote.unit_price.amount),
                    "discount_amount": str(line.quote.discount_amount.amount),
                    "discount_percentage": line.quote.discount_percentage,
                    "applied_deal_id": line.quote.applied_deal_id,
                }
                for line in cart.lines
            ],
        }

    @staticmethod
    def _to_domain(session_id: str, raw: dict) -> Cart:
        currency = raw.get("currency", DEFAULT_CURRENCY)
        lines = [
            CartLine(
                id=item["id"],
                product_id=item["product_id"],
                product_name=item["product_name"],
                quantity=item["quantity"],
                quote=PriceQuote(
                    unit_price=Money(Decimal(item["unit_price"]), currency),
                    discount_amount=Money(Decimal(item["discount_amount"]), currency),
                    discount_percentage=item["discount_percentage"],
                    applied_deal_id=item.get("applied_deal_id"),
                ),
                selected_size=item.get("selected_size"),
                deal_id=item.get("deal_id"),
                state=LineState(item["state"]),
                stale_reasons=frozenset(
                    StaleReason(r) for r in item.get("stale_reasons", [])
                ),
                requested_quantity=item.get("requested_quantity"),
            )
            for item in raw.get("lines", [])
        ]
        return Cart(session_id=session_id, lines=tuple(lines), currency=currency)

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> dict[str, dict]:
        return json.loads(self._file_path.read_text(encoding="utf-8"))

    def _persist_raw(self, carts: dict[str, dict]) -> None:
        self._file_path.write_text(
            json.dumps(carts, indent=2) + "\n", encoding="utf-8"
        )

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("{}", encoding="utf-8")
