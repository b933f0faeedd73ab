"""JSON-file-backed implementation of ProductRepository.

Products and deals live in two files.  Each deal lists the products it
covers (the deal/product association).  When several deals cover the same
product, a deal usable at load time wins over one that is not, and among
those the one that started most recently is attached.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path

from dealcart.application.clock import Clock, utc_now
from dealcart.domain.model.deal import Deal, DealKind, DealStatus
from dealcart.domain.model.product import Product, SizeStock
from dealcart.domain.model.value_objects import DEFAULT_CURRENCY, Money
from dealcart.domain.repository.product_repository import ProductRepository
from dealcart.domain.service.deal_status import is_usable

logger = logging.getLogger(__name__)


def parse_timestamp(raw: str) -> datetime:
    """ISO-8601 to an aware datetime; ``Z`` and naive values mean UTC."""
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    moment = datetime.fromisoformat(raw)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


class JsonProductRepository(ProductRepository):

    def __init__(
        self,
        products_path: Path,
        deals_path: Path,
        clock: Clock = utc_now,
    ) -> None:
        self._products_path = products_path
        self._deals_path = deals_path
        self._clock = clock
        self._ensure_file(products_path)
        self._ensure_file(deals_path)

    # --- ProductRepository interface ------------------------------------------

    def get_by_id(self, product_id: str) -> Product | None:
        for product in self.list_all():
            if product.id == product_id:
                return product
        return None

    def list_all(self) -> list[Product]:
        deals = self.list_deals()
        raw_products = self._load_raw(self._products_path)
        logger.debug(
            "loaded %d products and %d deals from %s",
            len(raw_products), len(deals), self._products_path.parent,
        )
        now = self._clock()
        return [self._to_product(raw, deals, now) for raw in raw_products]

    def get_deal(self, deal_id: str) -> Deal | None:
        for deal in self.list_deals():
            if deal.id == deal_id:
                return deal
        return None

    def list_deals(self) -> list[Deal]:
        return [self._to_deal(raw) for raw in self._load_raw(self._deals_path)]

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_deal(raw: dict) -> Deal:
        max_uses = raw.get("max_uses")
        return Deal(
            id=raw["id"],
            title=raw.get("title", raw["id"]),
            kind=DealKind(raw["type"]),
            value=Decimal(str(raw["value"])),
            start_date=parse_timestamp(raw["start_date"]),
            end_date=parse_timestamp(raw["end_date"]),
            status=DealStatus(raw.get("status", "ACTIVE")),
            max_uses=int(max_uses) if max_uses is not None else None,
            used_count=int(raw.get("used_count", 0)),
            product_ids=frozenset(raw.get("product_ids", [])),
        )

    @staticmethod
    def _to_product(raw: dict, deals: list[Deal], now: datetime) -> Product:
        product_id = raw["id"]
        covering = [d for d in deals if d.applies_to(product_id)]
        deal = None
        if covering:
            deal = max(covering, key=lambda d: (is_usable(d, now), d.start_date))
        return Product(
            id=product_id,
            name=raw["name"],
            base_price=Money(
                Decimal(str(raw["price"])), raw.get("currency", DEFAULT_CURRENCY)
            ),
            stock=int(raw.get("stock", 0)),
            sizes=tuple(
                SizeStock(size=s["size"], stock=int(s["stock"]))
                for s in raw.get("sizes", [])
            ),
            deal=deal,
        )

    # --- File helpers ---------------------------------------------------------

    @staticmethod
    def _load_raw(path: Path) -> list[dict]:
        return json.loads(path.read_text(encoding="utf-8"))

    @staticmethod
    def _ensure_file(path: Path) -> None:
        if not path.exists():
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text("[]", encoding="utf-8")
