"""In-memory fake repositories for testing.

These implement the same abstract interfaces as the JSON repositories
but keep everything in a dict. No file I/O, no side effects.
"""

from __future__ import annotations

from dealcart.domain.model.cart import Cart
from dealcart.domain.model.deal import Deal
from dealcart.domain.model.product import Product
from dealcart.domain.repository.cart_repository import CartRepository
from dealcart.domain.repository.product_repository import ProductRepository


class FakeProductRepository(ProductRepository):

    def __init__(
        self,
        products: list[Product] | None = None,
        deals: list[Deal] | None = None,
    ) -> None:
        self._store: dict[str, Product] = {}
        self._deals: dict[str, Deal] = {}
        for p in products or []:
            self.put(p)
        for d in deals or []:
            self._deals[d.id] = d

    def put(self, product: Product) -> None:
        """Simulate the catalog service publishing a new product snapshot."""
        self._store[product.id] = product
        if product.deal is not None:
            self._deals[product.deal.id] = product.deal

    def delete(self, product_id: str) -> None:
        del self._store[product_id]

    def get_by_id(self, product_id: str) -> Product | None:
        return self._store.get(product_id)

    def list_all(self) -> list[Product]:
        return list(self._store.values())

    def get_deal(self, deal_id: str) -> Deal | None:
        return self._deals.get(deal_id)

    def list_deals(self) -> list[Deal]:
        return list(self._deals.values())


class FakeCartRepository(CartRepository):

    def __init__(self) -> None:
        self._store: dict[str, Cart] = {}
        self.saves = 0

    def get(self, session_id: str) -> Cart:
        return self._store.get(session_id, Cart(session_id=session_id))

    def save(self, cart: Cart) -> None:
        self.saves += 1
        self._store[cart.session_id] = cart
