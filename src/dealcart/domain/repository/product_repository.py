"""Abstract source of product and deal snapshots.

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations (JSON, remote API, in-memory)
live in the infrastructure layer.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from dealcart.domain.model.deal import Deal
from dealcart.domain.model.product import Catalog, Product


class ProductRepository(ABC):

    @abstractmethod
    def get_by_id(self, product_id: str) -> Product | None:
        """Return a product (with its deal resolved), or None if not found."""

    @abstractmethod
    def list_all(self) -> list[Product]:
        """Return every product in the catalog."""

    @abstractmethod
    def get_deal(self, deal_id: str) -> Deal | None:
        """Return a deal by its ID, or None if not found."""

    @abstractmethod
    def list_deals(self) -> list[Deal]:
        """Return every deal, whatever its status."""

    def snapshot(self) -> Catalog:
        """Read the whole catalog once, for one validation pass."""
        return Catalog.of(self.list_all())
