"""Product aggregate and the catalog snapshot it is read from.

Products are created and updated by the external catalog service.  The
engine only reads them, so both Product and Catalog are immutable: a new
snapshot replaces the old one rather than mutating it.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field

from dealcart.domain.exceptions import ValidationError
from dealcart.domain.model.deal import Deal
from dealcart.domain.model.value_objects import Money


def normalize_size(label: str) -> str:
    """Canonical form used for size comparisons (``" m "`` == ``"M"``)."""
    return label.strip().casefold()


def size_key(label: str | None) -> str | None:
    return normalize_size(label) if label is not None else None


@dataclass(frozen=True)
class SizeStock:
    size: str
    stock: int

    def __post_init__(self) -> None:
        if not self.size or not self.size.strip():
            raise ValidationError("Size label is required")
        if self.stock < 0:
            raise ValidationError(
                f"Stock for size '{self.size}' cannot be negative, got {self.stock}"
            )


@dataclass(frozen=True)
class Product:
    """A product in the catalog.

    ``stock`` is only meaningful when the product has no size variants;
    otherwise each :class:`SizeStock` carries its own count.  ``deal`` is
    the deal attached to *this* product through the deal/product
    association, already resolved by the product source.
    """

    id: str
    name: str
    base_price: Money
    stock: int = 0
    sizes: tuple[SizeStock, ...] = ()
    deal: Deal | None = None

    def __post_init__(self) -> None:
        if not self.id:
            raise ValidationError("Product id is required")
        if self.stock < 0:
            raise ValidationError(
                f"Stock for product '{self.name}' cannot be negative, got {self.stock}"
            )
        object.__setattr__(self, "sizes", tuple(self.sizes))

        seen: set[str] = set()
        for entry in self.sizes:
            key = normalize_size(entry.size)
            if key in seen:
                raise ValidationError(
                    f"Duplicate size '{entry.size}' on product '{self.name}'"
                )
            seen.add(key)

        if self.deal is not None and not self.deal.applies_to(self.id):
            raise ValidationError(
                f"Deal '{self.deal.id}' is not associated with product '{self.id}'"
            )

    @property
    def has_sizes(self) -> bool:
        return bool(self.sizes)

    def find_size(self, label: str | None) -> SizeStock | None:
        if label is None:
            return None
        key = normalize_size(label)
        for entry in self.sizes:
            if normalize_size(entry.size) == key:
                return entry
        return None


@dataclass(frozen=True)
class Catalog:
    """Pass-by-value snapshot of the product/deal source.

    Every validation pass runs against one Catalog so that all cart lines
    see the same stock levels and deal usage counters.
    """

    products: Mapping[str, Product] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Copy so later changes to the caller's dict cannot leak in.
        object.__setattr__(self, "products", dict(self.products))

    @staticmethod
    def of(products: Iterable[Product]) -> Catalog:
        return Catalog({p.id: p for p in products})

    def get(self, product_id: str) -> Product | None:
        return self.products.get(product_id)

    def __contains__(self, product_id: object) -> bool:
        return product_id in self.products

    def __iter__(self) -> Iterator[Product]:
        return iter(self.products.values())

    def __len__(self) -> int:
        return len(self.products)
