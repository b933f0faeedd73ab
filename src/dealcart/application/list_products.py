"""Application service: List Products use case (query)."""

from __future__ import annotations

from dealcart.application.clock import Clock, utc_now
from dealcart.application.dto import ProductDTO, SizeDTO
from dealcart.domain.repository.product_repository import ProductRepository
from dealcart.domain.service.deal_status import is_usable
from dealcart.domain.service.pricing import compute_price


class ListProductsHandler:

    def __init__(self, product_repo: ProductRepository, clock: Clock = utc_now) -> None:
        self._product_repo = product_repo
        self._clock = clock

    def handle(self) -> list[ProductDTO]:
        now = self._clock()
        result: list[ProductDTO] = []
        for product in self._product_repo.list_all():
            quote = compute_price(product.base_price, product.deal, now)
            deal = product.deal
            stock = sum(s.stock for s in product.sizes) if product.has_sizes else product.stock
            result.append(
                ProductDTO(
                    id=product.id,
                    name=product.name,
                    base_price=str(product.base_price),
                    unit_price=str(quote.unit_price),
                    discount_percentage=quote.discount_percentage,
                    deal_title=deal.title if is_usable(deal, now) else None,
                    stock=stock,
                    sizes=[SizeDTO(size=s.size, stock=s.stock) for s in product.sizes],
                )
            )
        return result
