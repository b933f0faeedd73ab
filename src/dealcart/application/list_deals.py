"""Application service: List Deals use case (query)."""

from __future__ import annotations

from dealcart.application.clock import Clock, utc_now
from dealcart.application.dto import DealDTO
from dealcart.application.mapping import deal_to_dto
from dealcart.domain.model.deal import DealStatus
from dealcart.domain.repository.product_repository import ProductRepository
from dealcart.domain.service.deal_status import effective_status


class ListDealsHandler:

    def __init__(self, product_repo: ProductRepository, clock: Clock = utc_now) -> None:
        self._product_repo = product_repo
        self._clock = clock

    def handle(
        self,
        status: DealStatus | None = None,
        flash_sale: bool | None = None,
    ) -> list[DealDTO]:
        """List deals, optionally only those with the given *effective*
        status and/or flash-sale flag, soonest-ending first."""
        now = self._clock()
        products = self._product_repo.list_all()
        deals = [
            deal
            for deal in self._product_repo.list_deals()
            if (status is None or effective_status(deal, now) is status)
            and (flash_sale is None or deal.is_flash_sale == flash_sale)
        ]
        deals.sort(key=lambda d: (d.end_date, d.id))
        return [deal_to_dto(deal, products, now) for deal in deals]
