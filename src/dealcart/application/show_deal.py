"""Application service: Show Deal use case (query).

Reports a deal's effective status at the current instant together with
the price every covered product would get from it right now.
"""

from __future__ import annotations

from dealcart.application.clock import Clock, utc_now
from dealcart.application.dto import DealDTO
from dealcart.application.mapping import deal_to_dto
from dealcart.domain.exceptions import EntityNotFoundError
from dealcart.domain.repository.product_repository import ProductRepository


class ShowDealHandler:

    def __init__(self, product_repo: ProductRepository, clock: Clock = utc_now) -> None:
        self._product_repo = product_repo
        self._clock = clock

    def handle(self, deal_id: str) -> DealDTO:
        deal = self._product_repo.get_deal(deal_id)
        if deal is None:
            raise EntityNotFoundError(f"Deal '{deal_id}' not found")

        return deal_to_dto(deal, self._product_repo.list_all(), self._clock())
