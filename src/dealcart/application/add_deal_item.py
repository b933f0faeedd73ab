"""Application service: Add Deal Item use case.

Same as adding an item, except the deal must be usable at add time and
its id is pinned on the cart line.
"""

from __future__ import annotations

from dealcart.application.clock import Clock, utc_now
from dealcart.application.dto import CartChangeDTO
from dealcart.application.mapping import change_to_dto
from dealcart.domain.repository.cart_repository import CartRepository
from dealcart.domain.repository.product_repository import ProductRepository
from dealcart.domain.service.cart_reconciler import CartReconciler


class AddDealItemHandler:

    def __init__(
        self,
        cart_repo: CartRepository,
        product_repo: ProductRepository,
        clock: Clock = utc_now,
        reconciler: CartReconciler | None = None,
    ) -> None:
        self._cart_repo = cart_repo
        self._product_repo = product_repo
        self._clock = clock
        self._reconciler = reconciler or CartReconciler()

    def handle(
        self,
        session_id: str,
        deal_id: str,
        product_id: str,
        quantity: int = 1,
        size: str | None = None,
    ) -> CartChangeDTO:
        cart = self._cart_repo.get(session_id)
        change = self._reconciler.add_deal_item(
            cart,
            self._product_repo.snapshot(),
            deal_id,
            product_id,
            quantity,
            size,
            now=self._clock(),
        )
        self._cart_repo.save(change.cart)
        return change_to_dto(change)
