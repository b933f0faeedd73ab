"""Application service: Update Quantity use case.

A quantity above the stock bound is clamped rather than rejected; the
returned messages tell the shopper how many units are left.
"""

from __future__ import annotations

from dealcart.application.clock import Clock, utc_now
from dealcart.application.dto import CartChangeDTO
from dealcart.application.mapping import change_to_dto
from dealcart.domain.repository.cart_repository import CartRepository
from dealcart.domain.repository.product_repository import ProductRepository
from dealcart.domain.service.cart_reconciler import CartReconciler


class UpdateQuantityHandler:

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

    def handle(self, session_id: str, line_id: str, quantity: int) -> CartChangeDTO:
        cart = self._cart_repo.get(session_id)
        change = self._reconciler.update_quantity(
            cart,
            self._product_repo.snapshot(),
            line_id,
            quantity,
            now=self._clock(),
        )
        self._cart_repo.save(change.cart)
        return change_to_dto(change)
