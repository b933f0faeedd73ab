"""Application service: Revalidate Cart use case.

Run after the product/deal source has been refetched.  Lines that no
longer match the snapshot come back STALE (or removed, when their product
is gone) and the messages say why.
"""

from __future__ import annotations

from dealcart.application.clock import Clock, utc_now
from dealcart.application.dto import CartChangeDTO
from dealcart.application.mapping import change_to_dto
from dealcart.domain.repository.cart_repository import CartRepository
from dealcart.domain.repository.product_repository import ProductRepository
from dealcart.domain.service.cart_reconciler import CartReconciler


class RevalidateCartHandler:

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

    def handle(self, session_id: str) -> CartChangeDTO:
        cart = self._cart_repo.get(session_id)
        change = self._reconciler.revalidate(
            cart, self._product_repo.snapshot(), now=self._clock()
        )
        # Nothing to write back when the snapshot changed nothing.
        if change.transitions:
            self._cart_repo.save(change.cart)
        return change_to_dto(change)
