"""Application service: Clear Cart use case."""

from __future__ import annotations

from dealcart.application.dto import CartChangeDTO
from dealcart.application.mapping import change_to_dto
from dealcart.domain.repository.cart_repository import CartRepository
from dealcart.domain.service.cart_reconciler import CartReconciler


class ClearCartHandler:

    def __init__(
        self,
        cart_repo: CartRepository,
        reconciler: CartReconciler | None = None,
    ) -> None:
        self._cart_repo = cart_repo
        self._reconciler = reconciler or CartReconciler()

    def handle(self, session_id: str) -> CartChangeDTO:
        change = self._reconciler.clear(self._cart_repo.get(session_id))
        self._cart_repo.save(change.cart)
        return change_to_dto(change)
