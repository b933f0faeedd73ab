"""Application service: Remove Item use case."""

from __future__ import annotations

from dealcart.application.dto import CartChangeDTO
from dealcart.application.mapping import change_to_dto
from dealcart.domain.repository.cart_repository import CartRepository
from dealcart.domain.service.cart_reconciler import CartReconciler


class RemoveItemHandler:

    def __init__(
        self,
        cart_repo: CartRepository,
        reconciler: CartReconciler | None = None,
    ) -> None:
        self._cart_repo = cart_repo
        self._reconciler = reconciler or CartReconciler()

    def handle(self, session_id: str, line_id: str) -> CartChangeDTO:
        cart = self._cart_repo.get(session_id)
        change = self._reconciler.remove_item(cart, line_id)
        self._cart_repo.save(change.cart)
        return change_to_dto(change)
