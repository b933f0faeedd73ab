"""Application service: Show Cart use case (query)."""

from __future__ import annotations

from dealcart.application.dto import CartDTO
from dealcart.application.mapping import cart_to_dto
from dealcart.domain.repository.cart_repository import CartRepository


class ShowCartHandler:

    def __init__(self, cart_repo: CartRepository) -> None:
        self._cart_repo = cart_repo

    def handle(self, session_id: str) -> CartDTO:
        return cart_to_dto(self._cart_repo.get(session_id))
