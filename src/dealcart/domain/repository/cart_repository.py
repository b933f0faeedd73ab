"""Abstract session-scoped store for the Cart aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from dealcart.domain.model.cart import Cart


class CartRepository(ABC):

    @abstractmethod
    def get(self, session_id: str) -> Cart:
        """Return the session's cart, or an empty cart if none was saved."""

    @abstractmethod
    def save(self, cart: Cart) -> None:
        """Replace the stored line list for ``cart.session_id``."""
