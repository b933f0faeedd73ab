"""Integration tests for the UpdateQuantity, RemoveItem and ClearCart use cases."""

import pytest

from dealcart.application.add_item import AddItemHandler
from dealcart.application.clear_cart import ClearCartHandler
from dealcart.application.remove_item import RemoveItemHandler
from dealcart.application.update_quantity import UpdateQuantityHandler
from dealcart.domain.exceptions import LineNotFound
from tests.factories import NOW, make_product
from tests.fakes import FakeCartRepository, FakeProductRepository


def _setup():
    cart_repo = FakeCartRepository()
    product_repo = FakeProductRepository([
        make_product("1", "Shirt", "100000", sizes=[("M", 3)]),
        make_product("2", "Tote", "75000", stock=5),
    ])
    clock = lambda: NOW  # noqa: E731
    add = AddItemHandler(cart_repo, product_repo, clock)
    add.handle("alice", "2", 1)
    add.handle("alice", "1", 1, "M")
    line_ids = [line.id for line in cart_repo.get("alice").lines]
    return UpdateQuantityHandler(cart_repo, product_repo, clock), cart_repo, line_ids


class TestUpdateQuantity:

    def test_updates_quantity(self):
        handler, cart_repo, (tote, _) = _setup()
        dto = handler.handle("alice", tote, 3)
        assert dto.cart.total_items == 4
        assert cart_repo.get("alice").get_line(tote).quantity == 3

    def test_clamps_to_stock(self):
        handler, cart_repo, (tote, _) = _setup()
        dto = handler.handle("alice", tote, 50)
        item = dto.cart.items[0]
        assert item.quantity == 5
        assert item.state == "STALE"
        assert item.requested_quantity == 50
        assert item.stale_reasons == ["STOCK_REDUCED"]
        assert dto.messages == ["Tote: reduced to 5 available"]
        assert not dto.cart.checkout_ready

    def test_zero_removes(self):
        handler, cart_repo, (tote, shirt) = _setup()
        dto = handler.handle("alice", tote, 0)
        assert [item.line_id for item in dto.cart.items] == [shirt]
        assert dto.messages == ["Tote removed from cart"]

    def test_unknown_line(self):
        handler, _, _ = _setup()
        with pytest.raises(LineNotFound):
            handler.handle("alice", "missing", 1)


class TestRemoveAndClear:

    def test_remove(self):
        _, cart_repo, (tote, shirt) = _setup()
        dto = RemoveItemHandler(cart_repo).handle("alice", shirt)
        assert [item.line_id for item in dto.cart.items] == [tote]
        assert cart_repo.get("alice").item_quantity("1") == 0

    def test_clear(self):
        _, cart_repo, _ = _setup()
        dto = ClearCartHandler(cart_repo).handle("alice")
        assert dto.cart.items == []
        assert dto.cart.total_amount == "Rp0"
        assert len(dto.messages) == 2
        assert cart_repo.get("alice").is_empty
