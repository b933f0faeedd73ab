"""Unit tests for the Cart aggregate and totals."""

import pytest

from dealcart.domain.exceptions import LineNotFound, ValidationError
from dealcart.domain.model.cart import Cart, CartLine, LineState, compute_totals
from dealcart.domain.model.value_objects import Money, PriceQuote


def _line(
    line_id: str,
    quantity: int,
    unit: str = "100000",
    discount: str = "0",
    state: LineState = LineState.VALID,
    product_id: str = "1",
    size: str | None = None,
    deal_id: str | None = None,
) -> CartLine:
    return CartLine(
        id=line_id,
        product_id=product_id,
        product_name=f"Product {product_id}",
        quantity=quantity,
        quote=PriceQuote(Money.of(unit), Money.of(discount), 0),
        selected_size=size,
        deal_id=deal_id,
        state=state,
    )


class TestTotals:

    def test_sums_quantity_and_amount(self):
        totals = compute_totals([_line("a", 2, "80000", "20000"), _line("b", 1, "50000")])
        assert totals.total_items == 3
        assert totals.total_amount == Money.of("210000")
        assert totals.total_discount == Money.of("40000")

    def test_stale_lines_count_at_clamped_quantity(self):
        totals = compute_totals([_line("a", 1, state=LineState.STALE)])
        assert totals.total_items == 1
        assert totals.total_amount == Money.of("100000")

    def test_draft_and_removed_lines_ignored(self):
        totals = compute_totals([
            _line("a", 5, state=LineState.DRAFT),
            _line("b", 5, state=LineState.REMOVED),
        ])
        assert totals.total_items == 0
        assert totals.total_amount == Money.zero()

    def test_empty(self):
        assert Cart("s").totals.total_items == 0


class TestCartQueries:

    def test_get_line_not_found(self):
        with pytest.raises(LineNotFound, match="not found"):
            Cart("s").get_line("nope")

    def test_is_in_cart_and_item_quantity(self):
        cart = Cart("s", (
            _line("a", 2, product_id="1", size="M"),
            _line("b", 1, product_id="1", size="L"),
            _line("c", 4, product_id="2"),
        ))
        assert cart.is_in_cart("1")
        assert not cart.is_in_cart("9")
        assert cart.item_quantity("1") == 3
        assert cart.item_quantity("9") == 0

    def test_units_held_spans_regular_and_deal_lines(self):
        cart = Cart("s", (
            _line("a", 2, size="M"),
            _line("b", 1, size=" m ", deal_id="d1"),
            _line("c", 5, size="L"),
        ))
        assert cart.units_held("1", "M") == 3
        assert cart.units_held("1", "M", exclude_line_id="a") == 1
        assert cart.units_held("2", None) == 0

    def test_find_line_normalizes_size(self):
        cart = Cart("s", (_line("a", 1, size="M"),))
        assert cart.find_line("1", "m", None).id == "a"
        assert cart.find_line("1", "L", None) is None
        assert cart.find_line("1", None, None) is None

    def test_checkout_ready_requires_lines_and_no_stale(self):
        assert not Cart("s").is_checkout_ready
        assert Cart("s", (_line("a", 1),)).is_checkout_ready
        assert not Cart("s", (_line("a", 1), _line("b", 1, state=LineState.STALE))).is_checkout_ready


class TestCartNextState:

    def test_with_line_appends_in_order(self):
        cart = Cart("s").with_line(_line("a", 1)).with_line(_line("b", 1))
        assert [line.id for line in cart.lines] == ["a", "b"]

    def test_with_line_replaces_in_place(self):
        cart = Cart("s", (_line("a", 1), _line("b", 1)))
        cart = cart.with_line(_line("a", 7))
        assert [(line.id, line.quantity) for line in cart.lines] == [("a", 7), ("b", 1)]

    def test_without_line(self):
        cart = Cart("s", (_line("a", 1), _line("b", 1))).without_line("a")
        assert [line.id for line in cart.lines] == ["b"]

    def test_without_unknown_line(self):
        with pytest.raises(LineNotFound):
            Cart("s").without_line("a")

    def test_original_cart_untouched(self):
        original = Cart("s", (_line("a", 1),))
        original.with_line(_line("a", 5))
        assert original.lines[0].quantity == 1


class TestCartLineValidation:

    def test_requires_id(self):
        with pytest.raises(ValidationError, match="id is required"):
            _line("", 1)

    def test_requires_product_id(self):
        with pytest.raises(ValidationError, match="product id is required"):
            _line("a", 1, product_id="")

    def test_rejects_negative_quantity(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            _line("a", -1, state=LineState.STALE)

    @pytest.mark.parametrize("state", [LineState.DRAFT, LineState.VALID])
    def test_live_line_needs_a_unit(self, state):
        with pytest.raises(ValidationError, match="at least one unit"):
            _line("a", 0, state=state)

    @pytest.mark.parametrize("state", [LineState.STALE, LineState.REMOVED])
    def test_stale_or_removed_line_may_be_empty(self, state):
        assert _line("a", 0, state=state).quantity == 0

    def test_state_change_revalidates(self):
        line = _line("a", 0, state=LineState.STALE)
        with pytest.raises(ValidationError):
            line.with_state(LineState.VALID)
