"""Unit tests for the Product aggregate and Catalog snapshot."""

import pytest

from dealcart.domain.exceptions import ValidationError
from dealcart.domain.model.product import Catalog, SizeStock
from tests.factories import make_deal, make_product


class TestProduct:

    def test_negative_stock_rejected(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            make_product(stock=-1)

    def test_negative_size_stock_rejected(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            SizeStock("M", -2)

    def test_blank_size_label_rejected(self):
        with pytest.raises(ValidationError, match="Size label is required"):
            SizeStock("  ", 2)

    def test_duplicate_sizes_rejected_case_insensitively(self):
        with pytest.raises(ValidationError, match="Duplicate size"):
            make_product(sizes=[("M", 1), ("m", 2)])

    def test_deal_must_be_associated_with_product(self):
        with pytest.raises(ValidationError, match="not associated"):
            make_product(product_id="1", deal=make_deal(product_ids=("2",)))

    def test_find_size(self):
        product = make_product(sizes=[("S", 1), ("M", 2)])
        assert product.find_size("m").size == "M"
        assert product.find_size("XL") is None
        assert product.find_size(None) is None


class TestCatalog:

    def test_lookup(self):
        catalog = Catalog.of([make_product("1"), make_product("2", name="Tote")])
        assert catalog.get("2").name == "Tote"
        assert catalog.get("3") is None
        assert "1" in catalog
        assert len(catalog) == 2

    def test_snapshot_is_detached_from_source_dict(self):
        source = {"1": make_product("1")}
        catalog = Catalog(source)
        source["2"] = make_product("2")
        assert "2" not in catalog
