"""End-to-end tests for the click CLI against a temporary data directory."""

import json

import pytest
from click.testing import CliRunner

from dealcart.infrastructure.bootstrap import DATA_DIR_ENV, SESSION_ENV
from dealcart.infrastructure.cli.main import cli

PRODUCTS = [
    {"id": "1", "name": "Shirt", "price": "100000", "sizes": [{"size": "M", "stock": 3}, {"size": "L", "stock": 0}]},
    {"id": "2", "name": "Tote", "price": "75000", "stock": 12},
    {"id": "3", "name": "Cap", "price": "60000", "stock": 4},
]

DEALS = [
    {
        "id": "d1", "title": "Shirt Week", "type": "PERCENTAGE", "value": "20",
        "start_date": "2000-01-01T00:00:00Z", "end_date": "2999-01-01T00:00:00Z",
        "product_ids": ["1"],
    },
    {
        "id": "f1", "title": "Cap Flash", "type": "FLASH_SALE", "value": "35",
        "start_date": "2000-01-01T00:00:00Z", "end_date": "2998-01-01T00:00:00Z",
        "product_ids": ["3"],
    },
    {
        "id": "gone", "title": "Old Sale", "type": "PERCENTAGE", "value": "10",
        "start_date": "2000-01-01T00:00:00Z", "end_date": "2000-02-01T00:00:00Z",
        "product_ids": ["3"],
    },
]


@pytest.fixture
def runner(tmp_path, monkeypatch):
    (tmp_path / "products.json").write_text(json.dumps(PRODUCTS), encoding="utf-8")
    (tmp_path / "deals.json").write_text(json.dumps(DEALS), encoding="utf-8")
    monkeypatch.setenv(DATA_DIR_ENV, str(tmp_path))
    monkeypatch.delenv(SESSION_ENV, raising=False)
    return CliRunner()


def _cart(tmp_path, session="default"):
    return json.loads((tmp_path / "carts.json").read_text(encoding="utf-8"))[session]


class TestCartCommands:

    def test_add_and_show(self, runner, tmp_path):
        result = runner.invoke(cli, ["cart", "add", "--product", "2", "--quantity", "2"])
        assert result.exit_code == 0, result.output
        assert "Tote added to cart" in result.output
        assert "Rp150,000" in result.output

        result = runner.invoke(cli, ["cart", "show"])
        assert "Tote" in result.output

    def test_add_deal(self, runner, tmp_path):
        result = runner.invoke(
            cli, ["cart", "add-deal", "--deal", "d1", "--product", "1", "--size", "M"]
        )
        assert result.exit_code == 0, result.output
        assert "Rp80,000" in result.output
        assert _cart(tmp_path)["lines"][0]["deal_id"] == "d1"

    def test_sold_out_size_is_an_error(self, runner):
        result = runner.invoke(cli, ["cart", "add", "--product", "1", "--size", "L"])
        assert result.exit_code != 0
        assert "out of stock" in result.output

    def test_update_clamps(self, runner, tmp_path):
        runner.invoke(cli, ["cart", "add", "--product", "1", "--size", "M"])
        line_id = _cart(tmp_path)["lines"][0]["id"]

        result = runner.invoke(cli, ["cart", "update", "--line", line_id, "--quantity", "9"])
        assert result.exit_code == 0, result.output
        assert "reduced to 3 available" in result.output
        assert _cart(tmp_path)["lines"][0]["quantity"] == 3

    def test_sessions(self, runner, tmp_path):
        runner.invoke(cli, ["cart", "add", "--session", "bob", "--product", "2"])
        assert _cart(tmp_path, "bob")["lines"][0]["product_id"] == "2"
        result = runner.invoke(cli, ["cart", "show"])
        assert "Cart is empty." in result.output

    def test_revalidate_after_stock_drop(self, runner, tmp_path):
        runner.invoke(cli, ["cart", "add", "--product", "2", "--quantity", "5"])
        products = [dict(PRODUCTS[0]), dict(PRODUCTS[1], stock=2)]
        (tmp_path / "products.json").write_text(json.dumps(products), encoding="utf-8")

        result = runner.invoke(cli, ["cart", "revalidate"])
        assert result.exit_code == 0, result.output
        assert "Tote: reduced to 2 available" in result.output
        assert "Review the STALE lines" in result.output

    def test_remove_unknown_line(self, runner):
        result = runner.invoke(cli, ["cart", "remove", "--line", "nope"])
        assert result.exit_code != 0
        assert "not found" in result.output

    def test_clear(self, runner, tmp_path):
        runner.invoke(cli, ["cart", "add", "--product", "2"])
        result = runner.invoke(cli, ["cart", "clear"])
        assert "1 lines removed" in result.output
        assert _cart(tmp_path)["lines"] == []


class TestCatalogCommands:

    def test_product_list(self, runner):
        result = runner.invoke(cli, ["product", "list"])
        assert result.exit_code == 0, result.output
        assert "Shirt" in result.output
        assert "M:3, L:0" in result.output

    def test_deal_show(self, runner):
        result = runner.invoke(cli, ["deal", "show", "--id", "d1"])
        assert result.exit_code == 0, result.output
        assert "ACTIVE" in result.output
        assert "Rp80,000" in result.output

    def test_unknown_deal(self, runner):
        result = runner.invoke(cli, ["deal", "show", "--id", "zzz"])
        assert result.exit_code != 0
        assert "not found" in result.output

    def test_deal_list(self, runner):
        result = runner.invoke(cli, ["deal", "list"])
        assert result.exit_code == 0, result.output
        assert [line.split()[0] for line in result.output.splitlines()[2:]] == ["gone", "f1", "d1"]

    def test_deal_list_filters(self, runner):
        result = runner.invoke(cli, ["deal", "list", "--status", "active", "--flash-sale"])
        assert result.exit_code == 0, result.output
        assert "Cap Flash [FLASH]" in result.output
        assert "Shirt Week" not in result.output

        result = runner.invoke(cli, ["deal", "list", "--status", "EXPIRED"])
        assert "Old Sale" in result.output
        assert "Shirt Week" not in result.output

    def test_deal_list_nothing_matches(self, runner):
        result = runner.invoke(cli, ["deal", "list", "--status", "INACTIVE"])
        assert "No deals found." in result.output
