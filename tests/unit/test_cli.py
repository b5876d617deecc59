"""Unit tests for the pricebook CLI."""

import pytest
from typer.testing import CliRunner

from src.pricebook import cli
from src.pricebook.runtime import init_db as init_db_module
from src.pricebook.runtime.config.config_data import (
    ConfigData,
    PricingConfig,
    SeedProductConfig,
)
from src.pricebook.runtime.context import with_context

runner = CliRunner()


@pytest.fixture(autouse=True)
def use_test_database(monkeypatch, db_session_service):
    """Point every command at the in-memory test database."""
    monkeypatch.setattr(cli, "DbSessionService", lambda: db_session_service)
    monkeypatch.setattr(init_db_module, "DbSessionService", lambda: db_session_service)


@pytest.fixture
def seed_config():
    override = ConfigData(
        pricing=PricingConfig(
            default_exchange_rate=89500,
            seed_products=[
                SeedProductConfig(
                    barcode="8000500310427",
                    name="Kinder Kinderini 100g",
                    price_reference=7.56,
                    weight="100g",
                ),
            ],
        )
    )
    with with_context(override):
        yield


class TestCLI:
    def test_add_and_list(self, seed_config):
        result = runner.invoke(cli.app, ["add", "111", "Bread", "10", "--weight", "500g"])

        assert result.exit_code == 0
        assert "895,000" in result.output

        result = runner.invoke(cli.app, ["list"])
        assert result.exit_code == 0
        assert "111" in result.output

    def test_add_duplicate_fails(self, seed_config):
        runner.invoke(cli.app, ["add", "111", "Bread", "10"])

        result = runner.invoke(cli.app, ["add", "111", "Bread", "10"])

        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_add_invalid_price_fails(self, seed_config):
        result = runner.invoke(cli.app, ["add", "111", "Bread", "--", "-1"])

        assert result.exit_code == 1

    def test_set_rate(self, seed_config, store):
        runner.invoke(cli.app, ["add", "111", "Bread", "10"])

        result = runner.invoke(cli.app, ["set-rate", "90000"])

        assert result.exit_code == 0
        assert "Repriced 1 products" in result.output
        assert store.get("111").price_converted == 900000

    def test_set_rate_invalid(self, seed_config):
        result = runner.invoke(cli.app, ["set-rate", "0"])

        assert result.exit_code == 1

    def test_init_db_seeds_once(self, seed_config, store):
        result = runner.invoke(cli.app, ["init-db"])

        assert result.exit_code == 0
        assert "1 products seeded" in result.output
        assert store.get("8000500310427").price_converted == 676620

        result = runner.invoke(cli.app, ["init-db"])
        assert "0 products seeded" in result.output

    def test_init_db_without_seed(self, seed_config, store):
        result = runner.invoke(cli.app, ["init-db", "--no-seed"])

        assert result.exit_code == 0
        assert store.list_all() == []
