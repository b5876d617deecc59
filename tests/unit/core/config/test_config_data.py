"""Unit tests for configuration models."""

import pydantic
import pytest

from src.pricebook.runtime.config.config_data import (
    AppConfig,
    DatabaseConfig,
    PricingConfig,
)


class TestDatabaseConfig:
    def test_sqlite_url_unchanged(self):
        config = DatabaseConfig(url="sqlite:///./pricebook.db")

        assert config.is_sqlite
        assert config.connection_string == "sqlite:///./pricebook.db"

    def test_password_from_environment(self, monkeypatch):
        monkeypatch.setenv("PRICEBOOK_DB_PASSWORD", "secret")
        config = DatabaseConfig(
            url="postgresql://pricebook@db:5432/pricebook",
            password_env_var="PRICEBOOK_DB_PASSWORD",
        )

        assert not config.is_sqlite
        assert config.connection_string == "postgresql://pricebook:secret@db:5432/pricebook"

    def test_password_from_file(self, tmp_path):
        secret = tmp_path / "db_password"
        secret.write_text("from-file\n")
        config = DatabaseConfig(
            url="postgresql://pricebook@db:5432/pricebook",
            password_file=str(secret),
        )

        assert config.password == "from-file"

    def test_missing_password_variable(self, monkeypatch):
        monkeypatch.delenv("PRICEBOOK_DB_PASSWORD", raising=False)
        config = DatabaseConfig(
            url="postgresql://pricebook@db:5432/pricebook",
            password_env_var="PRICEBOOK_DB_PASSWORD",
        )

        with pytest.raises(ValueError, match="PRICEBOOK_DB_PASSWORD"):
            _ = config.connection_string

    def test_url_password_wins(self):
        config = DatabaseConfig(url="postgresql://pricebook:inline@db/pricebook")

        assert config.password == "inline"
        assert config.connection_string == "postgresql://pricebook:inline@db/pricebook"


class TestPricingConfig:
    def test_defaults(self):
        config = PricingConfig()

        assert config.default_exchange_rate == 89500
        assert config.reference_currency == "USD"
        assert config.secondary_currency == "LBP"
        assert config.seed_products == []

    @pytest.mark.parametrize("rate", [0, -1])
    def test_non_positive_rate_rejected(self, rate):
        with pytest.raises(pydantic.ValidationError):
            PricingConfig(default_exchange_rate=rate)


def test_base_url():
    assert AppConfig(host="localhost", port=3000).base_url == "http://localhost:3000"
    assert AppConfig(environment="production", host="shop", port=443).base_url == "https://shop:443"
