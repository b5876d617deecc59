"""Unit tests for converted price derivation and the exchange-rate sweep."""

import math

import pytest

from src.pricebook.core.exceptions import ValidationError
from src.pricebook.core.services import PricingEngine
from src.pricebook.entities.service.product import Product


class TestDerive:
    """Test floor(price_reference * exchange_rate)."""

    @pytest.mark.parametrize(
        ("price_reference", "exchange_rate", "expected"),
        [
            (7.56, 89500, 676620),
            (7.56, 90000, 680400),
            (10, 90000, 900000),
            (1.99, 1.5, 2),
            (0.01, 1, 0),
            (0, 89500, 0),
            (2.5, 3, 7),
        ],
    )
    def test_derive_truncates_product(self, price_reference, exchange_rate, expected):
        """The converted price is the truncated product of price and rate."""
        assert PricingEngine.derive(price_reference, exchange_rate) == expected

    def test_derive_is_exact_for_decimal_inputs(self):
        """Binary float error does not push an exact product below the integer."""
        # 0.29 * 100 == 28.999999999999996 in binary floating point
        assert math.floor(0.29 * 100) == 28
        assert PricingEngine.derive(0.29, 100) == 29

    def test_derive_returns_int(self):
        assert isinstance(PricingEngine.derive(7.56, 89500), int)


class TestPricingEngine:
    """Test the engine's rate handling."""

    def test_default_exchange_rate(self):
        assert PricingEngine(89500).default_exchange_rate == 89500.0

    @pytest.mark.parametrize("rate", [0, -1, float("nan"), float("inf"), "90000", True, None])
    def test_invalid_default_rate_rejected(self, rate):
        with pytest.raises(ValidationError):
            PricingEngine(rate)

    def test_price_uses_product_rate(self, pricing):
        product = Product(barcode="123", name="Tea", price_reference=2.5, exchange_rate=3)

        priced = pricing.price(product)

        assert priced.price_converted == 7
        assert priced.exchange_rate == 3
        assert product.price_converted == 0  # original untouched

    def test_price_with_new_rate(self, pricing):
        product = Product(barcode="123", name="Tea", price_reference=7.56, exchange_rate=89500)

        priced = pricing.price(product, 90000)

        assert priced.exchange_rate == 90000
        assert priced.price_converted == 680400

    def test_price_rejects_overflowing_result(self, pricing):
        product = Product(barcode="999", name="Yacht", price_reference=1e15, exchange_rate=1)

        with pytest.raises(ValidationError, match="999"):
            pricing.price(product, 89500)

    def test_price_rejects_invalid_rate(self, pricing):
        product = Product(barcode="123", name="Tea", price_reference=7.56, exchange_rate=89500)

        with pytest.raises(ValidationError):
            pricing.price(product, 0)


class TestUpdateExchangeRateForAll:
    """Test the bulk repricing sweep."""

    def test_sweep_reprices_every_product(self, store, pricing):
        """Every product gets the new rate and a re-derived converted price."""
        store.create("8000500310427", "Kinder Kinderini 100g", 7.56, weight="100g")
        store.create("111", "Bread", 10)

        updated = pricing.update_exchange_rate_for_all(store, 90000)

        assert updated == 2
        assert store.get("8000500310427").price_converted == 680400
        assert store.get("111").price_converted == 900000
        for product in store.list_all():
            assert product.exchange_rate == 90000
            assert product.price_converted == PricingEngine.derive(
                product.price_reference, product.exchange_rate
            )

    def test_sweep_sets_common_updated_at(self, store, pricing):
        """Repriced products share the sweep's start time."""
        store.create("111", "Bread", 10)
        store.create("222", "Milk", 1.25)

        pricing.update_exchange_rate_for_all(store, 90000)

        first, second = store.list_all()
        assert first.updated_at == second.updated_at

    def test_sweep_on_empty_store(self, store, pricing):
        assert pricing.update_exchange_rate_for_all(store, 90000) == 0

    def test_sweep_does_not_change_default_rate(self, store, pricing):
        """Products created after a sweep still use the configured default."""
        store.create("111", "Bread", 10)
        pricing.update_exchange_rate_for_all(store, 90000)

        created = store.create("222", "Milk", 1)

        assert pricing.default_exchange_rate == 89500
        assert created.exchange_rate == 89500

    def test_overflowing_rate_changes_nothing(self, store, pricing):
        """A rate too large for one product leaves every product untouched."""
        store.create("111", "Bread", 10)
        store.create("222", "Milk", 1)

        with pytest.raises(ValidationError):
            pricing.update_exchange_rate_for_all(store, 1e18)

        assert {p.exchange_rate for p in store.list_all()} == {89500}

    @pytest.mark.parametrize("rate", [0, -5, float("nan"), "abc"])
    def test_invalid_rate_changes_nothing(self, store, pricing, rate):
        store.create("111", "Bread", 10)

        with pytest.raises(ValidationError):
            pricing.update_exchange_rate_for_all(store, rate)

        product = store.get("111")
        assert product.exchange_rate == 89500
        assert product.price_converted == 895000
