"""Converted price derivation and the bulk exchange-rate sweep."""

from __future__ import annotations

import math
from decimal import Decimal
from typing import TYPE_CHECKING

from loguru import logger

from src.pricebook.core.exceptions import ValidationError
from src.pricebook.entities.core._base import utcnow
from src.pricebook.entities.service.product.entity import MAX_PRICE_CONVERTED

if TYPE_CHECKING:
    from src.pricebook.entities.service.product import Product, ProductRepository


def _check_rate(exchange_rate: float) -> float:
    if isinstance(exchange_rate, bool) or not isinstance(exchange_rate, (int, float)):
        raise ValidationError(f"Exchange rate must be a number, got {exchange_rate!r}")
    if not math.isfinite(exchange_rate) or exchange_rate <= 0:
        raise ValidationError(f"Exchange rate must be positive, got {exchange_rate!r}")
    return float(exchange_rate)


class PricingEngine:
    """Keeps every product's converted price consistent with its price and rate.

    The default exchange rate comes from configuration and is fixed for the
    lifetime of the engine; products created without an explicit rate are
    priced with it.
    """

    def __init__(self, default_exchange_rate: float) -> None:
        self._default_exchange_rate = _check_rate(default_exchange_rate)

    @property
    def default_exchange_rate(self) -> float:
        return self._default_exchange_rate

    @staticmethod
    def derive(price_reference: float, exchange_rate: float) -> int:
        """Return ``floor(price_reference * exchange_rate)`` in secondary units.

        Both inputs are multiplied as the decimals they print as, so
        ``derive(7.56, 89500)`` is exactly 676620 rather than a binary
        floating point neighbour. The result is truncated, never rounded up.
        """
        product = Decimal(repr(float(price_reference))) * Decimal(repr(float(exchange_rate)))
        return math.floor(product)

    def price(self, product: Product, exchange_rate: float | None = None) -> Product:
        """Return a copy of ``product`` priced under ``exchange_rate`` (or its own rate)."""
        rate = product.exchange_rate if exchange_rate is None else _check_rate(exchange_rate)
        converted = self.derive(product.price_reference, rate)
        if converted > MAX_PRICE_CONVERTED:
            raise ValidationError(
                f"Converted price of {product.barcode!r} at rate {rate:g} "
                f"exceeds {MAX_PRICE_CONVERTED}"
            )
        return product.model_copy(update={"exchange_rate": rate, "price_converted": converted})

    def update_exchange_rate_for_all(self, store: ProductRepository, new_rate: float) -> int:
        """Re-price every stored product under ``new_rate``.

        This is a sequential sweep over the products present when it starts,
        one write per product, not a single transaction. Each repriced product
        gets ``updated_at`` set to the sweep's start time. A product deleted or
        changed by another writer mid-sweep is skipped, and the returned count
        covers only the products this sweep actually wrote.

        Every product in the snapshot is priced before the first write, so a
        rate that would overflow any converted price changes nothing.
        """
        rate = _check_rate(new_rate)
        started_at = utcnow()
        snapshot = store.list_all()
        for product in snapshot:
            self.price(product, rate)
        barcodes = [product.barcode for product in snapshot]
        logger.info("Repricing {} products at exchange rate {}", len(barcodes), rate)

        updated = 0
        for barcode in barcodes:
            if store.apply_exchange_rate(barcode, rate, started_at):
                updated += 1
            else:
                logger.info(
                    "Skipped product {} while repricing; it was removed or changed concurrently",
                    barcode,
                )

        logger.info(
            "Repriced {} of {} products at exchange rate {}", updated, len(barcodes), rate
        )
        return updated
