"""Product repository: persistence and uniqueness for products keyed by barcode."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from typing import TYPE_CHECKING, Any

import pydantic
from loguru import logger
from sqlalchemy import update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, select

from src.pricebook.core.exceptions import (
    ConflictError,
    DuplicateKeyError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from src.pricebook.entities.core._base import utcnow
from src.pricebook.entities.service.product.entity import Product, ProductUpdate
from src.pricebook.entities.service.product.table import ProductTable

if TYPE_CHECKING:
    from src.pricebook.core.services.pricing.pricing_engine import PricingEngine


class ProductRepository:
    """Data-access layer for products.

    Every public method is its own unit of work: it commits on success and
    rolls back on failure, so a failed call never leaves a partial write.
    """

    def __init__(self, session: Session, pricing: PricingEngine) -> None:
        self._session = session
        self._pricing = pricing

    def create(
        self,
        barcode: str,
        name: str,
        price_reference: float,
        weight: str | None = None,
        exchange_rate: float | None = None,
    ) -> Product:
        """Store a new product priced at ``exchange_rate`` or the default rate."""
        if exchange_rate is None:
            exchange_rate = self._pricing.default_exchange_rate

        product = self._build(
            barcode=barcode,
            name=name,
            price_reference=price_reference,
            weight=weight,
            exchange_rate=exchange_rate,
        )

        with self._unit_of_work():
            if self._get_row(product.barcode) is not None:
                raise DuplicateKeyError(product.barcode)
            self._session.add(ProductTable(**product.model_dump()))
            try:
                self._session.flush()
            except IntegrityError as e:
                # Lost an insert race for the same barcode
                raise DuplicateKeyError(product.barcode) from e

        logger.debug(
            "Created product {} priced {} -> {}",
            product.barcode,
            product.price_reference,
            product.price_converted,
        )
        return product

    def get(self, barcode: str) -> Product:
        with self._unit_of_work():
            row = self._get_row(barcode)
            if row is None:
                raise NotFoundError(barcode)
            return self._to_entity(row)

    def list_all(self) -> list[Product]:
        """Return every product, most recently created first."""
        statement = (
            select(ProductTable)
            .order_by(ProductTable.created_at.desc(), ProductTable.barcode.desc())
            .execution_options(populate_existing=True)
        )
        with self._unit_of_work():
            rows = self._session.exec(statement).all()
            return [self._to_entity(row) for row in rows]

    def update(self, barcode: str, changes: ProductUpdate | dict[str, Any]) -> Product:
        """Apply the fields present in ``changes`` and re-derive the converted price.

        The converted price is recomputed on every update, including ones
        that only touch ``name`` or ``weight``.
        """
        if isinstance(changes, dict):
            try:
                changes = ProductUpdate.model_validate(changes)
            except pydantic.ValidationError as e:
                raise ValidationError(str(e)) from e
        fields = changes.model_dump(exclude_unset=True)

        with self._unit_of_work():
            row = self._get_row(barcode)
            if row is None:
                raise NotFoundError(barcode)

            current = self._to_entity(row)
            updated = self._build(
                **(current.model_dump(exclude={"price_converted", "updated_at"}) | fields),
                updated_at=utcnow(),
            )
            if not self._compare_and_set(row, updated):
                raise ConflictError(barcode)

        logger.debug("Updated product {} fields {}", barcode, sorted(fields))
        return updated

    def delete(self, barcode: str) -> None:
        with self._unit_of_work():
            row = self._get_row(barcode)
            if row is None:
                raise NotFoundError(barcode)
            self._session.delete(row)
        logger.debug("Deleted product {}", barcode)

    def apply_exchange_rate(self, barcode: str, exchange_rate: float, at: datetime) -> bool:
        """Re-price one product under ``exchange_rate`` as a single write.

        Returns False when the product no longer exists or another writer
        changed it between the read and the write; that writer's values stand.
        """
        with self._unit_of_work():
            row = self._get_row(barcode)
            if row is None:
                return False
            repriced = self._pricing.price(self._to_entity(row), exchange_rate)
            repriced.updated_at = at
            return self._compare_and_set(row, repriced)

    def _build(self, **fields: Any) -> Product:
        try:
            product = Product.model_validate(fields)
        except pydantic.ValidationError as e:
            raise ValidationError(str(e)) from e
        return self._pricing.price(product)

    def _get_row(self, barcode: str) -> ProductTable | None:
        return self._session.get(ProductTable, barcode, populate_existing=True)

    def _compare_and_set(self, row: ProductTable, product: Product) -> bool:
        """Write ``product`` over ``row`` only if the stored version is unchanged."""
        result = self._session.connection().execute(
            update(ProductTable)
            .where(ProductTable.barcode == row.barcode)
            .where(ProductTable.version == row.version)
            .values(
                name=product.name,
                price_reference=product.price_reference,
                weight=product.weight,
                exchange_rate=product.exchange_rate,
                price_converted=product.price_converted,
                updated_at=product.updated_at,
                version=row.version + 1,
            )
        )
        return result.rowcount == 1

    @staticmethod
    def _to_entity(row: ProductTable) -> Product:
        return Product.model_validate(row, from_attributes=True)

    @contextmanager
    def _unit_of_work(self) -> Iterator[None]:
        try:
            yield
            self._session.commit()
        except SQLAlchemyError as e:
            self._session.rollback()
            logger.error(
                "Database operation failed",
                extra={
                    "error_type": type(e).__name__,
                    "error_message": str(e),
                },
            )
            raise StorageError(str(e)) from e
        except Exception:
            self._session.rollback()
            raise
