"""Schema creation and catalog seeding."""

from loguru import logger
from sqlmodel import SQLModel

from src.pricebook.core.exceptions import DuplicateKeyError
from src.pricebook.core.services.database.db_session import DbSessionService
from src.pricebook.core.services.pricing.pricing_engine import PricingEngine
from src.pricebook.runtime.config.config_data import SeedProductConfig


class DbManageService:
    def __init__(self, db_session_service: DbSessionService):
        self._db = db_session_service

    def create_all(self) -> None:
        """Create all database tables."""
        from src.pricebook.entities.service.product import ProductTable  # noqa: F401

        SQLModel.metadata.create_all(self._db.engine)
        logger.info("Database initialized with tables.")

    def seed_products(
        self, pricing: PricingEngine, products: list[SeedProductConfig]
    ) -> int:
        """Create the configured products whose barcodes are not stored yet.

        Returns the number of products created.
        """
        from src.pricebook.entities.service.product import ProductRepository

        created = 0
        with self._db.session_scope() as session:
            store = ProductRepository(session, pricing)
            for seed in products:
                try:
                    store.create(**seed.model_dump())
                except DuplicateKeyError:
                    logger.debug("Seed product {} already present", seed.barcode)
                    continue
                created += 1

        logger.info("Seeded {} of {} configured products", created, len(products))
        return created
