"""Database initialization script."""

from src.pricebook.core.services import DbManageService, DbSessionService, PricingEngine
from src.pricebook.runtime.context import get_config


def init_db(seed: bool = True, db_session_service: DbSessionService | None = None) -> int:
    """Create all database tables and optionally seed the configured catalog.

    Returns the number of seeded products.
    """
    config = get_config()
    db_manage_service = DbManageService(db_session_service or DbSessionService())
    db_manage_service.create_all()
    if not seed:
        return 0
    pricing = PricingEngine(config.pricing.default_exchange_rate)
    return db_manage_service.seed_products(pricing, config.pricing.seed_products)


if __name__ == "__main__":
    init_db()
