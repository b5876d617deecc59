"""FastAPI dependency implementations."""

from __future__ import annotations

from collections.abc import Iterator

from fastapi import Depends, Request
from sqlmodel import Session

from src.pricebook.api.http.app_data import ApplicationDependencies
from src.pricebook.core.services import PricingEngine
from src.pricebook.entities.service.product import ProductRepository


def get_db_session(request: Request) -> Iterator[Session]:
    """Yield a database session scoped to the request."""
    app_deps: ApplicationDependencies = request.app.state.app_dependencies
    session = app_deps.database_service.get_session()
    try:
        yield session
    finally:
        session.close()


def get_pricing_engine(request: Request) -> PricingEngine:
    """Get the pricing engine instance."""
    app_deps: ApplicationDependencies = request.app.state.app_dependencies
    return app_deps.pricing_engine


def get_product_repository(
    session: Session = Depends(get_db_session),
    pricing: PricingEngine = Depends(get_pricing_engine),
) -> ProductRepository:
    """Get a product repository bound to the request's session."""
    return ProductRepository(session, pricing)
