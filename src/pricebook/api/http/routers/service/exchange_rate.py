"""Exchange rate router: the current default and the bulk re-pricing sweep."""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from src.pricebook.api.http.deps import get_pricing_engine, get_product_repository
from src.pricebook.core.services import PricingEngine
from src.pricebook.entities.service.product import ProductRepository
from src.pricebook.runtime.context import get_config

router = APIRouter()


class ExchangeRateUpdate(BaseModel):
    exchange_rate: float = Field(gt=0, allow_inf_nan=False)


class ExchangeRateUpdateResult(BaseModel):
    updated: int = Field(description="Number of products repriced by this sweep")
    exchange_rate: float


class ExchangeRateInfo(BaseModel):
    default_exchange_rate: float
    reference_currency: str
    secondary_currency: str


@router.get("", response_model=ExchangeRateInfo)
def get_exchange_rate(
    pricing: PricingEngine = Depends(get_pricing_engine),
) -> ExchangeRateInfo:
    """Rate applied to products created without one, and the currency pair."""
    config = get_config()
    return ExchangeRateInfo(
        default_exchange_rate=pricing.default_exchange_rate,
        reference_currency=config.pricing.reference_currency,
        secondary_currency=config.pricing.secondary_currency,
    )


@router.put("", response_model=ExchangeRateUpdateResult)
def update_exchange_rate(
    payload: ExchangeRateUpdate,
    pricing: PricingEngine = Depends(get_pricing_engine),
    repository: ProductRepository = Depends(get_product_repository),
) -> ExchangeRateUpdateResult:
    """Reprice every stored product under a new exchange rate."""
    updated = pricing.update_exchange_rate_for_all(repository, payload.exchange_rate)
    return ExchangeRateUpdateResult(updated=updated, exchange_rate=payload.exchange_rate)
