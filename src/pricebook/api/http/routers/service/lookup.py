"""Scanner routes: resolve a barcode to a displayable price, and register products."""

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from src.pricebook.api.http.deps import get_product_repository
from src.pricebook.entities.service.product import Product, ProductCreate, ProductRepository
from src.pricebook.runtime.context import get_config

router = APIRouter()


class PriceLookup(BaseModel):
    barcode: str
    name: str
    weight: str
    price_reference: float
    price_converted: int
    exchange_rate: float
    reference_currency: str
    secondary_currency: str


@router.get("/{barcode}", response_model=PriceLookup)
def lookup_price(
    barcode: str,
    repository: ProductRepository = Depends(get_product_repository),
) -> PriceLookup:
    product = repository.get(barcode)
    pricing_config = get_config().pricing
    return PriceLookup(
        barcode=product.barcode,
        name=product.name,
        weight=product.weight,
        price_reference=product.price_reference,
        price_converted=product.price_converted,
        exchange_rate=product.exchange_rate,
        reference_currency=pricing_config.reference_currency,
        secondary_currency=pricing_config.secondary_currency,
    )


@router.post("", response_model=Product, status_code=status.HTTP_201_CREATED)
def register_product(
    payload: ProductCreate,
    repository: ProductRepository = Depends(get_product_repository),
) -> Product:
    """Scanner-side alias of ``POST /api/products``."""
    return repository.create(**payload.model_dump())
