"""Product API router with CRUD operations."""

from fastapi import APIRouter, Depends, status

from src.pricebook.api.http.deps import get_product_repository
from src.pricebook.entities.service.product import (
    Product,
    ProductCreate,
    ProductRepository,
    ProductUpdate,
)

router = APIRouter()


@router.post("", response_model=Product, status_code=status.HTTP_201_CREATED)
def create_product(
    payload: ProductCreate,
    repository: ProductRepository = Depends(get_product_repository),
) -> Product:
    """Create a new product; the converted price is derived from its rate."""
    return repository.create(**payload.model_dump())


@router.get("", response_model=list[Product])
def list_products(
    repository: ProductRepository = Depends(get_product_repository),
) -> list[Product]:
    """List all products, newest first."""
    return repository.list_all()


@router.get("/{barcode}", response_model=Product)
def get_product(
    barcode: str,
    repository: ProductRepository = Depends(get_product_repository),
) -> Product:
    """Get a product by barcode."""
    return repository.get(barcode)


@router.patch("/{barcode}", response_model=Product)
def update_product(
    barcode: str,
    changes: ProductUpdate,
    repository: ProductRepository = Depends(get_product_repository),
) -> Product:
    """Update some fields of a product."""
    return repository.update(barcode, changes)


@router.delete("/{barcode}")
def delete_product(
    barcode: str,
    repository: ProductRepository = Depends(get_product_repository),
) -> dict[str, str]:
    """Delete a product."""
    repository.delete(barcode)
    return {"message": "Product deleted successfully", "barcode": barcode}
