"""Entity package: Product."""

from .entity import MAX_PRICE_CONVERTED, Product, ProductCreate, ProductUpdate
from .repository import ProductRepository
from .table import ProductTable

__all__ = [
    "MAX_PRICE_CONVERTED",
    "Product",
    "ProductCreate",
    "ProductUpdate",
    "ProductRepository",
    "ProductTable",
]
