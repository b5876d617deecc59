"""Product database table model."""

from sqlalchemy import BigInteger, Column
from sqlmodel import Field

from src.pricebook.entities.core._base import EntityTable


class ProductTable(EntityTable, table=True):
    """Database persistence model for products.

    ``version`` is bumped on every write. Writes that touch the price inputs
    are compare-and-set on it, so ``price_converted`` is never stored next to
    inputs it was not derived from.
    """

    __tablename__ = "product"

    barcode: str = Field(primary_key=True, max_length=64)
    name: str
    price_reference: float
    weight: str = ""
    exchange_rate: float
    price_converted: int = Field(sa_column=Column(BigInteger, nullable=False))
    version: int = Field(default=1, nullable=False)
