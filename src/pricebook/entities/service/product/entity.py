"""Entity: Product."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.pricebook.entities.core._base import Entity

# Largest value the BIGINT price_converted column holds
MAX_PRICE_CONVERTED = 2**63 - 1


class Product(Entity):
    """Product entity representing one sellable item.

    ``price_converted`` is derived from ``price_reference`` and
    ``exchange_rate`` by the pricing engine; it is never set by callers.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    barcode: str = Field(min_length=1, description="Scannable barcode, primary key")
    name: str = Field(min_length=1, description="Display name")
    price_reference: float = Field(
        ge=0, allow_inf_nan=False, description="Price in the reference currency"
    )
    weight: str = Field(default="", description="Free-form weight, e.g. 100g")
    exchange_rate: float = Field(
        gt=0,
        allow_inf_nan=False,
        description="Reference to secondary currency rate the price was derived with",
    )
    price_converted: int = Field(
        default=0,
        ge=0,
        le=MAX_PRICE_CONVERTED,
        description="Price in the secondary currency",
    )

    @field_validator("weight", mode="before")
    @classmethod
    def normalize_weight(cls, value: Any) -> Any:
        return "" if value is None else value

    def __eq__(self, other: Any) -> bool:
        """Compare products by business attributes, ignoring timestamps."""
        if not isinstance(other, Product):
            return False

        return (
            self.barcode == other.barcode
            and self.name == other.name
            and self.price_reference == other.price_reference
            and self.weight == other.weight
            and self.exchange_rate == other.exchange_rate
            and self.price_converted == other.price_converted
        )

    def __hash__(self) -> int:
        """Hash based on business attributes, ignoring timestamps."""
        return hash((
            self.barcode,
            self.name,
            self.price_reference,
            self.weight,
            self.exchange_rate,
            self.price_converted,
        ))


class ProductCreate(BaseModel):
    """Fields accepted when adding a product."""

    model_config = ConfigDict(str_strip_whitespace=True)

    barcode: str = Field(min_length=1)
    name: str = Field(min_length=1)
    price_reference: float = Field(ge=0, allow_inf_nan=False)
    weight: str | None = None
    exchange_rate: float | None = Field(default=None, gt=0, allow_inf_nan=False)


class ProductUpdate(BaseModel):
    """Partial update; only fields present in the payload are applied.

    The barcode is immutable and therefore not accepted here.
    """

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    name: str | None = Field(default=None, min_length=1)
    price_reference: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    weight: str | None = None
    exchange_rate: float | None = Field(default=None, gt=0, allow_inf_nan=False)
