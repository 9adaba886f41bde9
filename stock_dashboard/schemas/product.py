from decimal import Decimal
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class StockLevel(str, Enum):
    """Stock level classification of a product."""
    LOW = "Low"
    AVAILABLE = "Available"


class Product(BaseModel):
    """
    One inventory item as read from the record store.

    Raw records use camelCase keys, so ``image_url`` is also accepted as
    ``imageUrl``. The loader replaces an empty image with a placeholder.
    """
    id: Optional[Union[int, str]] = Field(None, description="Opaque product identifier")
    name: str = Field("", description="Display name")
    quantity: int = Field(0, ge=0, description="Current stock count")
    price: Decimal = Field(Decimal("0"), ge=0, description="Unit price")
    image_url: Optional[str] = Field(None, alias="imageUrl", description="Product image URL")

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class DerivedProductRow(Product):
    """Product plus the metrics derived from its quantity."""
    stock_level: StockLevel
    sold_stock_estimate: int = Field(..., ge=0)
    is_sold: bool
