# app/domain/schemas.py
from typing import Annotated, List

from pydantic import BaseModel, ConfigDict, Field

Identifier = Annotated[str, Field(min_length=1, max_length=128)]


class ItemIn(BaseModel):
    """Body of POST /api/cart."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: Identifier = Field(..., alias="userId")
    product_id: Identifier = Field(..., alias="productId")
    quantity: int = Field(..., gt=0, strict=True, description="Whole number of units, > 0")


class ItemRemoveIn(BaseModel):
    """Body of DELETE /api/cart."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: Identifier = Field(..., alias="userId")
    product_id: Identifier = Field(..., alias="productId")


class ProductOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    price: float | None = None
    image: List[str] = []


class CartLineOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    product_id: str = Field(..., alias="productId")
    quantity: int


class CartOut(BaseModel):
    """Persisted cart document, without catalog data."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    user_id: str = Field(..., alias="userId")
    items: List[CartLineOut]


class EnrichedItemOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    product_id: str = Field(..., alias="productId")
    quantity: int
    name: str
    price: float
    image: List[str]


class EnrichedCartOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(..., alias="userId")
    items: List[EnrichedItemOut]


class HealthOut(BaseModel):
    status: str
    database: str
