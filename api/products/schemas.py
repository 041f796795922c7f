"""
Pydantic schemas for product endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ProductCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1, max_length=255)
    stock: int = Field(..., ge=0)
    price: int = Field(..., ge=0)
    images: list[str] | None = None
    shop_id: int = Field(..., alias="shopId", gt=0)


class ProductUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    stock: int | None = Field(default=None, ge=0)
    price: int | None = Field(default=None, ge=0)
    images: list[str] | None = None
