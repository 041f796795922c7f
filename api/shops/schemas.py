"""
Pydantic schemas for shop endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ShopCreate(BaseModel):
    # `userId` in the body is accepted but ignored; the owner is the caller.
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str = Field(..., min_length=1, max_length=255)
    admin_email: str = Field(..., alias="adminEmail", min_length=3, max_length=320)


class ShopUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str | None = Field(default=None, min_length=1, max_length=255)
    admin_email: str | None = Field(default=None, alias="adminEmail", min_length=3, max_length=320)
