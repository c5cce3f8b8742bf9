"""Pydantic schemas for the product catalog."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field

from .common import CamelModel


class ProductBase(CamelModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    category: Optional[str] = None
    image: list[str] = Field(default_factory=list)


class ProductCreate(ProductBase):
    pass


class ProductUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    category: Optional[str] = None
    image: Optional[list[str]] = None


class ProductRead(ProductBase):
    id: str
    created_at: datetime
    updated_at: datetime
