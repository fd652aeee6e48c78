# ==============================================================================
# CATALOG SCHEMAS - Categories, Products and Stock
# ==============================================================================

from __future__ import annotations

from decimal import Decimal
from typing import List, Optional

from pydantic import Field

from backoffice.schemas.base import BaseSchema, TimestampSchema


class CategoryCreate(BaseSchema):
    """Schema for creating a category."""

    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    image_url: Optional[str] = Field(None, max_length=500)


class CategoryResponse(TimestampSchema):
    """Schema for category response."""

    id: str
    name: str
    description: Optional[str] = None
    image_url: Optional[str] = None


class ProductBase(BaseSchema):
    """Fields shared by product create and response."""

    category_id: Optional[str] = Field(None, description="Owning category")
    name: str = Field(..., min_length=1, max_length=255)
    product_code: Optional[str] = Field(None, max_length=50)
    description: Optional[str] = None
    content: Optional[str] = Field(None, max_length=255, description="Pack contents")
    image_url: Optional[str] = Field(None, max_length=500)
    actual_price: Decimal = Field(Decimal("0"), ge=0, description="List price")
    offer_price: Decimal = Field(Decimal("0"), ge=0, description="Sale price")
    discount_percentage: Optional[Decimal] = Field(None, ge=0, le=100)
    apr: Decimal = Field(Decimal("0"), ge=0, description="Purchase cost per unit")
    stock: int = Field(0, ge=0, description="Units in stock")
    is_active: bool = True


class ProductCreate(ProductBase):
    """Schema for creating a product."""


class ProductUpdate(BaseSchema):
    """Partial product update; only provided fields are written."""

    category_id: Optional[str] = None
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    product_code: Optional[str] = Field(None, max_length=50)
    description: Optional[str] = None
    content: Optional[str] = Field(None, max_length=255)
    image_url: Optional[str] = Field(None, max_length=500)
    actual_price: Optional[Decimal] = Field(None, ge=0)
    offer_price: Optional[Decimal] = Field(None, ge=0)
    discount_percentage: Optional[Decimal] = Field(None, ge=0, le=100)
    apr: Optional[Decimal] = Field(None, ge=0)
    stock: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None


class ProductResponse(ProductBase, TimestampSchema):
    """Schema for product response."""

    id: str


class StockAdjustment(BaseSchema):
    """Signed change to a product's stock counter."""

    delta: int = Field(..., description="Units to add (positive) or remove (negative)")


class InventorySummary(BaseSchema):
    """Low-stock report."""

    threshold: int
    low_stock: List[ProductResponse] = Field(default_factory=list)
    out_of_stock_count: int = 0
