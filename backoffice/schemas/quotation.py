# ==============================================================================
# QUOTATION SCHEMAS
# ==============================================================================

from __future__ import annotations

from decimal import Decimal
from typing import List, Optional

from pydantic import Field, computed_field

from backoffice.schemas.base import BaseSchema, TimestampSchema


class QuotationItemInput(BaseSchema):
    """Quotation line as built in the admin quotation cart."""

    product_id: str
    quantity: int = Field(..., ge=1)
    price: Decimal = Field(..., ge=0, description="Quoted unit price")


class QuotationSave(BaseSchema):
    """Create or replace a quotation."""

    customer_name: str = Field(..., min_length=1, max_length=255)
    phone: Optional[str] = Field(None, max_length=30)
    email: Optional[str] = Field(None, max_length=255)
    address: Optional[str] = None
    discount_amt: Decimal = Field(Decimal("0"), ge=0)
    notes: Optional[str] = None
    user_id: Optional[str] = None
    items: List[QuotationItemInput] = Field(..., min_length=1)


class QuotationItemResponse(TimestampSchema):
    id: str
    quotation_id: str
    product_id: str
    quantity: int
    price: Decimal
    total_price: Decimal


class QuotationResponse(TimestampSchema):
    """Schema for quotation response with items."""

    id: str
    short_id: str
    user_id: Optional[str] = None
    customer_name: str
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    total_amount: Decimal
    discount_amt: Decimal = Decimal("0")
    notes: Optional[str] = None
    items: List[QuotationItemResponse] = Field(default_factory=list)

    @computed_field
    @property
    def grand_total(self) -> Decimal:
        return self.total_amount - (self.discount_amt or Decimal("0"))
