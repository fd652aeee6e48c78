# ==============================================================================
# ORDER SCHEMAS - Enquiry Orders and Order Edits
# ==============================================================================
# Drafts fed to the reconciliation engine plus request/response schemas
# ==============================================================================

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Literal, Optional

from pydantic import Field, computed_field, field_validator, model_validator

from backoffice.core.constants import DiscountMode, OrderStatus
from backoffice.schemas.base import BaseSchema, TimestampSchema


# ==============================================================================
# RECONCILIATION DRAFTS
# ==============================================================================

class LineItemDraft(BaseSchema):
    """
    One line of an order as the editor holds it.

    `price` is the unit price snapshot; `is_new` only marks lines added
    during the edit and has no effect on totals or stock. `total_price`
    is the stored line total of a fetched line; it is written back only
    when original lines are restored, new rows always get quantity x price.
    """

    product_id: str = Field(..., description="Product on this line")
    quantity: int = Field(..., ge=0, description="Units on the line; 0 means removed")
    price: Decimal = Field(..., ge=0, description="Unit price snapshot")
    total_price: Optional[Decimal] = Field(None, description="Stored line total")
    is_new: bool = Field(False, description="Line added during this edit")


class OrderDraft(BaseSchema):
    """
    Order scalar fields plus line items, as fetched or as edited.

    The original draft must carry the order id.
    """

    id: Optional[str] = None
    short_id: Optional[str] = None
    full_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    alternate_phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    district: Optional[str] = None
    state: Optional[str] = None
    pincode: Optional[str] = None
    status: Optional[str] = None
    payment_method: Optional[str] = None
    referred_by: Optional[str] = None
    lr_number: Optional[str] = None
    total_amount: Decimal = Decimal("0")
    discount_amt: Decimal = Decimal("0")
    discount_percentage: Optional[str] = None
    items: List[LineItemDraft] = Field(default_factory=list)


class DiscountSpec(BaseSchema):
    """
    Discount entered for an order.

    In percentage mode `value` is the percent of the recomputed subtotal,
    otherwise it is the literal currency amount.
    """

    mode: Literal["amount", "percentage"] = DiscountMode.AMOUNT
    value: Decimal = Field(Decimal("0"), ge=0)

    @model_validator(mode="after")
    def check_percentage_range(self) -> "DiscountSpec":
        if self.mode == DiscountMode.PERCENTAGE and self.value > 100:
            raise ValueError("Discount percentage cannot exceed 100")
        return self


# ==============================================================================
# REQUESTS
# ==============================================================================

class DeliveryDetails(BaseSchema):
    """Customer contact and shipping address given at checkout."""

    full_name: str = Field(..., min_length=1, max_length=255)
    email: Optional[str] = Field(None, max_length=255)
    phone: str = Field(..., min_length=5, max_length=30)
    alternate_phone: Optional[str] = Field(None, max_length=30)
    address: str = Field(..., min_length=1)
    city: Optional[str] = Field(None, max_length=100)
    district: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    pincode: Optional[str] = Field(None, max_length=20)


class OrderPlaceItem(BaseSchema):
    """Cart line submitted at checkout."""

    product_id: str
    quantity: int = Field(..., ge=1)


class OrderPlaceRequest(BaseSchema):
    """Schema for placing an enquiry order."""

    delivery: DeliveryDetails
    items: List[OrderPlaceItem] = Field(..., min_length=1)
    payment_method: Optional[str] = Field(None, max_length=50)
    referred_by: Optional[str] = Field(None, max_length=30)
    user_id: Optional[str] = None


class OrderEditRequest(BaseSchema):
    """
    Admin edit of an existing order.

    Omitted scalar fields keep their stored value. `items` is the complete
    target set of line items. Name, phone and status may be left out but
    not cleared.
    """

    full_name: Optional[str] = Field(None, max_length=255)
    email: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=30)
    alternate_phone: Optional[str] = Field(None, max_length=30)
    address: Optional[str] = None
    city: Optional[str] = Field(None, max_length=100)
    district: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    pincode: Optional[str] = Field(None, max_length=20)
    status: Optional[str] = None
    payment_method: Optional[str] = Field(None, max_length=50)
    referred_by: Optional[str] = Field(None, max_length=30)
    lr_number: Optional[str] = Field(None, max_length=100)
    items: List[LineItemDraft] = Field(default_factory=list)
    discount: DiscountSpec = Field(default_factory=DiscountSpec)

    @field_validator("full_name", "phone", "status")
    @classmethod
    def reject_null(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            raise ValueError("cannot be null")
        return value


class StatusUpdate(BaseSchema):
    """Order status change; Shipped needs an LR number."""

    status: str = Field(..., description=f"One of: {', '.join(OrderStatus.ALL)}")
    lr_number: Optional[str] = Field(None, max_length=100)


# ==============================================================================
# RESPONSES
# ==============================================================================

class OrderItemResponse(TimestampSchema):
    """Schema for order line item response."""

    id: str
    order_id: str
    product_id: str
    quantity: int
    price: Decimal
    total_price: Decimal


class OrderResponse(TimestampSchema):
    """Schema for order response with line items."""

    id: str
    short_id: str
    user_id: Optional[str] = None
    full_name: str
    email: Optional[str] = None
    phone: str
    alternate_phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    district: Optional[str] = None
    state: Optional[str] = None
    pincode: Optional[str] = None
    total_amount: Decimal
    discount_amt: Decimal = Decimal("0")
    discount_percentage: Optional[str] = None
    status: str
    payment_method: Optional[str] = None
    referred_by: Optional[str] = None
    lr_number: Optional[str] = None
    items: List[OrderItemResponse] = Field(default_factory=list)

    @computed_field
    @property
    def grand_total(self) -> Decimal:
        """Amount payable: gross total less the discount."""
        return self.total_amount - (self.discount_amt or Decimal("0"))


class OrderAuditResponse(BaseSchema):
    """Schema for order audit record."""

    id: str
    order_id: str
    changed_by: Optional[str] = None
    changes: Dict[str, Any] = Field(default_factory=dict)
    created_at: Optional[datetime] = None


class OrderEditResult(BaseSchema):
    """
    Outcome of a successful order save.

    Attributes:
        order: Order and line items re-read after the save
        changes: Diff written to the audit trail
        stock_delta: Net units consumed per product (negative = returned)
        warnings: Non-fatal problems (stock adjustment, audit write)
    """

    order: OrderResponse
    changes: Dict[str, Any] = Field(default_factory=dict)
    stock_delta: Dict[str, int] = Field(default_factory=dict)
    warnings: List[Dict[str, Any]] = Field(default_factory=list)
