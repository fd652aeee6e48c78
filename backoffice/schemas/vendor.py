# ==============================================================================
# VENDOR SCHEMAS - Suppliers and Ledger
# ==============================================================================

from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import List, Optional

from pydantic import Field

from backoffice.schemas.base import BaseSchema, TimestampSchema


class VendorCreate(BaseSchema):
    """Schema for creating a vendor."""

    name: str = Field(..., min_length=1, max_length=255)
    phone: Optional[str] = Field(None, max_length=30)
    email: Optional[str] = Field(None, max_length=255)
    address: Optional[str] = None
    gstin: Optional[str] = Field(None, max_length=20, description="GST registration number")


class VendorResponse(TimestampSchema):
    id: str
    name: str
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    gstin: Optional[str] = None


class VendorTransactionCreate(BaseSchema):
    """
    Ledger entry input.

    CREDIT records a purchase on credit, DEBIT a payment to the vendor.
    """

    type: str = Field(..., pattern="^(CREDIT|DEBIT)$")
    amount: Decimal = Field(..., gt=0)
    description: Optional[str] = None
    transaction_date: dt.date


class VendorTransactionUpdate(BaseSchema):
    type: Optional[str] = Field(None, pattern="^(CREDIT|DEBIT)$")
    amount: Optional[Decimal] = Field(None, gt=0)
    description: Optional[str] = None
    transaction_date: Optional[dt.date] = None


class VendorTransactionResponse(TimestampSchema):
    id: str
    vendor_id: str
    type: str
    amount: Decimal
    description: Optional[str] = None
    transaction_date: dt.date


class LedgerEntry(VendorTransactionResponse):
    """Ledger row with the payable balance after it."""

    running_balance: Decimal


class VendorLedger(BaseSchema):
    """Vendor with chronologically ordered ledger and totals."""

    vendor: VendorResponse
    entries: List[LedgerEntry] = Field(default_factory=list)
    total_credit: Decimal = Decimal("0")
    total_debit: Decimal = Decimal("0")
    current_balance: Decimal = Decimal("0")
