# ==============================================================================
# EXPENSE SCHEMAS
# ==============================================================================

from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Dict, Optional

from pydantic import Field

from backoffice.core.constants import ExpenseType
from backoffice.schemas.base import BaseSchema, TimestampSchema


class ExpenseCreate(BaseSchema):
    """Schema for recording an expense."""

    date: dt.date
    details: Optional[str] = None
    spend_by: Optional[str] = Field(None, max_length=255)
    amount: Decimal = Field(..., gt=0)
    type: str = Field(ExpenseType.SPEND, min_length=1, max_length=50)


class ExpenseUpdate(BaseSchema):
    date: Optional[dt.date] = None
    details: Optional[str] = None
    spend_by: Optional[str] = Field(None, max_length=255)
    amount: Optional[Decimal] = Field(None, gt=0)
    type: Optional[str] = Field(None, min_length=1, max_length=50)


class ExpenseResponse(TimestampSchema):
    id: str
    date: dt.date
    details: Optional[str] = None
    spend_by: Optional[str] = None
    amount: Decimal
    type: str


class ExpenseSummary(BaseSchema):
    """
    Expense book totals.

    Attributes:
        total_spend: Sum over every type except credit
        total_credit: Sum over credit entries
        spend_by_user: Per person, `spend` entries only
        total_by_user: Per person, every type
        total_by_type: Per expense type
    """

    count: int = 0
    total_spend: Decimal = Decimal("0")
    total_credit: Decimal = Decimal("0")
    spend_by_user: Dict[str, Decimal] = Field(default_factory=dict)
    total_by_user: Dict[str, Decimal] = Field(default_factory=dict)
    total_by_type: Dict[str, Decimal] = Field(default_factory=dict)
