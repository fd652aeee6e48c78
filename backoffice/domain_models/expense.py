# ==============================================================================
# EXPENSE MODEL - Shop Expense Book
# ==============================================================================

from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Optional

from sqlalchemy import Date, String, Text, Numeric
from sqlalchemy.orm import Mapped, mapped_column

from backoffice.core.constants import ExpenseType
from backoffice.domain_models.base import SQLBase, TimestampMixin


class Expense(SQLBase, TimestampMixin):
    """
    Expense book entry.

    `type` is free text; "credit" entries are money received and every
    other type counts as spend.
    """

    __tablename__ = "expenses"

    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    details: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    spend_by: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, index=True)
    amount: Mapped[Decimal] = mapped_column(
        Numeric(precision=18, scale=2),
        nullable=False,
    )
    type: Mapped[str] = mapped_column(
        String(50),
        default=ExpenseType.SPEND,
        nullable=False,
    )
