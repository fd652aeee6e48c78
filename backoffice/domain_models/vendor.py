# ==============================================================================
# VENDOR MODELS - Suppliers and Their Ledger
# ==============================================================================

from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Optional

from sqlalchemy import Date, ForeignKey, String, Text, Numeric
from sqlalchemy.orm import Mapped, mapped_column

from backoffice.core.constants import VendorTransactionType
from backoffice.domain_models.base import SQLBase, TimestampMixin


class Vendor(SQLBase, TimestampMixin):
    """Supplier the shop buys stock from."""

    __tablename__ = "vendors"

    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    phone: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    gstin: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)

    def __repr__(self) -> str:
        return f"<Vendor(id={self.id}, name={self.name})>"


class VendorTransaction(SQLBase, TimestampMixin):
    """
    One ledger entry against a vendor.

    CREDIT is a purchase on credit (the shop owes more), DEBIT is a payment
    made to the vendor.
    """

    __tablename__ = "vendor_transactions"

    vendor_id: Mapped[str] = mapped_column(
        ForeignKey("vendors.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    type: Mapped[str] = mapped_column(
        String(10),
        default=VendorTransactionType.CREDIT,
        nullable=False,
    )
    amount: Mapped[Decimal] = mapped_column(
        Numeric(precision=18, scale=2),
        nullable=False,
    )
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    transaction_date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
