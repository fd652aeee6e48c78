# ==============================================================================
# ORDER MODELS - Enquiry Orders, Line Items and Audit Trail
# ==============================================================================
# Line items are replaced wholesale on edit; audits are append-only
# ==============================================================================

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Optional

from sqlalchemy import ForeignKey, Integer, JSON, String, Text, Numeric
from sqlalchemy.orm import Mapped, mapped_column

from backoffice.core.constants import OrderStatus
from backoffice.domain_models.base import SQLBase, TimestampMixin


class Order(SQLBase, TimestampMixin):
    """
    Customer enquiry order.

    `total_amount` is the gross line total before discount. The grand total
    shown to customers is `total_amount - discount_amt` and is never stored.
    `discount_percentage` keeps the literal percent the admin typed and is
    null when the discount was entered as an amount.

    Attributes:
        short_id: Human-readable order code (ORD-001)
        user_id: Customer who placed the order
        status: One of OrderStatus.ALL
        referred_by: Phone number of the referrer, if any
        lr_number: Lorry receipt number, required once shipped
    """

    __tablename__ = "orders"

    short_id: Mapped[str] = mapped_column(
        String(50),
        unique=True,
        index=True,
        nullable=False,
    )
    user_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        index=True,
        nullable=True,
    )

    # Customer contact
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    phone: Mapped[str] = mapped_column(String(30), nullable=False)
    alternate_phone: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)

    # Shipping address
    address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    city: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    district: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    state: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    pincode: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)

    # Amounts
    total_amount: Mapped[Decimal] = mapped_column(
        Numeric(precision=18, scale=2),
        default=Decimal("0.00"),
        nullable=False,
    )
    discount_amt: Mapped[Decimal] = mapped_column(
        Numeric(precision=18, scale=2),
        default=Decimal("0.00"),
        nullable=False,
    )
    discount_percentage: Mapped[Optional[str]] = mapped_column(
        String(20),
        nullable=True,
    )

    status: Mapped[str] = mapped_column(
        String(50),
        default=OrderStatus.ENQUIRY_RECEIVED,
        index=True,
        nullable=False,
    )
    payment_method: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    referred_by: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    lr_number: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    def __repr__(self) -> str:
        return f"<Order(id={self.id}, short_id={self.short_id}, status={self.status})>"


class OrderItem(SQLBase, TimestampMixin):
    """
    Order line item.

    `price` is the unit price snapshot taken when the line was created and
    `total_price` is written by the caller as quantity x price.
    """

    __tablename__ = "order_items"

    order_id: Mapped[str] = mapped_column(
        ForeignKey("orders.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    product_id: Mapped[str] = mapped_column(
        ForeignKey("products.id", ondelete="RESTRICT"),
        index=True,
        nullable=False,
    )

    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    price: Mapped[Decimal] = mapped_column(
        Numeric(precision=18, scale=2),
        nullable=False,
    )
    total_price: Mapped[Decimal] = mapped_column(
        Numeric(precision=18, scale=2),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<OrderItem(id={self.id}, product_id={self.product_id}, qty={self.quantity})>"


class OrderAudit(SQLBase, TimestampMixin):
    """
    Append-only record of one successful order edit.

    `changes` maps each changed scalar field to {"from", "to"} and, when
    quantities moved, carries an "items" list of {product_id, from, to}.
    """

    __tablename__ = "order_audits"

    order_id: Mapped[str] = mapped_column(
        ForeignKey("orders.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    changed_by: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    changes: Mapped[Dict[str, Any]] = mapped_column(
        JSON,
        default=dict,
        nullable=False,
    )
