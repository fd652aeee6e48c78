# ==============================================================================
# CATALOG MODELS - Categories and Products
# ==============================================================================
# Product catalog with pricing and the stock counter
# ==============================================================================

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from sqlalchemy import Boolean, ForeignKey, Integer, String, Text, Numeric
from sqlalchemy.orm import Mapped, mapped_column

from backoffice.domain_models.base import SQLBase, TimestampMixin


class Category(SQLBase, TimestampMixin):
    """Product category shown on the storefront."""

    __tablename__ = "categories"

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
    )
    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )
    image_url: Mapped[Optional[str]] = mapped_column(
        String(500),
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, name={self.name})>"


class Product(SQLBase, TimestampMixin):
    """
    Product model for the fireworks catalog.

    Attributes:
        category_id: Owning category
        name: Product display name
        product_code: Shop-assigned code printed on price lists
        content: Pack contents (e.g. "10 pcs")
        actual_price: List price before the shop discount
        offer_price: Current sale price; line items snapshot this
        discount_percentage: Display-only discount of offer over actual price
        apr: Purchase cost per unit, used for profit
        stock: Inventory counter, never negative at rest
        is_active: Whether product is listed
    """

    __tablename__ = "products"

    category_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("categories.id", ondelete="SET NULL"),
        index=True,
        nullable=True,
    )

    # Basic info
    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
    )
    product_code: Mapped[Optional[str]] = mapped_column(
        String(50),
        index=True,
        nullable=True,
    )
    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )
    content: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )
    image_url: Mapped[Optional[str]] = mapped_column(
        String(500),
        nullable=True,
    )

    # Pricing
    actual_price: Mapped[Decimal] = mapped_column(
        Numeric(precision=18, scale=2),
        default=Decimal("0.00"),
        nullable=False,
    )
    offer_price: Mapped[Decimal] = mapped_column(
        Numeric(precision=18, scale=2),
        default=Decimal("0.00"),
        nullable=False,
    )
    discount_percentage: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(precision=5, scale=2),
        nullable=True,
    )
    apr: Mapped[Decimal] = mapped_column(
        Numeric(precision=18, scale=2),
        default=Decimal("0.00"),
        nullable=False,
    )

    # Inventory
    stock: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )

    @property
    def in_stock(self) -> bool:
        return self.stock > 0

    def __repr__(self) -> str:
        return f"<Product(id={self.id}, name={self.name}, stock={self.stock})>"
