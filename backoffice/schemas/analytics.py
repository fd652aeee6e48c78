# ==============================================================================
# ANALYTICS SCHEMAS - Dashboard
# ==============================================================================

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import Field

from backoffice.schemas.base import BaseSchema
from backoffice.schemas.catalog import InventorySummary


class DateRange(BaseSchema):
    """Resolved dashboard window, both ends inclusive."""

    label: str
    start: datetime
    end: datetime


class DailySales(BaseSchema):
    date: str = Field(..., description="ISO date (YYYY-MM-DD)")
    revenue: Decimal = Decimal("0")
    orders: int = 0


class ProductSales(BaseSchema):
    product_id: str
    name: Optional[str] = None
    quantity: int = 0
    revenue: Decimal = Decimal("0")


class DashboardSummary(BaseSchema):
    """
    Dashboard figures over one date range.

    Revenue and profit count completed orders only; order counts include
    every status.
    """

    range: DateRange
    total_orders: int = 0
    completed_orders: int = 0
    total_revenue: Decimal = Decimal("0")
    total_profit: Decimal = Decimal("0")
    daily_sales: List[DailySales] = Field(default_factory=list)
    status_counts: Dict[str, int] = Field(default_factory=dict)
    top_products: List[ProductSales] = Field(default_factory=list)
    inventory: Optional[InventorySummary] = None
