# ==============================================================================
# ANALYTICS SERVICE - Dashboard Figures
# ==============================================================================
# Date-range resolution plus reducers over orders and products
# ==============================================================================

from __future__ import annotations

import logging
from calendar import monthrange
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional

from backoffice.core.constants import DashboardRange, DatabaseConstants
from backoffice.core.exceptions import ValidationError
from backoffice.core.settings import settings
from backoffice.database.adapters.base_adapter import BaseDatabaseAdapter
from backoffice.schemas.analytics import (
    DailySales,
    DashboardSummary,
    DateRange,
    ProductSales,
)
from backoffice.schemas.catalog import ProductResponse
from backoffice.schemas.order import OrderResponse
from backoffice.services.catalog_service import build_inventory_summary
from backoffice.utils.helpers import as_dict, ensure_aware, field_value, utc_now

logger = logging.getLogger(__name__)

TOP_PRODUCTS_LIMIT = 5


# ==============================================================================
# DATE RANGES
# ==============================================================================

def _start_of(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def _end_of(day: date) -> datetime:
    return datetime.combine(day, time.max, tzinfo=timezone.utc)


def _span(label: str, first: date, last: date) -> DateRange:
    return DateRange(label=label, start=_start_of(first), end=_end_of(last))


def season_range(year: int, start_month: Optional[int] = None) -> DateRange:
    """
    Trading season starting in `year`.

    Example:
        >>> season_range(2024).start.date(), season_range(2024).end.date()
        (datetime.date(2024, 4, 1), datetime.date(2025, 3, 31))
    """
    month = start_month or settings.SEASON_START_MONTH
    first = date(year, month, 1)
    last = date(year + 1, month, 1) - timedelta(days=1)
    return _span(f"{DashboardRange.SEASON_PREFIX}{year}", first, last)


def resolve_date_range(
    range_key: Optional[str] = None,
    start: Optional[date] = None,
    end: Optional[date] = None,
    now: Optional[datetime] = None,
) -> DateRange:
    """
    Turn a preset or custom dates into an inclusive window.

    Custom start/end dates win over the preset. Weeks start on Sunday.

    Raises:
        ValidationError: Unknown preset or start after end
    """
    today = (now or utc_now()).date()

    if start or end:
        first = start or date(DashboardRange.ALL_TIME_START_YEAR, 1, 1)
        last = end or today
        if first > last:
            raise ValidationError(
                message="Start date must not be after end date",
                errors={"start": str(first), "end": str(last)},
            )
        return _span("custom", first, last)

    key = (range_key or DashboardRange.DEFAULT).strip().lower()

    if key == DashboardRange.ALL:
        return _span(
            key,
            date(DashboardRange.ALL_TIME_START_YEAR, 1, 1),
            date(DashboardRange.ALL_TIME_END_YEAR, 12, 31),
        )
    if key == DashboardRange.TODAY:
        return _span(key, today, today)
    if key == DashboardRange.LAST_90:
        return _span(key, today - timedelta(days=89), today)
    if key == DashboardRange.WEEK:
        sunday = today - timedelta(days=(today.weekday() + 1) % 7)
        return _span(key, sunday, sunday + timedelta(days=6))
    if key == DashboardRange.MONTH:
        last_day = monthrange(today.year, today.month)[1]
        return _span(key, today.replace(day=1), today.replace(day=last_day))
    if key == DashboardRange.YEAR:
        return _span(key, date(today.year, 1, 1), date(today.year, 12, 31))
    if key.startswith(DashboardRange.SEASON_PREFIX):
        year = key[len(DashboardRange.SEASON_PREFIX):]
        if year.isdigit() and len(year) == 4:
            return season_range(int(year))

    raise ValidationError(
        message=f"Unknown date range '{range_key}'",
        errors={"range": "use all, today, last90, week, month, year, season-YYYY or custom dates"},
    )


# ==============================================================================
# REDUCERS
# ==============================================================================

def is_completed(status: Optional[str], completed_statuses: Iterable[str]) -> bool:
    return (status or "").lower() in set(completed_statuses)


def order_profit(order: OrderResponse, unit_costs: Dict[str, Decimal]) -> Decimal:
    """Margin over purchase cost of every line, less the order discount."""
    margin = sum(
        (
            (item.price - unit_costs.get(item.product_id, Decimal("0"))) * item.quantity
            for item in order.items
        ),
        Decimal("0"),
    )
    return margin - (order.discount_amt or Decimal("0"))


def summarize_orders(
    orders: Iterable[OrderResponse],
    date_range: DateRange,
    unit_costs: Optional[Dict[str, Decimal]] = None,
    product_names: Optional[Dict[str, str]] = None,
    completed_statuses: Optional[Iterable[str]] = None,
) -> DashboardSummary:
    """
    Dashboard figures for orders created inside the range.

    Revenue is the gross total_amount of completed orders. Daily sales and
    top products are built from completed orders as well.
    """
    unit_costs = unit_costs or {}
    product_names = product_names or {}
    completed_statuses = [
        status.lower()
        for status in (completed_statuses or settings.COMPLETED_ORDER_STATUSES)
    ]

    summary = DashboardSummary(range=date_range)
    daily: Dict[str, DailySales] = {}
    by_product: Dict[str, ProductSales] = {}

    for order in orders:
        if order.created_at is None:
            continue
        created = ensure_aware(order.created_at)
        if not date_range.start <= created <= date_range.end:
            continue

        summary.total_orders += 1
        summary.status_counts[order.status] = summary.status_counts.get(order.status, 0) + 1

        if not is_completed(order.status, completed_statuses):
            continue

        summary.completed_orders += 1
        summary.total_revenue += order.total_amount
        summary.total_profit += order_profit(order, unit_costs)

        day = created.date().isoformat()
        sales = daily.setdefault(day, DailySales(date=day))
        sales.revenue += order.total_amount
        sales.orders += 1

        for item in order.items:
            product = by_product.setdefault(
                item.product_id,
                ProductSales(
                    product_id=item.product_id,
                    name=product_names.get(item.product_id),
                ),
            )
            product.quantity += item.quantity
            product.revenue += item.total_price

    summary.daily_sales = [daily[day] for day in sorted(daily)]
    summary.top_products = sorted(
        by_product.values(),
        key=lambda product: product.revenue,
        reverse=True,
    )[:TOP_PRODUCTS_LIMIT]
    return summary


# ==============================================================================
# SERVICE
# ==============================================================================

class AnalyticsService:
    """Builds the admin dashboard from stored orders and products."""

    def __init__(self, adapter: BaseDatabaseAdapter) -> None:
        self._adapter = adapter

    async def dashboard(
        self,
        range_key: Optional[str] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> DashboardSummary:
        date_range = resolve_date_range(range_key, start, end)

        orders = await self._load_orders()
        products = [
            ProductResponse.model_validate(as_dict(product))
            for product in await self._adapter.get_all(
                DatabaseConstants.PRODUCTS_COLLECTION,
                limit=DatabaseConstants.MAX_SCAN_LIMIT,
            )
        ]

        summary = summarize_orders(
            orders,
            date_range,
            unit_costs={product.id: product.apr for product in products},
            product_names={product.id: product.name for product in products},
        )
        summary.inventory = build_inventory_summary(products, settings.LOW_STOCK_THRESHOLD)

        logger.debug(
            f"Dashboard {date_range.label}: {summary.total_orders} orders, "
            f"revenue {summary.total_revenue}"
        )
        return summary

    async def _load_orders(self) -> List[OrderResponse]:
        orders = await self._adapter.get_all(
            DatabaseConstants.ORDERS_COLLECTION,
            limit=DatabaseConstants.MAX_SCAN_LIMIT,
            sort_by="created_at",
        )
        items = await self._adapter.get_all(
            DatabaseConstants.ORDER_ITEMS_COLLECTION,
            limit=DatabaseConstants.MAX_SCAN_LIMIT,
        )

        items_by_order: Dict[str, List[Dict[str, Any]]] = {}
        for item in items:
            items_by_order.setdefault(field_value(item, "order_id"), []).append(as_dict(item))

        return [
            OrderResponse.model_validate({
                **as_dict(order),
                "items": items_by_order.get(field_value(order, "id"), []),
            })
            for order in orders
        ]
