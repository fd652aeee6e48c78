# ==============================================================================
# ANALYTICS TESTS
# ==============================================================================

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from backoffice.core.exceptions import ValidationError
from backoffice.schemas.order import OrderResponse
from backoffice.services.analytics_service import resolve_date_range, summarize_orders
from conftest import create_product

# A Wednesday
NOW = datetime(2024, 6, 12, 15, 30, tzinfo=timezone.utc)


def order(id, status, created, total, items, discount="0"):
    return OrderResponse(
        id=id,
        short_id=f"ORD-{id}",
        full_name="Customer",
        phone="9876543210",
        status=status,
        total_amount=Decimal(total),
        discount_amt=Decimal(discount),
        created_at=created,
        items=[
            {
                "id": f"{id}-{product_id}",
                "order_id": id,
                "product_id": product_id,
                "quantity": quantity,
                "price": Decimal(price),
                "total_price": quantity * Decimal(price),
            }
            for product_id, quantity, price in items
        ],
    )


class TestResolveDateRange:
    """Tests for dashboard date ranges."""

    def test_today(self):
        window = resolve_date_range("today", now=NOW)
        assert window.start == datetime(2024, 6, 12, tzinfo=timezone.utc)
        assert window.end.date() == date(2024, 6, 12)

    def test_last_90_days_includes_today(self):
        window = resolve_date_range("last90", now=NOW)
        assert window.start.date() == date(2024, 3, 15)
        assert window.end.date() == date(2024, 6, 12)

    def test_week_starts_on_sunday(self):
        window = resolve_date_range("week", now=NOW)
        assert window.start.date() == date(2024, 6, 9)
        assert window.end.date() == date(2024, 6, 15)

    def test_month_and_year(self):
        month = resolve_date_range("month", now=NOW)
        assert (month.start.date(), month.end.date()) == (date(2024, 6, 1), date(2024, 6, 30))
        year = resolve_date_range("year", now=NOW)
        assert (year.start.date(), year.end.date()) == (date(2024, 1, 1), date(2024, 12, 31))

    def test_season(self):
        window = resolve_date_range("season-2024", now=NOW)
        assert window.start.date() == date(2024, 4, 1)
        assert window.end.date() == date(2025, 3, 31)

    def test_custom_dates_win_over_preset(self):
        window = resolve_date_range("today", start=date(2024, 1, 1), end=date(2024, 1, 31), now=NOW)
        assert window.label == "custom"
        assert window.start.date() == date(2024, 1, 1)
        assert window.end.date() == date(2024, 1, 31)

    def test_start_after_end_is_rejected(self):
        with pytest.raises(ValidationError):
            resolve_date_range(start=date(2024, 2, 1), end=date(2024, 1, 1), now=NOW)

    @pytest.mark.parametrize("key", ["fortnight", "season-24", "season-abcd"])
    def test_unknown_range_is_rejected(self, key):
        with pytest.raises(ValidationError):
            resolve_date_range(key, now=NOW)


class TestSummarizeOrders:
    """Tests for the dashboard reducer."""

    @pytest.fixture
    def orders(self):
        return [
            order("1", "Shipped", datetime(2024, 6, 10, 10, tzinfo=timezone.utc), "100",
                  [("A", 5, "20")], discount="10"),
            order("2", "Delivered", datetime(2024, 6, 11, 9, tzinfo=timezone.utc), "50",
                  [("B", 10, "5")]),
            order("3", "Enquiry Received", datetime(2024, 6, 11, 12, tzinfo=timezone.utc), "70",
                  [("A", 1, "70")]),
            order("4", "Shipped", datetime(2024, 5, 1, tzinfo=timezone.utc), "999",
                  [("A", 1, "999")]),
        ]

    def test_figures(self, orders):
        window = resolve_date_range(start=date(2024, 6, 1), end=date(2024, 6, 30), now=NOW)
        summary = summarize_orders(
            orders,
            window,
            unit_costs={"A": Decimal("12"), "B": Decimal("3")},
            product_names={"A": "Flower Pot", "B": "Sparkler"},
        )

        assert summary.total_orders == 3
        assert summary.completed_orders == 2
        assert summary.total_revenue == Decimal("150")
        assert summary.total_profit == Decimal("50")
        assert summary.status_counts == {"Shipped": 1, "Delivered": 1, "Enquiry Received": 1}
        assert [(day.date, day.revenue) for day in summary.daily_sales] == [
            ("2024-06-10", Decimal("100")),
            ("2024-06-11", Decimal("50")),
        ]
        assert [(p.product_id, p.name, p.quantity) for p in summary.top_products] == [
            ("A", "Flower Pot", 5),
            ("B", "Sparkler", 10),
        ]

    def test_completed_statuses_are_configurable(self, orders):
        window = resolve_date_range("all", now=NOW)
        summary = summarize_orders(orders, window, completed_statuses=["enquiry received"])
        assert summary.completed_orders == 1
        assert summary.total_revenue == Decimal("70")


class TestDashboardEndpoint:
    """Tests for the dashboard endpoint."""

    @pytest.mark.asyncio
    async def test_dashboard_counts_placed_orders(self, client, sample_delivery):
        product = await create_product(client, stock=3)
        response = await client.post("/api/v1/orders", json={
            "delivery": sample_delivery,
            "items": [{"product_id": product["id"], "quantity": 1}],
        })
        assert response.status_code == 201

        response = await client.get("/api/v1/analytics/dashboard", params={"range": "all"})
        assert response.status_code == 200
        summary = response.json()["data"]
        assert summary["total_orders"] == 1
        assert summary["completed_orders"] == 0
        assert summary["status_counts"] == {"Enquiry Received": 1}
        assert summary["inventory"]["low_stock"][0]["id"] == product["id"]

    @pytest.mark.asyncio
    async def test_unknown_range(self, client):
        response = await client.get("/api/v1/analytics/dashboard", params={"range": "decade"})
        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"
