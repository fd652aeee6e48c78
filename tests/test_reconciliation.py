# ==============================================================================
# ORDER RECONCILIATION TESTS
# ==============================================================================

from __future__ import annotations

from decimal import Decimal
from typing import List, Optional, Tuple

import pydantic
import pytest

from backoffice.core.exceptions import (
    BadRequestError,
    LineItemWriteFailedError,
    OrderUpdateFailedError,
    StockShortfallError,
)
from backoffice.schemas.order import DiscountSpec, LineItemDraft, OrderDraft
from backoffice.services.order_service import draft_from_order
from backoffice.services.reconciliation import (
    OrderReconciliationEngine,
    build_changes,
    compute_discount,
    compute_stock_delta,
    compute_subtotal,
    format_percentage,
    quantity_map,
    read_order,
)


def line(product_id: str, quantity: int, price: str) -> LineItemDraft:
    return LineItemDraft(product_id=product_id, quantity=quantity, price=Decimal(price))


async def seed_order(
    gateway,
    items: List[Tuple[str, int, str]],
    total_amount: str = "20.00",
    discount_amt: str = "0.00",
    discount_percentage: Optional[str] = None,
) -> OrderDraft:
    """Store an order with line items and return it as an edit draft."""
    order = gateway.seed(
        "orders",
        short_id="ORD-001",
        full_name="Ravi Kumar",
        phone="9876543210",
        address="12 Market Street",
        status="Enquiry Received",
        total_amount=Decimal(total_amount),
        discount_amt=Decimal(discount_amt),
        discount_percentage=discount_percentage,
    )
    for product_id, quantity, price in items:
        gateway.seed(
            "order_items",
            order_id=order["id"],
            product_id=product_id,
            quantity=quantity,
            price=Decimal(price),
            total_price=quantity * Decimal(price),
        )
    return draft_from_order(await read_order(gateway, order["id"]))


def stock_of(gateway, product_id: str) -> int:
    return gateway.tables["products"][product_id]["stock"]


def item_rows(gateway, order_id: str) -> List[Tuple[str, int, Decimal]]:
    return sorted(
        (row["product_id"], row["quantity"], row["price"])
        for row in gateway.rows("order_items", order_id=order_id)
    )


# ==============================================================================
# PURE HELPERS
# ==============================================================================

class TestPureHelpers:
    """Tests for the calculation helpers."""

    def test_subtotal_sums_quantity_times_price(self):
        items = [line("A", 1, "10.00"), line("B", 3, "5.00")]
        assert compute_subtotal(items) == Decimal("25.00")

    def test_subtotal_of_no_items_is_zero(self):
        assert compute_subtotal([]) == Decimal("0")

    def test_amount_discount_is_taken_literally(self):
        amount, percentage = compute_discount(
            Decimal("25"), DiscountSpec(mode="amount", value=Decimal("2"))
        )
        assert amount == Decimal("2.00")
        assert percentage is None

    def test_percentage_discount_is_computed_from_subtotal(self):
        amount, percentage = compute_discount(
            Decimal("100"), DiscountSpec(mode="percentage", value=Decimal("10"))
        )
        assert amount == Decimal("10.00")
        assert percentage == "10"

    def test_percentage_discount_rounds_to_cents(self):
        amount, percentage = compute_discount(
            Decimal("100"), DiscountSpec(mode="percentage", value=Decimal("33.333"))
        )
        assert amount == Decimal("33.33")
        assert percentage == "33.333"

    def test_percentage_above_hundred_is_rejected(self):
        with pytest.raises(pydantic.ValidationError):
            DiscountSpec(mode="percentage", value=Decimal("150"))

    def test_format_percentage_drops_trailing_zeros(self):
        assert format_percentage(Decimal("10.0")) == "10"
        assert format_percentage(Decimal("12.50")) == "12.5"

    def test_quantity_map_sums_repeated_products(self):
        items = [line("A", 2, "10"), line("A", 3, "10"), line("B", 1, "5")]
        assert quantity_map(items) == {"A": 5, "B": 1}

    def test_stock_delta_covers_both_sides(self):
        delta = compute_stock_delta({"A": 2, "C": 4}, {"A": 1, "B": 3})
        assert delta == {"A": -1, "C": -4, "B": 3}

    def test_absent_and_zero_quantity_give_same_delta(self):
        original = quantity_map([line("A", 2, "10"), line("B", 1, "5")])
        absent = quantity_map([line("A", 2, "10")])
        zero = quantity_map(
            item for item in [line("A", 2, "10"), line("B", 0, "5")] if item.quantity > 0
        )
        assert compute_stock_delta(original, absent) == compute_stock_delta(original, zero)

    def test_changes_only_list_differing_fields(self):
        original = OrderDraft(id="o1", full_name="Ravi", phone="1", city="Chennai")
        changes = build_changes(
            original,
            {"full_name": "Ravi", "phone": "2", "city": "Chennai"},
            {"A": 1},
            {"A": 1},
        )
        assert changes == {"phone": {"from": "1", "to": "2"}}

    def test_changes_list_moved_quantities(self):
        original = OrderDraft(id="o1")
        changes = build_changes(original, {}, {"A": 2}, {"A": 1, "B": 3})
        assert changes["items"] == [
            {"product_id": "A", "from": 2, "to": 1},
            {"product_id": "B", "from": 0, "to": 3},
        ]


# ==============================================================================
# SAVE ORDER EDITS
# ==============================================================================

class TestSaveOrderEdits:
    """Tests for OrderReconciliationEngine.save_order_edits."""

    @pytest.mark.asyncio
    async def test_amount_discount_edit(self, gateway):
        """A x2 -> A x1 + B x3 with a flat discount of 2."""
        original = await seed_order(gateway, [("A", 2, "10.00")])
        target = original.model_copy(
            update={"items": [line("A", 1, "10.00"), line("B", 3, "5.00")]}
        )

        result = await OrderReconciliationEngine(gateway).save_order_edits(
            original, target, DiscountSpec(mode="amount", value=Decimal("2")), "admin-1"
        )

        assert result.order.total_amount == Decimal("25.00")
        assert result.order.discount_amt == Decimal("2.00")
        assert result.order.discount_percentage is None
        assert result.order.grand_total == Decimal("23.00")
        assert result.stock_delta == {"A": -1, "B": 3}
        assert result.warnings == []

        assert stock_of(gateway, "A") == 11
        assert stock_of(gateway, "B") == 7
        assert item_rows(gateway, original.id) == [
            ("A", 1, Decimal("10.00")),
            ("B", 3, Decimal("5.00")),
        ]

        audits = gateway.rows("order_audits", order_id=original.id)
        assert len(audits) == 1
        assert audits[0]["changed_by"] == "admin-1"
        assert audits[0]["changes"]["discount_amt"] == {"from": 0.0, "to": 2.0}
        assert audits[0]["changes"]["items"] == [
            {"product_id": "A", "from": 2, "to": 1},
            {"product_id": "B", "from": 0, "to": 3},
        ]

    @pytest.mark.asyncio
    async def test_percentage_discount_edit(self, gateway):
        original = await seed_order(gateway, [("A", 2, "10.00")])
        target = original.model_copy(update={"items": [line("A", 10, "10.00")]})

        result = await OrderReconciliationEngine(gateway).save_order_edits(
            original, target, DiscountSpec(mode="percentage", value=Decimal("10"))
        )

        assert result.order.total_amount == Decimal("100.00")
        assert result.order.discount_amt == Decimal("10.00")
        assert result.order.discount_percentage == "10"
        assert result.changes["discount_percentage"] == {"from": None, "to": "10"}
        assert stock_of(gateway, "A") == 2

    @pytest.mark.asyncio
    async def test_total_ignores_stored_total(self, gateway):
        original = await seed_order(gateway, [("A", 2, "10.00")], total_amount="999.00")
        target = original.model_copy(update={"items": [line("A", 1, "10.00"), line("B", 3, "5.00")]})

        result = await OrderReconciliationEngine(gateway).save_order_edits(
            original, target, DiscountSpec()
        )

        assert result.order.total_amount == Decimal("25.00")

    @pytest.mark.asyncio
    async def test_scalar_fields_are_saved_and_audited(self, gateway):
        original = await seed_order(gateway, [("A", 2, "10.00")])
        target = original.model_copy(update={"city": "Madurai", "status": "Packing"})

        result = await OrderReconciliationEngine(gateway).save_order_edits(
            original, target, DiscountSpec()
        )

        assert result.order.city == "Madurai"
        assert result.order.status == "Packing"
        assert result.changes["city"] == {"from": None, "to": "Madurai"}
        assert "items" not in result.changes
        assert result.stock_delta == {}
        assert stock_of(gateway, "A") == 10

    @pytest.mark.asyncio
    async def test_zero_quantity_line_is_removed(self, gateway):
        original = await seed_order(gateway, [("A", 2, "10.00"), ("B", 1, "5.00")])
        target = original.model_copy(
            update={"items": [line("A", 2, "10.00"), line("B", 0, "5.00")]}
        )

        result = await OrderReconciliationEngine(gateway).save_order_edits(
            original, target, DiscountSpec()
        )

        assert [item.product_id for item in result.order.items] == ["A"]
        assert result.stock_delta == {"B": -1}
        assert stock_of(gateway, "B") == 11

    @pytest.mark.asyncio
    async def test_shortfall_writes_nothing(self, gateway):
        original = await seed_order(gateway, [("C", 1, "20.00")])
        target = original.model_copy(update={"items": [line("C", 6, "20.00")]})

        with pytest.raises(StockShortfallError) as exc_info:
            await OrderReconciliationEngine(gateway).save_order_edits(
                original, target, DiscountSpec()
            )

        assert exc_info.value.product_id == "C"
        assert exc_info.value.available == 2
        assert exc_info.value.required == 5
        assert exc_info.value.status_code == 409
        assert gateway.writes == []
        assert stock_of(gateway, "C") == 2
        assert item_rows(gateway, original.id) == [("C", 1, Decimal("20.00"))]

    @pytest.mark.asyncio
    async def test_unknown_product_counts_as_no_stock(self, gateway):
        original = await seed_order(gateway, [("A", 1, "10.00")])
        target = original.model_copy(update={"items": [line("Z", 1, "1.00")]})

        with pytest.raises(StockShortfallError) as exc_info:
            await OrderReconciliationEngine(gateway).save_order_edits(
                original, target, DiscountSpec()
            )

        assert exc_info.value.available == 0
        assert gateway.writes == []

    @pytest.mark.asyncio
    async def test_original_without_id_is_rejected(self, gateway):
        with pytest.raises(BadRequestError):
            await OrderReconciliationEngine(gateway).save_order_edits(
                OrderDraft(), OrderDraft(), DiscountSpec()
            )


# ==============================================================================
# FAILURE HANDLING
# ==============================================================================

class TestSaveOrderEditsFailures:
    """Tests for partial failures of the save sequence."""

    @pytest.mark.asyncio
    async def test_order_update_failure_stops_the_save(self, gateway):
        original = await seed_order(gateway, [("A", 2, "10.00")])
        target = original.model_copy(update={"items": [line("A", 1, "10.00")]})
        gateway.fail_on("update", "orders")

        with pytest.raises(OrderUpdateFailedError):
            await OrderReconciliationEngine(gateway).save_order_edits(
                original, target, DiscountSpec()
            )

        assert item_rows(gateway, original.id) == [("A", 2, Decimal("10.00"))]
        assert stock_of(gateway, "A") == 10
        assert gateway.rows("order_audits") == []

    @pytest.mark.asyncio
    async def test_delete_failure_keeps_original_items(self, gateway):
        original = await seed_order(gateway, [("A", 2, "10.00")])
        target = original.model_copy(update={"items": [line("A", 1, "10.00")]})
        gateway.fail_on("bulk_delete", "order_items")

        with pytest.raises(LineItemWriteFailedError) as exc_info:
            await OrderReconciliationEngine(gateway).save_order_edits(
                original, target, DiscountSpec()
            )

        assert exc_info.value.rolled_back is False
        assert item_rows(gateway, original.id) == [("A", 2, Decimal("10.00"))]
        assert stock_of(gateway, "A") == 10

    @pytest.mark.asyncio
    async def test_insert_failure_restores_original_items(self, gateway):
        original = await seed_order(gateway, [("A", 2, "10.00"), ("B", 1, "5.00")])
        target = original.model_copy(update={"items": [line("A", 1, "10.00")]})
        gateway.fail_on("bulk_create", "order_items")

        with pytest.raises(LineItemWriteFailedError) as exc_info:
            await OrderReconciliationEngine(gateway).save_order_edits(
                original, target, DiscountSpec()
            )

        assert exc_info.value.rolled_back is True
        assert exc_info.value.rollback_error is None
        assert exc_info.value.error_code == "LINE_ITEM_WRITE_FAILED"
        assert item_rows(gateway, original.id) == [
            ("A", 2, Decimal("10.00")),
            ("B", 1, Decimal("5.00")),
        ]
        assert stock_of(gateway, "A") == 10
        assert stock_of(gateway, "B") == 10
        assert gateway.rows("order_audits") == []

    @pytest.mark.asyncio
    async def test_restored_items_keep_their_stored_totals(self, gateway):
        seeded = await seed_order(gateway, [("A", 2, "10.00")])
        for row in gateway.tables["order_items"].values():
            row["total_price"] = Decimal("18.00")
        original = draft_from_order(await read_order(gateway, seeded.id))
        assert original.items[0].total_price == Decimal("18.00")
        target = original.model_copy(update={"items": [line("A", 1, "10.00")]})
        gateway.fail_on("bulk_create", "order_items")

        with pytest.raises(LineItemWriteFailedError):
            await OrderReconciliationEngine(gateway).save_order_edits(
                original, target, DiscountSpec()
            )

        restored = gateway.rows("order_items", order_id=original.id)
        assert [row["total_price"] for row in restored] == [Decimal("18.00")]

    @pytest.mark.asyncio
    async def test_failed_rollback_needs_manual_intervention(self, gateway):
        original = await seed_order(gateway, [("A", 2, "10.00")])
        target = original.model_copy(update={"items": [line("A", 1, "10.00")]})
        gateway.fail_on("bulk_create", "order_items", times=2)

        with pytest.raises(LineItemWriteFailedError) as exc_info:
            await OrderReconciliationEngine(gateway).save_order_edits(
                original, target, DiscountSpec()
            )

        error = exc_info.value
        assert error.rollback_error is not None
        assert error.error_code == "MANUAL_INTERVENTION_REQUIRED"
        assert error.status_code == 500
        assert "contact support" in error.message
        assert item_rows(gateway, original.id) == []

    @pytest.mark.asyncio
    async def test_stock_failure_is_a_warning(self, gateway):
        original = await seed_order(gateway, [("A", 2, "10.00")])
        target = original.model_copy(update={"items": [line("A", 3, "10.00")]})
        gateway.fail_on("update", "products")

        result = await OrderReconciliationEngine(gateway).save_order_edits(
            original, target, DiscountSpec()
        )

        assert result.order.total_amount == Decimal("30.00")
        assert len(result.warnings) == 1
        assert result.warnings[0]["code"] == "STOCK_ADJUSTMENT_FAILED"
        assert result.warnings[0]["product_id"] == "A"
        assert stock_of(gateway, "A") == 10
        assert len(gateway.rows("order_audits")) == 1

    @pytest.mark.asyncio
    async def test_one_stock_failure_does_not_stop_others(self, gateway):
        original = await seed_order(gateway, [("A", 2, "10.00")])
        target = original.model_copy(update={"items": [line("A", 1, "10.00"), line("B", 2, "5.00")]})
        gateway.fail_on("update", "products")

        result = await OrderReconciliationEngine(gateway).save_order_edits(
            original, target, DiscountSpec()
        )

        assert [warning["product_id"] for warning in result.warnings] == ["A"]
        assert stock_of(gateway, "A") == 10
        assert stock_of(gateway, "B") == 8

    @pytest.mark.asyncio
    async def test_audit_failure_is_a_warning(self, gateway):
        original = await seed_order(gateway, [("A", 2, "10.00")])
        target = original.model_copy(update={"items": [line("A", 1, "10.00")]})
        gateway.fail_on("create", "order_audits")

        result = await OrderReconciliationEngine(gateway).save_order_edits(
            original, target, DiscountSpec()
        )

        assert [warning["code"] for warning in result.warnings] == ["AUDIT_WRITE_FAILED"]
        assert result.order.total_amount == Decimal("10.00")
        assert stock_of(gateway, "A") == 11
