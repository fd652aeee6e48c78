# ==============================================================================
# QUOTATION TESTS
# ==============================================================================

from decimal import Decimal

import pytest

from backoffice.core.exceptions import DatabaseError, NotFoundError
from backoffice.schemas.quotation import QuotationSave
from backoffice.services.quotation_service import QuotationService
from conftest import create_product


def quotation_payload(*lines, discount="0"):
    return {
        "customer_name": "Murugan Stores",
        "phone": "9876500000",
        "discount_amt": discount,
        "items": [
            {"product_id": product_id, "quantity": quantity, "price": price}
            for product_id, quantity, price in lines
        ],
    }


class TestQuotationEndpoints:
    """Tests for admin quotations."""

    @pytest.mark.asyncio
    async def test_create_quotation(self, client):
        product = await create_product(client)

        response = await client.post(
            "/api/v1/quotations",
            json=quotation_payload((product["id"], 4, "12.50"), discount="5"),
        )

        assert response.status_code == 201
        quotation = response.json()["data"]
        assert quotation["short_id"] == "QT-001"
        assert Decimal(quotation["total_amount"]) == Decimal("50")
        assert Decimal(quotation["grand_total"]) == Decimal("45")
        assert len(quotation["items"]) == 1

    @pytest.mark.asyncio
    async def test_quotations_do_not_touch_stock(self, client):
        product = await create_product(client, stock=3)

        await client.post("/api/v1/quotations", json=quotation_payload((product["id"], 10, "10")))

        response = await client.get(f"/api/v1/products/{product['id']}")
        assert response.json()["data"]["stock"] == 3

    @pytest.mark.asyncio
    async def test_update_replaces_items(self, client):
        a = await create_product(client, name="A")
        b = await create_product(client, name="B")
        created = await client.post("/api/v1/quotations", json=quotation_payload((a["id"], 1, "10")))
        quotation_id = created.json()["data"]["id"]

        response = await client.put(
            f"/api/v1/quotations/{quotation_id}",
            json=quotation_payload((b["id"], 2, "7.50")),
        )

        assert response.status_code == 200
        quotation = response.json()["data"]
        assert quotation["short_id"] == "QT-001"
        assert [item["product_id"] for item in quotation["items"]] == [b["id"]]
        assert Decimal(quotation["total_amount"]) == Decimal("15")

    @pytest.mark.asyncio
    async def test_list_and_delete(self, client):
        product = await create_product(client)
        first = await client.post("/api/v1/quotations", json=quotation_payload((product["id"], 1, "10")))
        second = await client.post("/api/v1/quotations", json=quotation_payload((product["id"], 1, "10")))
        assert second.json()["data"]["short_id"] == "QT-002"

        response = await client.get("/api/v1/quotations")
        assert len(response.json()["data"]) == 2

        quotation_id = first.json()["data"]["id"]
        response = await client.delete(f"/api/v1/quotations/{quotation_id}")
        assert response.status_code == 200

        response = await client.get(f"/api/v1/quotations/{quotation_id}")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_quotation_needs_items(self, client):
        response = await client.post("/api/v1/quotations", json=quotation_payload())
        assert response.status_code == 422


class TestQuotationSaveFailures:
    """Item write failures leave no half-saved quotation behind."""

    @staticmethod
    def save(*lines, customer="Murugan Stores"):
        payload = quotation_payload(*lines)
        payload["customer_name"] = customer
        return QuotationSave.model_validate(payload)

    @pytest.mark.asyncio
    async def test_new_quotation_header_is_removed(self, gateway):
        gateway.fail_on("bulk_create", "quotation_items")

        with pytest.raises(DatabaseError):
            await QuotationService(gateway).save_quotation(self.save(("A", 2, "10.00")))

        assert gateway.rows("quotations") == []
        assert gateway.rows("quotation_items") == []

    @pytest.mark.asyncio
    async def test_replaced_quotation_is_restored(self, gateway):
        service = QuotationService(gateway)
        saved = await service.save_quotation(self.save(("A", 2, "10.00"), ("B", 1, "5.00")))
        gateway.fail_on("bulk_create", "quotation_items")

        with pytest.raises(DatabaseError):
            await service.save_quotation(
                self.save(("C", 5, "20.00"), customer="Someone Else"),
                existing_id=saved.id,
            )

        quotation = await service.get_quotation(saved.id)
        assert quotation.customer_name == "Murugan Stores"
        assert quotation.total_amount == Decimal("25.00")
        assert sorted((item.product_id, item.quantity, item.total_price) for item in quotation.items) == [
            ("A", 2, Decimal("20.00")),
            ("B", 1, Decimal("5.00")),
        ]

    @pytest.mark.asyncio
    async def test_replacing_missing_quotation_writes_nothing(self, gateway):
        with pytest.raises(NotFoundError):
            await QuotationService(gateway).save_quotation(
                self.save(("A", 1, "10.00")), existing_id="missing"
            )

        assert gateway.writes == []
