# ==============================================================================
# CATALOG TESTS
# ==============================================================================

from decimal import Decimal

import pytest

from conftest import create_product


class TestCatalogEndpoints:
    """Tests for categories and products."""

    @pytest.mark.asyncio
    async def test_create_product(self, client, sample_product_data):
        response = await client.post("/api/v1/products", json=sample_product_data)

        assert response.status_code == 201
        data = response.json()
        assert data["success"] is True
        assert data["data"]["name"] == sample_product_data["name"]
        assert data["data"]["stock"] == 20
        assert "id" in data["data"]

    @pytest.mark.asyncio
    async def test_negative_price_is_rejected(self, client, sample_product_data):
        sample_product_data["offer_price"] = "-1"
        response = await client.post("/api/v1/products", json=sample_product_data)
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_filter_by_category(self, client):
        response = await client.post("/api/v1/categories", json={"name": "Sparklers"})
        assert response.status_code == 201
        category_id = response.json()["data"]["id"]

        await create_product(client, name="Sparkler 7cm", category_id=category_id)
        await create_product(client, name="Rocket")

        response = await client.get("/api/v1/products", params={"category_id": category_id})
        assert [p["name"] for p in response.json()["data"]] == ["Sparkler 7cm"]

        response = await client.get("/api/v1/categories")
        assert [c["name"] for c in response.json()["data"]] == ["Sparklers"]

    @pytest.mark.asyncio
    async def test_active_only(self, client):
        await create_product(client, name="Listed")
        await create_product(client, name="Hidden", is_active=False)

        response = await client.get("/api/v1/products", params={"active_only": True})
        assert [p["name"] for p in response.json()["data"]] == ["Listed"]

    @pytest.mark.asyncio
    async def test_low_stock(self, client):
        await create_product(client, name="Plenty", stock=50)
        await create_product(client, name="Few", stock=4)
        await create_product(client, name="None", stock=0)

        response = await client.get("/api/v1/products/low-stock", params={"threshold": 5})

        assert response.status_code == 200
        report = response.json()["data"]
        assert report["threshold"] == 5
        assert [p["name"] for p in report["low_stock"]] == ["None", "Few"]
        assert report["out_of_stock_count"] == 1

    @pytest.mark.asyncio
    async def test_adjust_stock_clamps_at_zero(self, client):
        product = await create_product(client, stock=4)

        response = await client.post(f"/api/v1/products/{product['id']}/stock", json={"delta": 6})
        assert response.json()["data"]["stock"] == 10

        response = await client.post(f"/api/v1/products/{product['id']}/stock", json={"delta": -25})
        assert response.json()["data"]["stock"] == 0

    @pytest.mark.asyncio
    async def test_update_product(self, client):
        product = await create_product(client)

        response = await client.patch(
            f"/api/v1/products/{product['id']}", json={"offer_price": "8.50"}
        )

        assert response.status_code == 200
        assert Decimal(response.json()["data"]["offer_price"]) == Decimal("8.50")
        assert response.json()["data"]["name"] == product["name"]

    @pytest.mark.asyncio
    async def test_missing_product(self, client):
        response = await client.get("/api/v1/products/missing")
        assert response.status_code == 404
        assert response.json()["success"] is False
