# ==============================================================================
# VENDOR LEDGER TESTS
# ==============================================================================

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from backoffice.schemas.vendor import VendorResponse, VendorTransactionResponse
from backoffice.services.ledger_service import build_ledger

VENDOR = VendorResponse(id="v1", name="Sri Lakshmi Traders")


def txn(id, type, amount, day, created_second=0):
    return VendorTransactionResponse(
        id=id,
        vendor_id="v1",
        type=type,
        amount=Decimal(amount),
        transaction_date=day,
        created_at=datetime(2024, 1, 1, 0, 0, created_second, tzinfo=timezone.utc),
    )


class TestBuildLedger:
    """Tests for the running-balance reducer."""

    def test_running_balance_in_date_order(self):
        ledger = build_ledger(VENDOR, [
            txn("t2", "DEBIT", "300", date(2024, 2, 1)),
            txn("t1", "CREDIT", "1000", date(2024, 1, 15)),
            txn("t3", "CREDIT", "50", date(2024, 3, 1)),
        ])

        assert [entry.id for entry in ledger.entries] == ["t1", "t2", "t3"]
        assert [entry.running_balance for entry in ledger.entries] == [
            Decimal("1000"), Decimal("700"), Decimal("750"),
        ]
        assert ledger.total_credit == Decimal("1050")
        assert ledger.total_debit == Decimal("300")
        assert ledger.current_balance == Decimal("750")

    def test_same_day_rows_follow_creation_time(self):
        day = date(2024, 1, 15)
        ledger = build_ledger(VENDOR, [
            txn("late", "DEBIT", "100", day, created_second=5),
            txn("early", "CREDIT", "100", day, created_second=1),
        ])
        assert [entry.id for entry in ledger.entries] == ["early", "late"]

    def test_empty_ledger(self):
        ledger = build_ledger(VENDOR, [])
        assert ledger.entries == []
        assert ledger.current_balance == Decimal("0")


class TestVendorEndpoints:
    """Tests for vendor and ledger endpoints."""

    @pytest.mark.asyncio
    async def test_ledger_flow(self, client):
        response = await client.post("/api/v1/vendors", json={"name": "Sri Lakshmi Traders"})
        assert response.status_code == 201
        vendor_id = response.json()["data"]["id"]

        for payload in (
            {"type": "CREDIT", "amount": "1000", "transaction_date": "2024-01-15"},
            {"type": "DEBIT", "amount": "400", "transaction_date": "2024-01-20"},
        ):
            response = await client.post(
                f"/api/v1/vendors/{vendor_id}/transactions", json=payload
            )
            assert response.status_code == 201

        response = await client.get(f"/api/v1/vendors/{vendor_id}/ledger")
        assert response.status_code == 200
        ledger = response.json()["data"]
        assert len(ledger["entries"]) == 2
        assert Decimal(ledger["current_balance"]) == Decimal("600")

    @pytest.mark.asyncio
    async def test_invalid_transaction_type(self, client):
        response = await client.post("/api/v1/vendors", json={"name": "Vendor"})
        vendor_id = response.json()["data"]["id"]

        response = await client.post(
            f"/api/v1/vendors/{vendor_id}/transactions",
            json={"type": "REFUND", "amount": "10", "transaction_date": "2024-01-15"},
        )
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_delete_vendor_removes_ledger(self, client):
        response = await client.post("/api/v1/vendors", json={"name": "Vendor"})
        vendor_id = response.json()["data"]["id"]
        await client.post(
            f"/api/v1/vendors/{vendor_id}/transactions",
            json={"type": "CREDIT", "amount": "10", "transaction_date": "2024-01-15"},
        )

        response = await client.delete(f"/api/v1/vendors/{vendor_id}")
        assert response.status_code == 200

        response = await client.get(f"/api/v1/vendors/{vendor_id}/ledger")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_transaction_for_missing_vendor(self, client):
        response = await client.post(
            "/api/v1/vendors/missing/transactions",
            json={"type": "CREDIT", "amount": "10", "transaction_date": "2024-01-15"},
        )
        assert response.status_code == 404
