# ==============================================================================
# CONFTEST - Pytest Fixtures and Configuration
# ==============================================================================
# Shared fixtures for all tests
# ==============================================================================

from __future__ import annotations

import os
import sys
from decimal import Decimal
from typing import Any, AsyncGenerator, Dict

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Set test environment before importing the application
TEST_DB_PATH = "./test_backoffice.db"

os.environ["ENVIRONMENT"] = "development"
os.environ["DEBUG"] = "false"
os.environ["DATABASE_TYPE"] = "sqlite"
os.environ["SQLITE_URL"] = f"sqlite+aiosqlite:///{TEST_DB_PATH}"
os.environ["LOG_LEVEL"] = "WARNING"

# Make the project root importable
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from fakes import InMemoryGateway  # noqa: E402


def _remove_test_db() -> None:
    if os.path.exists(TEST_DB_PATH):
        try:
            os.remove(TEST_DB_PATH)
        except (PermissionError, OSError):
            pass


# ==============================================================================
# HTTP CLIENT FIXTURES
# ==============================================================================

@pytest_asyncio.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client against the app on a fresh SQLite file."""
    from backoffice.database.factory import DatabaseFactory
    DatabaseFactory.reset()
    _remove_test_db()

    from backoffice.main import app

    await DatabaseFactory.initialize()

    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        timeout=30.0,
    ) as async_client:
        yield async_client

    await DatabaseFactory.shutdown()
    DatabaseFactory.reset()
    _remove_test_db()


# ==============================================================================
# GATEWAY FIXTURES
# ==============================================================================

@pytest.fixture
def gateway() -> InMemoryGateway:
    """
    In-memory gateway seeded with three products.

    A: stock 10 @ 10.00, B: stock 10 @ 5.00, C: stock 2 @ 20.00
    """
    gw = InMemoryGateway()
    for product_id, stock, price, apr in (
        ("A", 10, "10.00", "6.00"),
        ("B", 10, "5.00", "3.00"),
        ("C", 2, "20.00", "12.00"),
    ):
        gw.seed(
            "products",
            id=product_id,
            name=f"Product {product_id}",
            stock=stock,
            offer_price=Decimal(price),
            actual_price=Decimal(price) * 2,
            apr=Decimal(apr),
            is_active=True,
        )
    return gw


# ==============================================================================
# HELPER FIXTURES
# ==============================================================================

@pytest.fixture
def sample_product_data() -> Dict[str, Any]:
    return {
        "name": "Flower Pot Deluxe",
        "product_code": "FP-01",
        "content": "10 pcs",
        "actual_price": "200.00",
        "offer_price": "100.00",
        "apr": "60.00",
        "stock": 20,
    }


@pytest.fixture
def sample_delivery() -> Dict[str, Any]:
    return {
        "full_name": "Test Customer",
        "email": "customer@example.com",
        "phone": "9876543210",
        "address": "12 Market Street",
        "city": "Sivakasi",
        "district": "Virudhunagar",
        "state": "Tamil Nadu",
        "pincode": "626123",
    }


async def create_product(client: AsyncClient, **overrides: Any) -> Dict[str, Any]:
    """Create a product through the API and return its data."""
    payload = {
        "name": "Sparkler 10cm",
        "actual_price": "20.00",
        "offer_price": "10.00",
        "apr": "6.00",
        "stock": 10,
    }
    payload.update(overrides)
    response = await client.post("/api/v1/products", json=payload)
    assert response.status_code == 201, response.text
    return response.json()["data"]
