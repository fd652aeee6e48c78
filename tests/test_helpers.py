# ==============================================================================
# HELPER TESTS
# ==============================================================================

from decimal import Decimal

import pytest

from backoffice.utils.helpers import (
    format_short_id,
    next_short_id,
    parse_short_id,
    quantize_money,
    to_decimal,
)
from fakes import InMemoryGateway


class TestMoney:
    def test_to_decimal_goes_through_str_for_floats(self):
        assert to_decimal(0.1) == Decimal("0.1")
        assert to_decimal(None) == Decimal("0")

    def test_quantize_rounds_half_up(self):
        assert quantize_money("2.345") == Decimal("2.35")
        assert quantize_money(3) == Decimal("3.00")


class TestShortIds:
    """Tests for sequential order and quotation codes."""

    def test_format_and_parse(self):
        assert format_short_id("ORD", 7, 3) == "ORD-007"
        assert format_short_id("ORD", 1234, 3) == "ORD-1234"
        assert parse_short_id("ORD-042", "ORD") == 42
        assert parse_short_id("QT-042", "ORD") is None
        assert parse_short_id("ORD-x1", "ORD") is None

    @pytest.mark.asyncio
    async def test_first_id(self):
        assert await next_short_id(InMemoryGateway(), "orders", "ORD", 3) == "ORD-001"

    @pytest.mark.asyncio
    async def test_continues_from_latest(self):
        gateway = InMemoryGateway()
        gateway.seed("orders", short_id="ORD-001")
        gateway.seed("orders", short_id="ORD-009")

        assert await next_short_id(gateway, "orders", "ORD", 3) == "ORD-010"

    @pytest.mark.asyncio
    async def test_skips_codes_in_use(self):
        gateway = InMemoryGateway()
        gateway.seed("orders", short_id="ORD-003")
        gateway.seed("orders", short_id="ORD-002")

        assert await next_short_id(gateway, "orders", "ORD", 3) == "ORD-004"

    @pytest.mark.asyncio
    async def test_unparsable_latest_falls_back_to_count(self):
        gateway = InMemoryGateway()
        gateway.seed("orders", short_id="ORD-001")
        gateway.seed("orders", short_id="legacy")

        assert await next_short_id(gateway, "orders", "ORD", 3) == "ORD-003"
