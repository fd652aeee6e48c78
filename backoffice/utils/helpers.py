# ==============================================================================
# HELPER UTILITIES
# ==============================================================================
# Common utility functions used across the application
# ==============================================================================

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Optional
from uuid import uuid4
import logging

logger = logging.getLogger(__name__)

MONEY_QUANTUM = Decimal("0.01")


def generate_uuid() -> str:
    """Generate a new UUID string."""
    return str(uuid4())


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_aware(value: datetime) -> datetime:
    """Treat naive datetimes (as SQLite returns them) as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def to_decimal(value: Any) -> Decimal:
    """
    Coerce a number-like value to Decimal.

    None and empty strings become zero. Floats go through str() so that
    0.1 stays 0.1.
    """
    if value is None or value == "":
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def quantize_money(value: Any) -> Decimal:
    """Round to cents, half up."""
    return to_decimal(value).quantize(MONEY_QUANTUM, rounding=ROUND_HALF_UP)


def field_value(record: Any, name: str, default: Any = None) -> Any:
    """
    Read a field from a gateway record.

    Records are ORM instances for the SQL adapters and plain dicts for
    document-style gateways; both are accepted.
    """
    if isinstance(record, dict):
        return record.get(name, default)
    return getattr(record, name, default)


def as_dict(record: Any) -> Dict[str, Any]:
    """Return a gateway record as a plain dictionary of its columns."""
    if isinstance(record, dict):
        return dict(record)
    if hasattr(record, "to_dict"):
        return record.to_dict()
    return dict(vars(record))


def format_short_id(prefix: str, number: int, width: int) -> str:
    """
    Format a human-readable sequential code.

    Example:
        >>> format_short_id("ORD", 7, 3)
        'ORD-007'
    """
    return f"{prefix}-{number:0{width}d}"


def parse_short_id(short_id: Optional[str], prefix: str) -> Optional[int]:
    """Return the numeric part of a short id, None if it has another shape."""
    if not short_id or not short_id.startswith(f"{prefix}-"):
        return None
    number = short_id[len(prefix) + 1:]
    return int(number) if number.isdigit() else None


async def next_short_id(
    adapter: Any,
    collection: str,
    prefix: str,
    width: int,
) -> str:
    """
    Compute the next short id for a table.

    Starts from the most recently created record's number and steps
    forward until the code is unused.

    Args:
        adapter: Persistence gateway
        collection: Table holding a `short_id` column
        prefix: Code prefix (e.g. "ORD")
        width: Zero-padded width of the number

    Returns:
        The next free short id
    """
    latest = await adapter.get_all(
        collection,
        skip=0,
        limit=1,
        sort_by="created_at",
        sort_order="desc",
    )
    number = None
    if latest:
        number = parse_short_id(field_value(latest[0], "short_id"), prefix)
    if number is None:
        number = await adapter.count(collection)

    candidate = format_short_id(prefix, number + 1, width)
    while await adapter.exists(collection, {"short_id": candidate}):
        number += 1
        candidate = format_short_id(prefix, number + 1, width)

    logger.debug(f"Next short id for {collection}: {candidate}")
    return candidate
