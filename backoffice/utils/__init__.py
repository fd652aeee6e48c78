# ==============================================================================
# UTILS PACKAGE INITIALIZATION
# ==============================================================================

from backoffice.utils.helpers import (
    generate_uuid,
    utc_now,
    ensure_aware,
    to_decimal,
    quantize_money,
    field_value,
    as_dict,
    format_short_id,
    next_short_id,
)

__all__ = [
    "generate_uuid",
    "utc_now",
    "ensure_aware",
    "to_decimal",
    "quantize_money",
    "field_value",
    "as_dict",
    "format_short_id",
    "next_short_id",
]
