# ==============================================================================
# SCHEMAS PACKAGE INITIALIZATION
# ==============================================================================

"""
Schemas
=======

Pydantic request/response models for the API and the drafts consumed by
the order reconciliation engine.
"""

from backoffice.schemas.base import (
    BaseSchema,
    TimestampSchema,
    APIResponse,
    PaginatedResponse,
    HealthResponse,
)
from backoffice.schemas.order import (
    LineItemDraft,
    OrderDraft,
    DiscountSpec,
    OrderEditResult,
    OrderResponse,
)

__all__ = [
    "BaseSchema",
    "TimestampSchema",
    "APIResponse",
    "PaginatedResponse",
    "HealthResponse",
    "LineItemDraft",
    "OrderDraft",
    "DiscountSpec",
    "OrderEditResult",
    "OrderResponse",
]
