# ==============================================================================
# MAIN API ROUTER - Route Aggregation
# ==============================================================================

from __future__ import annotations

from fastapi import APIRouter

from backoffice.core.settings import settings
from backoffice.api.v1 import (
    catalog_router,
    orders_router,
    quotations_router,
    vendors_router,
    expenses_router,
    analytics_router,
)

api_router = APIRouter()

api_router.include_router(catalog_router, prefix=settings.API_V1_PREFIX)
api_router.include_router(orders_router, prefix=settings.API_V1_PREFIX)
api_router.include_router(quotations_router, prefix=settings.API_V1_PREFIX)
api_router.include_router(vendors_router, prefix=settings.API_V1_PREFIX)
api_router.include_router(expenses_router, prefix=settings.API_V1_PREFIX)
api_router.include_router(analytics_router, prefix=settings.API_V1_PREFIX)
