# ==============================================================================
# API V1 PACKAGE
# ==============================================================================

from backoffice.api.v1.products import router as catalog_router
from backoffice.api.v1.orders import router as orders_router
from backoffice.api.v1.quotations import router as quotations_router
from backoffice.api.v1.vendors import router as vendors_router
from backoffice.api.v1.expenses import router as expenses_router
from backoffice.api.v1.analytics import router as analytics_router

__all__ = [
    "catalog_router",
    "orders_router",
    "quotations_router",
    "vendors_router",
    "expenses_router",
    "analytics_router",
]
