# ==============================================================================
# API DEPENDENCIES - Dependency Injection
# ==============================================================================
# FastAPI dependencies for database access, services and the acting admin
# ==============================================================================

from __future__ import annotations

from typing import Annotated, Optional

from fastapi import Depends, Header

from backoffice.core.constants import APIConstants
from backoffice.database.factory import DatabaseFactory
from backoffice.database.adapters.base_adapter import BaseDatabaseAdapter
from backoffice.services.analytics_service import AnalyticsService
from backoffice.services.catalog_service import CategoryService, ProductService
from backoffice.services.expense_service import ExpenseService
from backoffice.services.ledger_service import VendorService, VendorTransactionService
from backoffice.services.order_service import OrderService
from backoffice.services.quotation_service import QuotationService


# ==============================================================================
# DATABASE DEPENDENCIES
# ==============================================================================

async def get_adapter() -> BaseDatabaseAdapter:
    """Initialized adapter from the factory."""
    return DatabaseFactory.get_adapter()


DatabaseDep = Annotated[BaseDatabaseAdapter, Depends(get_adapter)]


# ==============================================================================
# ACTOR
# ==============================================================================

async def get_actor_id(
    x_actor_id: Annotated[Optional[str], Header(alias=APIConstants.ACTOR_ID_HEADER)] = None,
) -> Optional[str]:
    """
    Identity of the admin making the request, recorded on audit rows.

    Authentication happens in front of this service; the header is taken
    as given.
    """
    if x_actor_id and x_actor_id.strip():
        return x_actor_id.strip()
    return None


ActorID = Annotated[Optional[str], Depends(get_actor_id)]


# ==============================================================================
# SERVICE DEPENDENCIES
# ==============================================================================

async def get_category_service(adapter: DatabaseDep) -> CategoryService:
    return CategoryService(adapter)


async def get_product_service(adapter: DatabaseDep) -> ProductService:
    return ProductService(adapter)


async def get_order_service(adapter: DatabaseDep) -> OrderService:
    return OrderService(adapter)


async def get_quotation_service(adapter: DatabaseDep) -> QuotationService:
    return QuotationService(adapter)


async def get_vendor_service(adapter: DatabaseDep) -> VendorService:
    return VendorService(adapter)


async def get_vendor_transaction_service(adapter: DatabaseDep) -> VendorTransactionService:
    return VendorTransactionService(adapter)


async def get_expense_service(adapter: DatabaseDep) -> ExpenseService:
    return ExpenseService(adapter)


async def get_analytics_service(adapter: DatabaseDep) -> AnalyticsService:
    return AnalyticsService(adapter)


# Annotated service types
CategoryServiceDep = Annotated[CategoryService, Depends(get_category_service)]
ProductServiceDep = Annotated[ProductService, Depends(get_product_service)]
OrderServiceDep = Annotated[OrderService, Depends(get_order_service)]
QuotationServiceDep = Annotated[QuotationService, Depends(get_quotation_service)]
VendorServiceDep = Annotated[VendorService, Depends(get_vendor_service)]
VendorTransactionServiceDep = Annotated[
    VendorTransactionService, Depends(get_vendor_transaction_service)
]
ExpenseServiceDep = Annotated[ExpenseService, Depends(get_expense_service)]
AnalyticsServiceDep = Annotated[AnalyticsService, Depends(get_analytics_service)]
