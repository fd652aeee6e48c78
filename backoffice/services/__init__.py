# ==============================================================================
# SERVICES PACKAGE INITIALIZATION
# ==============================================================================

"""
Services
========

Business logic over the persistence gateway:
- reconciliation: Saving edits to placed orders
- cart: Cart/quotation aggregator
- catalog_service, order_service, quotation_service
- ledger_service, expense_service, analytics_service: Read-side reducers
"""

from backoffice.services.reconciliation import OrderReconciliationEngine
from backoffice.services.cart import Cart
from backoffice.services.catalog_service import CategoryService, ProductService
from backoffice.services.order_service import OrderService
from backoffice.services.quotation_service import QuotationService
from backoffice.services.ledger_service import VendorService, VendorTransactionService
from backoffice.services.expense_service import ExpenseService
from backoffice.services.analytics_service import AnalyticsService

__all__ = [
    "OrderReconciliationEngine",
    "Cart",
    "CategoryService",
    "ProductService",
    "OrderService",
    "QuotationService",
    "VendorService",
    "VendorTransactionService",
    "ExpenseService",
    "AnalyticsService",
]
