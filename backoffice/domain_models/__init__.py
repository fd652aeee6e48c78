# ==============================================================================
# DOMAIN MODELS PACKAGE INITIALIZATION
# ==============================================================================

"""
Domain Models
=============

SQLAlchemy ORM models for database entities:
- Category/Product: Catalog and inventory
- Order/OrderItem/OrderAudit: Enquiry orders and their edit history
- Quotation/QuotationItem: Admin quotations
- Vendor/VendorTransaction: Supplier ledger
- Expense: Expense book
"""

from backoffice.domain_models.base import SQLBase, TimestampMixin
from backoffice.domain_models.catalog import Category, Product
from backoffice.domain_models.order import Order, OrderItem, OrderAudit
from backoffice.domain_models.quotation import Quotation, QuotationItem
from backoffice.domain_models.vendor import Vendor, VendorTransaction
from backoffice.domain_models.expense import Expense

__all__ = [
    "SQLBase",
    "TimestampMixin",
    "Category",
    "Product",
    "Order",
    "OrderItem",
    "OrderAudit",
    "Quotation",
    "QuotationItem",
    "Vendor",
    "VendorTransaction",
    "Expense",
]
