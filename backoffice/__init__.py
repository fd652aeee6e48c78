# ==============================================================================
# BACKOFFICE PACKAGE INITIALIZATION
# ==============================================================================
# Fireworks storefront back-office service built on FastAPI
# Supports: SQLite, PostgreSQL
# Architecture: Adapter Pattern, Service Layer, Factory Pattern
# ==============================================================================

"""
Fireworks Back-Office
=====================

Order, inventory and ledger management for an enquiry-based fireworks
storefront.

Features:
---------
- Catalog browsing and stock management
- Cart/quotation aggregation with derived totals
- Enquiry orders with admin-side editing, stock reconciliation and audit trail
- Vendor ledgers, expense tracking and dashboard analytics

Usage:
------
    from backoffice.main import app

    # Run with uvicorn
    uvicorn backoffice.main:app --reload
"""

__version__ = "1.0.0"
__all__ = ["__version__"]
