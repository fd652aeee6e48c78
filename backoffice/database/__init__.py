# ==============================================================================
# DATABASE PACKAGE INITIALIZATION
# ==============================================================================
# Persistence gateway with SQLite and PostgreSQL backends
# ==============================================================================

"""
Database Module
===============

Key Components:
- Adapters: Backend-specific gateway implementations
- Factory: Adapter instantiation, model registration and lifecycle
"""

from backoffice.database.factory import DatabaseFactory
from backoffice.database.adapters.base_adapter import BaseDatabaseAdapter

__all__ = [
    "DatabaseFactory",
    "BaseDatabaseAdapter",
]
