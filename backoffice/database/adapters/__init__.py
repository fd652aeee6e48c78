# ==============================================================================
# DATABASE ADAPTERS PACKAGE
# ==============================================================================

"""
Database Adapters
=================

Gateway implementations:
- BaseDatabaseAdapter: Abstract interface definition
- SQLiteAdapter: SQLite using aiosqlite
- PostgreSQLAdapter: PostgreSQL using asyncpg
"""

from backoffice.database.adapters.base_adapter import BaseDatabaseAdapter
from backoffice.database.adapters.sql_adapter import (
    SQLAlchemyAdapter,
    SQLiteAdapter,
    PostgreSQLAdapter,
)

__all__ = [
    "BaseDatabaseAdapter",
    "SQLAlchemyAdapter",
    "SQLiteAdapter",
    "PostgreSQLAdapter",
]
