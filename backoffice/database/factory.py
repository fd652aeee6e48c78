# ==============================================================================
# DATABASE FACTORY - Adapter Instantiation & Lifecycle Management
# ==============================================================================
# Creates the configured gateway, registers the ORM models on it and
# keeps one cached instance per backend
# ==============================================================================

from __future__ import annotations

import logging
from typing import Dict, Optional

from backoffice.core.settings import settings, DatabaseType
from backoffice.core.constants import DatabaseConstants
from backoffice.core.exceptions import DatabaseError
from backoffice.database.adapters.base_adapter import BaseDatabaseAdapter
from backoffice.database.adapters.sql_adapter import (
    PostgreSQLAdapter,
    SQLAlchemyAdapter,
    SQLiteAdapter,
)

logger = logging.getLogger(__name__)


class DatabaseFactory:
    """
    Factory class for creating and managing database adapters.

    Class Attributes:
        _instances: Cache of initialized adapter instances

    Example:
        >>> await DatabaseFactory.initialize()
        >>> adapter = DatabaseFactory.get_adapter()
        >>> order = await adapter.get_by_id("orders", order_id)
        >>> await DatabaseFactory.shutdown()
    """

    _instances: Dict[DatabaseType, BaseDatabaseAdapter] = {}

    @classmethod
    def create_adapter(
        cls,
        db_type: Optional[DatabaseType] = None,
        **kwargs,
    ) -> BaseDatabaseAdapter:
        """
        Create and return appropriate database adapter.

        Returns cached instance if available, otherwise creates new.

        Args:
            db_type: Database type (defaults to settings.DATABASE_TYPE)
            **kwargs: Additional adapter configuration
                - database_url: Custom connection URL

        Raises:
            ValueError: If database type is not supported
        """
        db_type = db_type or settings.DATABASE_TYPE

        if db_type in cls._instances:
            return cls._instances[db_type]

        adapter: BaseDatabaseAdapter

        if db_type == DatabaseType.SQLITE:
            adapter = SQLiteAdapter(database_url=kwargs.get("database_url"))
            logger.info("Created SQLite adapter")

        elif db_type == DatabaseType.POSTGRESQL:
            adapter = PostgreSQLAdapter(database_url=kwargs.get("database_url"))
            logger.info("Created PostgreSQL adapter")

        else:
            raise ValueError(f"Unsupported database type: {db_type}")

        cls._register_models(adapter)
        cls._instances[db_type] = adapter
        return adapter

    @classmethod
    async def initialize(
        cls,
        db_type: Optional[DatabaseType] = None,
        **kwargs,
    ) -> BaseDatabaseAdapter:
        """
        Create the adapter and connect it.

        Should be called at application startup.

        Raises:
            DatabaseError: If connection fails
        """
        adapter = cls.create_adapter(db_type, **kwargs)

        try:
            await adapter.connect()
            logger.info(
                f"Database initialized: {db_type or settings.DATABASE_TYPE}"
            )
            return adapter
        except Exception as e:
            logger.error(f"Database initialization failed: {e}")
            raise DatabaseError(f"Failed to initialize database: {e}")

    @classmethod
    def _register_models(cls, adapter: SQLAlchemyAdapter) -> None:
        """Register all domain models with the adapter."""
        from backoffice.domain_models.catalog import Category, Product
        from backoffice.domain_models.order import Order, OrderItem, OrderAudit
        from backoffice.domain_models.quotation import Quotation, QuotationItem
        from backoffice.domain_models.vendor import Vendor, VendorTransaction
        from backoffice.domain_models.expense import Expense

        models = {
            DatabaseConstants.CATEGORIES_COLLECTION: Category,
            DatabaseConstants.PRODUCTS_COLLECTION: Product,
            DatabaseConstants.ORDERS_COLLECTION: Order,
            DatabaseConstants.ORDER_ITEMS_COLLECTION: OrderItem,
            DatabaseConstants.ORDER_AUDITS_COLLECTION: OrderAudit,
            DatabaseConstants.QUOTATIONS_COLLECTION: Quotation,
            DatabaseConstants.QUOTATION_ITEMS_COLLECTION: QuotationItem,
            DatabaseConstants.VENDORS_COLLECTION: Vendor,
            DatabaseConstants.VENDOR_TRANSACTIONS_COLLECTION: VendorTransaction,
            DatabaseConstants.EXPENSES_COLLECTION: Expense,
        }
        for name, model in models.items():
            adapter.register_model(name, model)

        logger.info(f"Registered {len(models)} domain models with adapter")

    @classmethod
    async def shutdown(cls) -> None:
        """
        Close all database connections.

        Releases all resources and clears adapter cache.
        """
        for db_type, adapter in cls._instances.items():
            try:
                await adapter.disconnect()
                logger.info(f"Disconnected: {db_type}")
            except Exception as e:
                logger.error(f"Error disconnecting {db_type}: {e}")

        cls._instances.clear()
        logger.info("All database connections closed")

    @classmethod
    def get_adapter(
        cls,
        db_type: Optional[DatabaseType] = None,
    ) -> BaseDatabaseAdapter:
        """
        Get existing adapter instance.

        Raises:
            RuntimeError: If adapter not initialized
        """
        db_type = db_type or settings.DATABASE_TYPE

        if db_type not in cls._instances:
            raise RuntimeError(
                f"Database adapter for {db_type} not initialized. "
                f"Call DatabaseFactory.initialize() first."
            )

        return cls._instances[db_type]

    @classmethod
    def is_initialized(
        cls,
        db_type: Optional[DatabaseType] = None,
    ) -> bool:
        db_type = db_type or settings.DATABASE_TYPE
        return db_type in cls._instances

    @classmethod
    async def health_check(
        cls,
        db_type: Optional[DatabaseType] = None,
    ) -> bool:
        """Return True when the adapter exists and answers a trivial query."""
        try:
            adapter = cls.get_adapter(db_type)
        except RuntimeError:
            return False
        return await adapter.health_check()

    @classmethod
    def reset(cls) -> None:
        """
        Reset factory state.

        Clears adapter cache without disconnecting. Used by tests.
        """
        cls._instances.clear()
