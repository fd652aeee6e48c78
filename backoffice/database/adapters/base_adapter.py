# ==============================================================================
# BASE DATABASE ADAPTER - Persistence Gateway Interface
# ==============================================================================
# Defines the contract every storage backend offers the services
# No call spans a transaction with another call
# ==============================================================================

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import (
    Any,
    AsyncIterator,
    Dict,
    Generic,
    List,
    Optional,
    TypeVar,
)

# Type variable for generic database records
T = TypeVar("T")


class BaseDatabaseAdapter(ABC, Generic[T]):
    """
    Abstract Base Class for Database Adapters.

    This is the persistence gateway used by every service. Each method is
    an independent round-trip; callers that need several writes to succeed
    together must sequence them and compensate on failure themselves.

    Gateway operations used by order reconciliation:

        readOne     -> get_by_id
        updateOne   -> update
        deleteWhere -> bulk_delete
        insertMany  -> bulk_create
        insertOne   -> create

    Generic Parameters:
        T: The type of records returned by the adapter (ORM instance or dict)

    Example:
        >>> adapter = SQLiteAdapter()
        >>> await adapter.connect()
        >>> product = await adapter.get_by_id("products", product_id)
        >>> await adapter.disconnect()
    """

    # ==========================================================================
    # LIFECYCLE METHODS
    # ==========================================================================

    @abstractmethod
    async def connect(self) -> None:
        """
        Establish database connection.

        Must be called before any database operations.

        Raises:
            DatabaseError: If connection cannot be established
        """
        pass

    @abstractmethod
    async def disconnect(self) -> None:
        """Close database connection and release pooled resources."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Check if database connection is healthy.

        Returns:
            True if connection is healthy, False otherwise
        """
        pass

    # ==========================================================================
    # SESSION MANAGEMENT
    # ==========================================================================

    @abstractmethod
    @asynccontextmanager
    async def session(self) -> AsyncIterator[Any]:
        """
        Provide a session scope for a single gateway call.

        Commits on successful exit, rolls back on exception.

        Raises:
            RuntimeError: If database is not connected
        """
        yield None

    # ==========================================================================
    # CRUD OPERATIONS
    # ==========================================================================

    @abstractmethod
    async def create(
        self,
        collection: str,
        data: Dict[str, Any],
    ) -> T:
        """
        Insert one record.

        Args:
            collection: Table name
            data: Record data as dictionary

        Returns:
            Created record with generated ID
        """
        pass

    @abstractmethod
    async def get_by_id(
        self,
        collection: str,
        id: Any,
    ) -> Optional[T]:
        """
        Read one record by primary key.

        Returns:
            Record if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_all(
        self,
        collection: str,
        skip: int = 0,
        limit: int = 100,
        filters: Optional[Dict[str, Any]] = None,
        sort_by: Optional[str] = None,
        sort_order: str = "asc",
    ) -> List[T]:
        """
        Retrieve multiple records with pagination and filtering.

        Args:
            collection: Table name
            skip: Number of records to skip (offset)
            limit: Maximum number of records to return
            filters: Field-value pairs; a list/tuple/set value matches any member
            sort_by: Field name to sort by
            sort_order: Sort direction ("asc" or "desc")

        Returns:
            List of matching records
        """
        pass

    @abstractmethod
    async def update(
        self,
        collection: str,
        id: Any,
        data: Dict[str, Any],
    ) -> Optional[T]:
        """
        Update one record by primary key.

        Returns:
            Updated record if found, None if it does not exist
        """
        pass

    @abstractmethod
    async def delete(
        self,
        collection: str,
        id: Any,
    ) -> bool:
        """
        Delete one record by primary key.

        Returns:
            True if deleted, False if not found
        """
        pass

    # ==========================================================================
    # QUERY OPERATIONS
    # ==========================================================================

    @abstractmethod
    async def count(
        self,
        collection: str,
        filters: Optional[Dict[str, Any]] = None,
    ) -> int:
        """Count records matching filters."""
        pass

    async def exists(
        self,
        collection: str,
        filters: Dict[str, Any],
    ) -> bool:
        """Check if any record matches the filters."""
        return await self.count(collection, filters) > 0

    # ==========================================================================
    # BULK OPERATIONS
    # ==========================================================================

    @abstractmethod
    async def bulk_create(
        self,
        collection: str,
        data: List[Dict[str, Any]],
    ) -> List[T]:
        """
        Insert several records in one call.

        Either all rows are inserted or the call raises.
        """
        pass

    @abstractmethod
    async def bulk_delete(
        self,
        collection: str,
        filters: Dict[str, Any],
    ) -> int:
        """
        Delete every record matching filters.

        Returns:
            Number of records deleted
        """
        pass
