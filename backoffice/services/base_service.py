# ==============================================================================
# BASE SERVICE - Generic Business Logic Layer
# ==============================================================================
# Abstract service providing common CRUD operations over one table
# ==============================================================================

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel

from backoffice.database.adapters.base_adapter import BaseDatabaseAdapter
from backoffice.core.exceptions import NotFoundError

# Type variables for generic service
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)
ResponseSchemaType = TypeVar("ResponseSchemaType", bound=BaseModel)


class BaseService(ABC, Generic[CreateSchemaType, UpdateSchemaType, ResponseSchemaType]):
    """
    Abstract base service providing standard business operations.

    Generic Parameters:
        CreateSchemaType: Pydantic schema for creation
        UpdateSchemaType: Pydantic schema for updates
        ResponseSchemaType: Pydantic schema for responses

    Attributes:
        _adapter: Persistence gateway
        _collection_name: Table name
        _resource_name: Name used in not-found messages

    Example:
        >>> class VendorService(BaseService[VendorCreate, VendorCreate, VendorResponse]):
        ...     def _to_response(self, entity):
        ...         return VendorResponse.model_validate(entity, from_attributes=True)
    """

    _resource_name = "Record"

    def __init__(
        self,
        adapter: BaseDatabaseAdapter,
        collection_name: str,
    ) -> None:
        self._adapter = adapter
        self._collection_name = collection_name

    # ==========================================================================
    # ABSTRACT METHODS
    # ==========================================================================

    @abstractmethod
    def _to_response(self, entity: Any) -> ResponseSchemaType:
        """Convert a gateway record to its response schema."""
        pass

    def _not_found(self, id: Any) -> NotFoundError:
        return NotFoundError(
            message=f"{self._resource_name} not found",
            resource_type=self._collection_name,
            resource_id=id,
        )

    # ==========================================================================
    # CRUD OPERATIONS
    # ==========================================================================

    async def create(self, schema: CreateSchemaType) -> ResponseSchemaType:
        """
        Create a new entity.

        Args:
            schema: Creation schema with entity data

        Returns:
            Created entity as response schema
        """
        data = schema.model_dump(exclude_unset=True)
        result = await self._adapter.create(self._collection_name, data)
        return self._to_response(result)

    async def get_by_id(self, id: Any) -> ResponseSchemaType:
        """
        Retrieve entity by ID.

        Raises:
            NotFoundError: If entity not found
        """
        result = await self._adapter.get_by_id(self._collection_name, id)
        if not result:
            raise self._not_found(id)
        return self._to_response(result)

    async def get_all(
        self,
        skip: int = 0,
        limit: int = 100,
        filters: Optional[Dict[str, Any]] = None,
        sort_by: Optional[str] = None,
        sort_order: str = "asc",
    ) -> List[ResponseSchemaType]:
        """Retrieve multiple entities with pagination."""
        results = await self._adapter.get_all(
            self._collection_name,
            skip=skip,
            limit=limit,
            filters=filters,
            sort_by=sort_by,
            sort_order=sort_order,
        )
        return [self._to_response(r) for r in results]

    async def update(
        self,
        id: Any,
        schema: UpdateSchemaType,
    ) -> ResponseSchemaType:
        """
        Update an existing entity with the fields set on the schema.

        Raises:
            NotFoundError: If entity not found
        """
        data = schema.model_dump(exclude_unset=True)
        result = await self._adapter.update(self._collection_name, id, data)
        if not result:
            raise self._not_found(id)
        return self._to_response(result)

    async def delete(self, id: Any) -> bool:
        """
        Delete an entity by ID.

        Raises:
            NotFoundError: If entity not found
        """
        deleted = await self._adapter.delete(self._collection_name, id)
        if not deleted:
            raise self._not_found(id)
        return True

    async def count(
        self,
        filters: Optional[Dict[str, Any]] = None,
    ) -> int:
        """Count entities matching filters."""
        return await self._adapter.count(self._collection_name, filters)
