# ==============================================================================
# BASE SCHEMAS - Common Schema Patterns
# ==============================================================================
# Foundation schemas for API responses and pagination
# ==============================================================================

from __future__ import annotations

from datetime import datetime
from typing import Any, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from backoffice.core.constants import APIConstants


# Type variable for generic response types
T = TypeVar("T")


class BaseSchema(BaseModel):
    """
    Base schema with common configuration.

    All API schemas inherit from this class so ORM instances and plain
    gateway dicts validate the same way.
    """

    model_config = ConfigDict(
        from_attributes=True,  # Enable ORM mode
        populate_by_name=True,
        use_enum_values=True,
        arbitrary_types_allowed=True,
    )


class TimestampSchema(BaseSchema):
    """Schema with automatic timestamp fields."""

    created_at: Optional[datetime] = Field(
        None,
        description="Record creation timestamp"
    )
    updated_at: Optional[datetime] = Field(
        None,
        description="Last update timestamp"
    )


class PaginatedResponse(BaseModel, Generic[T]):
    """
    Generic paginated response wrapper.

    Attributes:
        items: List of result items
        total: Total number of matching items
        skip: Offset of the first item
        limit: Page size requested
    """

    items: List[T] = Field(
        default_factory=list,
        description="List of items"
    )
    total: int = Field(
        ...,
        ge=0,
        description="Total number of items"
    )
    skip: int = Field(
        0,
        ge=0,
        description="Number of records skipped"
    )
    limit: int = Field(
        APIConstants.DEFAULT_PAGE_SIZE,
        ge=1,
        le=APIConstants.MAX_PAGE_SIZE,
        description="Maximum records returned"
    )

    @property
    def has_next(self) -> bool:
        """Check if there's a next page."""
        return self.skip + len(self.items) < self.total


class APIResponse(BaseModel, Generic[T]):
    """
    Standard API response wrapper.

    Attributes:
        success: Whether the request was successful
        message: Optional status message
        data: Response payload
        errors: Optional error details (non-fatal warnings on success)
    """

    success: bool = Field(
        True,
        description="Whether the request was successful"
    )
    message: Optional[str] = Field(
        None,
        description="Status message"
    )
    data: Optional[T] = Field(
        None,
        description="Response data"
    )
    errors: Optional[List[dict[str, Any]]] = Field(
        None,
        description="Error details if any"
    )

    @classmethod
    def ok(
        cls,
        data: T,
        message: Optional[str] = None,
        errors: Optional[List[dict[str, Any]]] = None,
    ) -> "APIResponse[T]":
        """Create a successful response."""
        return cls(success=True, data=data, message=message, errors=errors or None)

    @classmethod
    def error(
        cls,
        message: str,
        errors: Optional[List[dict[str, Any]]] = None,
    ) -> "APIResponse[T]":
        """Create an error response."""
        return cls(success=False, message=message, errors=errors)


class HealthResponse(BaseSchema):
    """Health check response schema."""

    status: str = Field(
        ...,
        description="Health status"
    )
    version: str = Field(
        ...,
        description="Application version"
    )
    database: str = Field(
        ...,
        description="Database connection status"
    )
