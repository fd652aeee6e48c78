# ==============================================================================
# CUSTOM EXCEPTIONS - Application Error Hierarchy
# ==============================================================================
# Structured exception classes for consistent error handling
# Each exception maps to appropriate HTTP status codes
# ==============================================================================

from __future__ import annotations

from typing import Any, Dict, Optional


class AppException(Exception):
    """
    Base exception for all application errors.

    Provides a consistent interface for error handling with:
    - Error code for programmatic identification
    - HTTP status code mapping
    - Detailed message and optional context

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable error identifier
        status_code: HTTP status code to return
        details: Additional context dictionary
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        error_code: str = "INTERNAL_ERROR",
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to dictionary format for JSON response.

        Returns:
            Dictionary containing error details
        """
        return {
            "success": False,
            "error": {
                "code": self.error_code,
                "message": self.message,
                "details": self.details,
            }
        }

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message='{self.message}', "
            f"error_code='{self.error_code}', "
            f"status_code={self.status_code})"
        )


# ==============================================================================
# DATABASE EXCEPTIONS
# ==============================================================================

class DatabaseError(AppException):
    """
    Base exception for database-related errors.

    Raised when the persistence gateway cannot be reached or a
    query fails to execute.
    """

    def __init__(
        self,
        message: str = "Database operation failed",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code="DATABASE_ERROR",
            status_code=503,
            details=details,
        )


# ==============================================================================
# RESOURCE EXCEPTIONS
# ==============================================================================

class NotFoundError(AppException):
    """
    Raised when a requested resource does not exist.

    Maps to HTTP 404 Not Found.

    Attributes:
        resource_type: Type of resource that was not found
        resource_id: Identifier of the missing resource
    """

    def __init__(
        self,
        message: str = "Resource not found",
        resource_type: Optional[str] = None,
        resource_id: Optional[Any] = None,
    ) -> None:
        details = {}
        if resource_type:
            details["resource_type"] = resource_type
        if resource_id:
            details["resource_id"] = str(resource_id)

        super().__init__(
            message=message,
            error_code="NOT_FOUND",
            status_code=404,
            details=details,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


# ==============================================================================
# VALIDATION EXCEPTIONS
# ==============================================================================

class ValidationError(AppException):
    """
    Raised when input validation fails.

    Maps to HTTP 422 Unprocessable Entity.
    Contains field-level validation errors.
    """

    def __init__(
        self,
        message: str = "Validation error",
        errors: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            status_code=422,
            details={"validation_errors": errors or {}},
        )
        self.errors = errors or {}


class BadRequestError(AppException):
    """
    Raised for malformed or semantically invalid requests.

    Maps to HTTP 400 Bad Request.
    """

    def __init__(
        self,
        message: str = "Bad request",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code="BAD_REQUEST",
            status_code=400,
            details=details,
        )


class BusinessRuleError(AppException):
    """
    Raised when a business rule is violated.

    Maps to HTTP 400 Bad Request.
    """

    def __init__(
        self,
        message: str = "Business rule violation",
        rule: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        _details = details or {}
        if rule:
            _details["violated_rule"] = rule

        super().__init__(
            message=message,
            error_code="BUSINESS_RULE_ERROR",
            status_code=400,
            details=_details,
        )


# ==============================================================================
# ORDER RECONCILIATION EXCEPTIONS
# ==============================================================================

class StockShortfallError(AppException):
    """
    Raised before any write when an order needs more of a product
    than is currently in stock.

    Maps to HTTP 409 Conflict.

    Attributes:
        product_id: Product that is short
        available: Units currently in stock
        required: Additional units the order needs
    """

    def __init__(
        self,
        product_id: str,
        available: int,
        required: int,
    ) -> None:
        super().__init__(
            message=(
                f"Insufficient stock for product {product_id}. "
                f"Available {available}, required {required}."
            ),
            error_code="STOCK_SHORTFALL",
            status_code=409,
            details={
                "product_id": product_id,
                "available": available,
                "required": required,
            },
        )
        self.product_id = product_id
        self.available = available
        self.required = required


class OrderUpdateFailedError(AppException):
    """
    Raised when the order row itself could not be written.

    Nothing else has been changed when this is raised.
    """

    def __init__(
        self,
        order_id: str,
        reason: str = "order row was not updated",
    ) -> None:
        super().__init__(
            message=f"Failed to update order {order_id}: {reason}",
            error_code="ORDER_UPDATE_FAILED",
            status_code=502,
            details={"order_id": order_id},
        )
        self.order_id = order_id


class RollbackFailedError(AppException):
    """
    Raised (nested) when the compensating re-insert of the original
    line items failed as well. The order is left without line items
    and must be repaired by hand.
    """

    def __init__(
        self,
        order_id: str,
        reason: str,
    ) -> None:
        super().__init__(
            message=(
                f"Saving order {order_id} failed and restoring its original "
                f"line items also failed ({reason}). The order has no line "
                f"items now; contact support for manual intervention."
            ),
            error_code="MANUAL_INTERVENTION_REQUIRED",
            status_code=500,
            details={"order_id": order_id},
        )
        self.order_id = order_id


class LineItemWriteFailedError(AppException):
    """
    Raised when the line items of an order could not be replaced.

    Attributes:
        order_id: Order being saved
        rolled_back: True when the original line items were restored
        rollback_error: Set when restoring the original items failed
    """

    def __init__(
        self,
        order_id: str,
        reason: str,
        rolled_back: bool = False,
        rollback_error: Optional[RollbackFailedError] = None,
    ) -> None:
        if rollback_error is not None:
            message = rollback_error.message
            error_code = rollback_error.error_code
            status_code = rollback_error.status_code
        elif rolled_back:
            message = (
                f"Failed to save line items for order {order_id} ({reason}). "
                f"The original line items were restored; retry the edit."
            )
            error_code = "LINE_ITEM_WRITE_FAILED"
            status_code = 502
        else:
            message = f"Failed to save line items for order {order_id}: {reason}"
            error_code = "LINE_ITEM_WRITE_FAILED"
            status_code = 502

        super().__init__(
            message=message,
            error_code=error_code,
            status_code=status_code,
            details={
                "order_id": order_id,
                "reason": reason,
                "rolled_back": rolled_back,
            },
        )
        self.order_id = order_id
        self.reason = reason
        self.rolled_back = rolled_back
        self.rollback_error = rollback_error


# ==============================================================================
# NON-FATAL RECONCILIATION WARNINGS
# ==============================================================================

class ReconciliationWarning(Exception):
    """
    Base class for problems that do not fail an order save.

    Warnings are collected on the save result and logged; they are
    never raised to the caller.
    """

    code = "RECONCILIATION_WARNING"

    def __init__(self, message: str, **context: Any) -> None:
        self.message = message
        self.context = context
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message, **self.context}


class StockAdjustmentWarning(ReconciliationWarning):
    """A product's stock counter could not be adjusted after a save."""

    code = "STOCK_ADJUSTMENT_FAILED"


class AuditWriteWarning(ReconciliationWarning):
    """The audit record of a save could not be written."""

    code = "AUDIT_WRITE_FAILED"
