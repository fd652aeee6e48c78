# ==============================================================================
# CORE PACKAGE INITIALIZATION
# ==============================================================================
# Core utilities: Settings, Logging, Exceptions, Constants
# ==============================================================================

"""
Core Module
===========

Contains core utilities and configurations for the application:
- settings: Environment configuration management
- logging: Root logger configuration
- exceptions: Custom exception classes
- constants: Application-wide constants
"""

from backoffice.core.settings import settings, get_settings, DatabaseType
from backoffice.core.exceptions import (
    AppException,
    DatabaseError,
    NotFoundError,
    ValidationError,
    BadRequestError,
    BusinessRuleError,
    StockShortfallError,
    OrderUpdateFailedError,
    LineItemWriteFailedError,
    RollbackFailedError,
    StockAdjustmentWarning,
    AuditWriteWarning,
)

__all__ = [
    "settings",
    "get_settings",
    "DatabaseType",
    "AppException",
    "DatabaseError",
    "NotFoundError",
    "ValidationError",
    "BadRequestError",
    "BusinessRuleError",
    "StockShortfallError",
    "OrderUpdateFailedError",
    "LineItemWriteFailedError",
    "RollbackFailedError",
    "StockAdjustmentWarning",
    "AuditWriteWarning",
]
