# ==============================================================================
# SETTINGS CONFIGURATION - Environment Management
# ==============================================================================
# Pydantic Settings for type-safe environment variable management
# Supports: Development, Staging, Production environments
# ==============================================================================

from __future__ import annotations

from enum import Enum
from functools import lru_cache
from typing import List

from pydantic import Field, field_validator, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseType(str, Enum):
    """
    Supported database types for the application.

    Attributes:
        SQLITE: Lightweight file-based database for development/testing
        POSTGRESQL: Production-grade relational database
    """
    SQLITE = "sqlite"
    POSTGRESQL = "postgresql"


class Environment(str, Enum):
    """Application environment types."""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class Settings(BaseSettings):
    """
    Application Settings Configuration.

    Manages all environment variables with type validation and defaults.
    Values are read from the process environment and an optional `.env`
    file.

    Example:
        >>> from backoffice.core.settings import settings
        >>> print(settings.ORDER_SHORT_ID_PREFIX)
        'ORD'
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # --------------------------------------------------------------------------
    # APPLICATION SETTINGS
    # --------------------------------------------------------------------------
    APP_NAME: str = Field(
        default="Fireworks Back-Office",
        description="Application display name"
    )
    APP_VERSION: str = Field(
        default="1.0.0",
        description="Application semantic version"
    )
    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode (logs, stack traces)"
    )
    ENVIRONMENT: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Current deployment environment"
    )

    # --------------------------------------------------------------------------
    # API CONFIGURATION
    # --------------------------------------------------------------------------
    API_V1_PREFIX: str = Field(
        default="/api/v1",
        description="API version 1 route prefix"
    )
    API_TITLE: str = Field(
        default="Fireworks Back-Office API",
        description="OpenAPI documentation title"
    )
    API_DESCRIPTION: str = Field(
        default="Orders, inventory, ledgers and analytics for the storefront",
        description="OpenAPI documentation description"
    )

    # --------------------------------------------------------------------------
    # DATABASE TYPE SELECTION
    # --------------------------------------------------------------------------
    DATABASE_TYPE: DatabaseType = Field(
        default=DatabaseType.SQLITE,
        description="Active database backend (sqlite, postgresql)"
    )

    # --------------------------------------------------------------------------
    # SQLITE CONFIGURATION
    # --------------------------------------------------------------------------
    SQLITE_URL: str = Field(
        default="sqlite:///./backoffice.db",
        description="SQLite database file path"
    )

    # --------------------------------------------------------------------------
    # POSTGRESQL CONFIGURATION
    # --------------------------------------------------------------------------
    POSTGRES_HOST: str = Field(
        default="localhost",
        description="PostgreSQL server hostname"
    )
    POSTGRES_PORT: int = Field(
        default=5432,
        ge=1,
        le=65535,
        description="PostgreSQL server port"
    )
    POSTGRES_USER: str = Field(
        default="postgres",
        description="PostgreSQL username"
    )
    POSTGRES_PASSWORD: str = Field(
        default="password",
        description="PostgreSQL password"
    )
    POSTGRES_DB: str = Field(
        default="backoffice",
        description="PostgreSQL database name"
    )
    DB_POOL_SIZE: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Database connection pool size"
    )

    # --------------------------------------------------------------------------
    # CORS SETTINGS
    # --------------------------------------------------------------------------
    CORS_ORIGINS: List[str] = Field(
        default=["*"],
        description="Allowed CORS origins"
    )
    CORS_ALLOW_CREDENTIALS: bool = Field(
        default=True,
        description="Allow credentials in CORS requests"
    )

    # --------------------------------------------------------------------------
    # LOGGING CONFIGURATION
    # --------------------------------------------------------------------------
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    LOG_FORMAT: str = Field(
        default="text",
        pattern="^(text|json)$",
        description="Log format (json, text)"
    )

    # --------------------------------------------------------------------------
    # BUSINESS SETTINGS
    # --------------------------------------------------------------------------
    ORDER_SHORT_ID_PREFIX: str = Field(
        default="ORD",
        description="Prefix of human-readable order codes"
    )
    QUOTATION_SHORT_ID_PREFIX: str = Field(
        default="QT",
        description="Prefix of human-readable quotation codes"
    )
    SHORT_ID_WIDTH: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Zero-padded width of the numeric part of short ids"
    )
    LOW_STOCK_THRESHOLD: int = Field(
        default=10,
        ge=0,
        description="Products at or below this stock level are reported as low"
    )
    COMPLETED_ORDER_STATUSES: List[str] = Field(
        default=["shipped", "dispatched", "delivered"],
        description="Statuses counted as revenue (case-insensitive)"
    )
    SEASON_START_MONTH: int = Field(
        default=4,
        ge=1,
        le=12,
        description="First month of the trading season"
    )

    # --------------------------------------------------------------------------
    # COMPUTED PROPERTIES
    # --------------------------------------------------------------------------
    @computed_field
    @property
    def postgres_url(self) -> str:
        """Async PostgreSQL connection string with asyncpg driver."""
        return (
            f"postgresql+asyncpg://{self.POSTGRES_USER}:"
            f"{self.POSTGRES_PASSWORD}@{self.POSTGRES_HOST}:"
            f"{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )

    @computed_field
    @property
    def sqlite_async_url(self) -> str:
        """Async SQLite connection string with aiosqlite driver."""
        if "aiosqlite" in self.SQLITE_URL:
            return self.SQLITE_URL
        return self.SQLITE_URL.replace("sqlite://", "sqlite+aiosqlite://")

    @computed_field
    @property
    def database_url(self) -> str:
        """
        Get the appropriate database URL based on DATABASE_TYPE.

        Raises:
            ValueError: If DATABASE_TYPE is not supported
        """
        if self.DATABASE_TYPE == DatabaseType.SQLITE:
            return self.sqlite_async_url
        elif self.DATABASE_TYPE == DatabaseType.POSTGRESQL:
            return self.postgres_url
        raise ValueError(f"Unsupported database type: {self.DATABASE_TYPE}")

    @computed_field
    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.ENVIRONMENT == Environment.PRODUCTION

    # --------------------------------------------------------------------------
    # VALIDATORS
    # --------------------------------------------------------------------------
    @field_validator("CORS_ORIGINS", "COMPLETED_ORDER_STATUSES", mode="before")
    @classmethod
    def parse_csv_list(cls, v):
        """Parse comma-separated strings into lists."""
        if isinstance(v, str):
            if v == "*":
                return ["*"]
            return [item.strip() for item in v.split(",") if item.strip()]
        return v

    @field_validator("COMPLETED_ORDER_STATUSES")
    @classmethod
    def lowercase_statuses(cls, v: List[str]) -> List[str]:
        """Statuses are compared case-insensitively."""
        return [status.lower() for status in v]

    @field_validator("LOG_LEVEL")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper()


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached Settings instance.

    Returns:
        Settings: Cached settings instance
    """
    return Settings()


# Module-level settings instance for convenient imports
settings = get_settings()
