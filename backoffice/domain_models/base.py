# ==============================================================================
# BASE MODEL - SQLAlchemy Foundation
# ==============================================================================
# Base declarative class and common mixins for all SQL models
# ==============================================================================

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from sqlalchemy import DateTime, func, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SQLBase(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

    Provides a UUID string primary key and dictionary serialization.

    Example:
        >>> class Vendor(SQLBase):
        ...     __tablename__ = "vendors"
        ...     name: Mapped[str] = mapped_column(String(255))
    """

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
    )

    def to_dict(self) -> dict[str, Any]:
        """
        Convert model instance to dictionary.

        Returns:
            Dictionary with all column values
        """
        return {
            column.name: getattr(self, column.name)
            for column in self.__table__.columns
        }

    def __repr__(self) -> str:
        class_name = self.__class__.__name__
        return f"<{class_name}(id={self.id})>"


class TimestampMixin:
    """
    Mixin providing automatic timestamp tracking.

    created_at gets a client-side default as well as a server default so
    records inserted in one batch keep their insertion order.

    Attributes:
        created_at: Timestamp of record creation (auto-set)
        updated_at: Timestamp of last update (auto-updated)
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utc_now,
        server_default=func.now(),
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utc_now,
        server_default=func.now(),
        onupdate=_utc_now,
        nullable=False,
    )
