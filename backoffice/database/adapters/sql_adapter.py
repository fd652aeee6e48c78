# ==============================================================================
# SQL ADAPTERS - SQLAlchemy Async (aiosqlite / asyncpg)
# ==============================================================================
# One SQLAlchemy implementation of the gateway, specialised per backend
# Every method opens and commits its own session
# ==============================================================================

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional, Type

from sqlalchemy import and_, delete, func, select, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from backoffice.core.settings import settings
from backoffice.core.exceptions import DatabaseError
from backoffice.database.adapters.base_adapter import BaseDatabaseAdapter

logger = logging.getLogger(__name__)


class SQLAlchemyAdapter(BaseDatabaseAdapter[Any]):
    """
    Gateway implementation on SQLAlchemy's async engine.

    Records are returned as detached ORM instances (sessions are created
    with expire_on_commit=False), so column attributes stay readable after
    the call returns. Relationships are never loaded.

    Attributes:
        _database_url: Async connection string
        _engine: SQLAlchemy async engine
        _session_factory: Session factory for creating sessions
        _model_registry: Mapping of table names to model classes
    """

    backend_name = "SQL"

    def __init__(self, database_url: str) -> None:
        self._database_url = database_url
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker[AsyncSession]] = None
        self._model_registry: Dict[str, Type[DeclarativeBase]] = {}

    # ==========================================================================
    # MODEL REGISTRY
    # ==========================================================================

    def register_model(
        self,
        name: str,
        model: Type[DeclarativeBase],
    ) -> None:
        """Register a SQLAlchemy model under its table name."""
        self._model_registry[name] = model
        logger.debug(f"Registered model '{name}' -> {model.__name__}")

    def _get_model(self, collection: str) -> Type[DeclarativeBase]:
        """
        Get registered model by table name.

        Raises:
            ValueError: If model not registered
        """
        if collection not in self._model_registry:
            raise ValueError(
                f"Model '{collection}' not registered. "
                f"Available models: {list(self._model_registry.keys())}"
            )
        return self._model_registry[collection]

    def _conditions(self, model: Type[DeclarativeBase], filters: Optional[Dict[str, Any]]) -> list:
        conditions = []
        for key, value in (filters or {}).items():
            if not hasattr(model, key):
                continue
            column = getattr(model, key)
            if isinstance(value, (list, tuple, set)):
                conditions.append(column.in_(list(value)))
            else:
                conditions.append(column == value)
        return conditions

    def _engine_kwargs(self) -> Dict[str, Any]:
        return {}

    # ==========================================================================
    # LIFECYCLE METHODS
    # ==========================================================================

    async def connect(self) -> None:
        """Create the async engine and any missing tables."""
        try:
            self._engine = create_async_engine(
                self._database_url,
                echo=settings.DEBUG,
                **self._engine_kwargs(),
            )

            self._session_factory = async_sessionmaker(
                bind=self._engine,
                class_=AsyncSession,
                expire_on_commit=False,
                autoflush=False,
            )

            async with self._engine.begin() as conn:
                from backoffice.domain_models.base import SQLBase
                await conn.run_sync(SQLBase.metadata.create_all)

            logger.info(f"{self.backend_name} adapter connected successfully")

        except Exception as e:
            logger.error(f"Failed to connect to {self.backend_name}: {e}")
            raise DatabaseError(f"{self.backend_name} connection failed: {e}")

    async def disconnect(self) -> None:
        """Close database connections and dispose engine."""
        if self._engine:
            await self._engine.dispose()
            logger.info(f"{self.backend_name} adapter disconnected")

    async def health_check(self) -> bool:
        try:
            async with self.session() as session:
                await session.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning(f"{self.backend_name} health check failed: {e}")
            return False

    # ==========================================================================
    # SESSION MANAGEMENT
    # ==========================================================================

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """
        Provide transactional session scope.

        Commits on successful exit, rolls back on exception.

        Raises:
            RuntimeError: If database not connected
        """
        if not self._session_factory:
            raise RuntimeError(
                "Database not connected. Call connect() first."
            )

        session: AsyncSession = self._session_factory()
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    # ==========================================================================
    # CRUD OPERATIONS
    # ==========================================================================

    async def create(
        self,
        collection: str,
        data: Dict[str, Any],
    ) -> Any:
        model = self._get_model(collection)

        async with self.session() as session:
            instance = model(**data)
            session.add(instance)
            await session.flush()
            await session.refresh(instance)
            return instance

    async def get_by_id(
        self,
        collection: str,
        id: Any,
    ) -> Optional[Any]:
        model = self._get_model(collection)

        async with self.session() as session:
            return await session.get(model, id)

    async def get_all(
        self,
        collection: str,
        skip: int = 0,
        limit: int = 100,
        filters: Optional[Dict[str, Any]] = None,
        sort_by: Optional[str] = None,
        sort_order: str = "asc",
    ) -> List[Any]:
        model = self._get_model(collection)

        async with self.session() as session:
            query = select(model)

            conditions = self._conditions(model, filters)
            if conditions:
                query = query.where(and_(*conditions))

            if sort_by and hasattr(model, sort_by):
                order_column = getattr(model, sort_by)
                if sort_order.lower() == "desc":
                    order_column = order_column.desc()
                query = query.order_by(order_column)

            query = query.offset(skip).limit(limit)

            result = await session.execute(query)
            return list(result.scalars().all())

    async def update(
        self,
        collection: str,
        id: Any,
        data: Dict[str, Any],
    ) -> Optional[Any]:
        model = self._get_model(collection)

        async with self.session() as session:
            instance = await session.get(model, id)
            if not instance:
                return None

            for key, value in data.items():
                if hasattr(instance, key):
                    setattr(instance, key, value)

            await session.flush()
            await session.refresh(instance)
            return instance

    async def delete(
        self,
        collection: str,
        id: Any,
    ) -> bool:
        model = self._get_model(collection)

        async with self.session() as session:
            instance = await session.get(model, id)
            if not instance:
                return False

            await session.delete(instance)
            return True

    # ==========================================================================
    # QUERY OPERATIONS
    # ==========================================================================

    async def count(
        self,
        collection: str,
        filters: Optional[Dict[str, Any]] = None,
    ) -> int:
        model = self._get_model(collection)

        async with self.session() as session:
            query = select(func.count()).select_from(model)

            conditions = self._conditions(model, filters)
            if conditions:
                query = query.where(and_(*conditions))

            result = await session.execute(query)
            return result.scalar() or 0

    # ==========================================================================
    # BULK OPERATIONS
    # ==========================================================================

    async def bulk_create(
        self,
        collection: str,
        data: List[Dict[str, Any]],
    ) -> List[Any]:
        model = self._get_model(collection)

        async with self.session() as session:
            instances = [model(**item) for item in data]
            session.add_all(instances)
            await session.flush()

            for instance in instances:
                await session.refresh(instance)

            return instances

    async def bulk_delete(
        self,
        collection: str,
        filters: Dict[str, Any],
    ) -> int:
        model = self._get_model(collection)

        async with self.session() as session:
            conditions = self._conditions(model, filters)
            stmt = delete(model).where(and_(*conditions))
            result = await session.execute(stmt)
            return result.rowcount


class SQLiteAdapter(SQLAlchemyAdapter):
    """
    SQLite adapter using aiosqlite.

    Used for development, tests and single-machine deployments.
    """

    backend_name = "SQLite"

    def __init__(self, database_url: Optional[str] = None) -> None:
        # Ensure async driver is used
        url = database_url or settings.SQLITE_URL
        if "sqlite://" in url and "aiosqlite" not in url:
            url = url.replace("sqlite://", "sqlite+aiosqlite://")
        super().__init__(url)

    def _engine_kwargs(self) -> Dict[str, Any]:
        return {"connect_args": {"check_same_thread": False}}


class PostgreSQLAdapter(SQLAlchemyAdapter):
    """PostgreSQL adapter using asyncpg with a pooled engine."""

    backend_name = "PostgreSQL"

    def __init__(self, database_url: Optional[str] = None) -> None:
        super().__init__(database_url or settings.postgres_url)

    def _engine_kwargs(self) -> Dict[str, Any]:
        return {"pool_size": settings.DB_POOL_SIZE, "pool_pre_ping": True}
