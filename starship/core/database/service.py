"""
Database Service - Core Infrastructure Layer

Purpose
-------
Async database engine and session management for Starship Commander.
Provides the unit-of-work boundary every state mutation runs inside:
commit on success, rollback on any exception.

Responsibilities
----------------
- Own one AsyncEngine and its async_sessionmaker
- Provide async context managers for read sessions and atomic transactions
- Translate SQLAlchemy failures into `PersistenceError` after rollback
- Configure a per-transaction statement timeout on PostgreSQL
- Create the schema for local/dev/test databases
- Expose a lightweight health check

Non-Responsibilities
--------------------
- Domain logic or business rules
- Retry policies (a failed completion must be resubmitted by the caller)
- Migrations

Architecture Notes
------------------
**Transaction Model**:
- `get_transaction()` is the interface for all state mutations
- Never call `session.commit()` inside service code
- Lock rows with `select(...).with_for_update()`; backends without row locks
  (SQLite) ignore the clause and serialize writers at the file level instead

**Pooling**:
- PostgreSQL: the async queue pool sized from Config (NullPool when testing)
- SQLite in-memory: StaticPool so every session sees the same database
- SQLite file: the dialect default

**Dependency Injection**:
Services receive a `DatabaseService` instance (or anything satisfying
`UnitOfWork`) through their constructor. There is no process-wide instance.

Usage Example
-------------
>>> db = DatabaseService()
>>> await db.initialize()
>>> async with db.get_transaction("complete_mission") as session:
...     progress = await repo.find_one_where(session, ..., for_update=True)
...     progress.coins += 10
...     # Automatic commit on exit
"""

from __future__ import annotations

import asyncio
import time
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncContextManager, AsyncGenerator, Dict, Optional, Protocol

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool, StaticPool

from starship.core.config.config import Config
from starship.core.database.base import Base
from starship.core.exceptions import PersistenceError
from starship.core.logging.logger import get_logger

logger = get_logger(__name__)


class DatabaseInitializationError(RuntimeError):
    """Raised when database engine initialization fails."""


class DatabaseNotInitializedError(RuntimeError):
    """Raised when database operations are attempted before initialization."""


class UnitOfWork(Protocol):
    """
    Transactional boundary the domain services depend on.

    `get_transaction()` must commit when the block exits normally and roll
    back (leaving no partial writes) when it raises.
    """

    def get_session(self) -> AsyncContextManager[AsyncSession]:
        ...

    def get_transaction(
        self, operation: str = "transaction"
    ) -> AsyncContextManager[AsyncSession]:
        ...


@dataclass(frozen=True)
class DatabaseSettings:
    """
    Immutable snapshot of database configuration.

    Built from `Config` by default; tests pass their own.
    """

    url: str
    echo: bool = False
    pool_size: int = 10
    max_overflow: int = 10
    pool_recycle: int = 1800
    pool_timeout: int = 30
    statement_timeout_ms: int = 30_000
    testing: bool = False

    @classmethod
    def from_config(cls) -> "DatabaseSettings":
        if not Config.DATABASE_URL or not isinstance(Config.DATABASE_URL, str):
            logger.error("DATABASE_URL is not configured or invalid")
            raise DatabaseInitializationError(
                "DATABASE_URL must be configured as a non-empty string"
            )
        return cls(
            url=Config.DATABASE_URL,
            echo=Config.DATABASE_ECHO,
            pool_size=Config.DATABASE_POOL_SIZE,
            max_overflow=Config.DATABASE_MAX_OVERFLOW,
            pool_recycle=Config.DATABASE_POOL_RECYCLE,
            pool_timeout=Config.DATABASE_POOL_TIMEOUT,
            statement_timeout_ms=Config.DATABASE_STATEMENT_TIMEOUT_MS,
            testing=Config.is_testing(),
        )

    @property
    def is_postgres(self) -> bool:
        return self.url.startswith(("postgresql://", "postgresql+asyncpg://"))

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")

    @property
    def is_memory(self) -> bool:
        return self.is_sqlite and (":memory:" in self.url or self.url.endswith("://"))

    @property
    def url_scheme(self) -> str:
        return self.url.split(":", 1)[0] if ":" in self.url else "unknown"


class DatabaseService:
    """
    Async engine and session management.

    Public API
    ----------
    - initialize() / shutdown()
    - get_session() -> read access, no commit
    - get_transaction(operation) -> atomic unit of work
    - health_check() -> `SELECT 1`
    - create_schema() / drop_schema()
    """

    def __init__(self, settings: Optional[DatabaseSettings] = None) -> None:
        self._settings = settings
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker[AsyncSession]] = None
        self._init_lock = asyncio.Lock()

    @property
    def settings(self) -> DatabaseSettings:
        if self._settings is None:
            self._settings = DatabaseSettings.from_config()
        return self._settings

    @property
    def is_initialized(self) -> bool:
        return self._engine is not None

    # ========================================================================
    # Initialization & Shutdown
    # ========================================================================

    def _engine_kwargs(self) -> Dict[str, Any]:
        settings = self.settings
        kwargs: Dict[str, Any] = {"echo": settings.echo}

        if settings.is_memory:
            kwargs["poolclass"] = StaticPool
        elif settings.is_sqlite:
            pass
        elif settings.testing:
            kwargs["poolclass"] = NullPool
        else:
            kwargs.update(
                pool_size=settings.pool_size,
                max_overflow=settings.max_overflow,
                pool_recycle=settings.pool_recycle,
                pool_timeout=settings.pool_timeout,
                pool_pre_ping=True,
            )
        return kwargs

    async def initialize(self) -> None:
        """
        Create the engine and session factory. Idempotent.

        Raises
        ------
        DatabaseInitializationError
            If configuration is invalid or engine creation fails.
        """
        async with self._init_lock:
            if self._engine is not None:
                logger.debug("DatabaseService already initialized; skipping")
                return

            logger.info("Initializing DatabaseService")

            try:
                settings = self.settings
                self._engine = create_async_engine(
                    settings.url, **self._engine_kwargs()
                )
                self._session_factory = async_sessionmaker(
                    bind=self._engine,
                    class_=AsyncSession,
                    expire_on_commit=False,
                )
            except Exception as exc:
                logger.error(
                    "DatabaseService initialization failed",
                    extra={"error": str(exc), "error_type": type(exc).__name__},
                    exc_info=True,
                )
                raise DatabaseInitializationError(
                    f"Database initialization failed: {exc}"
                ) from exc

            logger.info(
                "DatabaseService initialized successfully",
                extra={"url_scheme": settings.url_scheme},
            )

    async def shutdown(self) -> None:
        """Dispose the engine. Safe to call more than once."""
        async with self._init_lock:
            if self._engine is None:
                logger.debug("DatabaseService not initialized; nothing to shutdown")
                return

            logger.info("Shutting down DatabaseService")
            try:
                await self._engine.dispose()
            finally:
                self._engine = None
                self._session_factory = None
            logger.info("DatabaseService shutdown complete")

    async def create_schema(self) -> None:
        """Create every table registered on `Base.metadata`."""
        # Model modules register their tables on import
        import starship.database.models  # noqa: F401

        engine = self._require_engine()
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database schema created")

    async def drop_schema(self) -> None:
        import starship.database.models  # noqa: F401

        engine = self._require_engine()
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
        logger.info("Database schema dropped")

    # ========================================================================
    # Health Check
    # ========================================================================

    async def health_check(self) -> bool:
        """
        Execute `SELECT 1`. Never raises; returns False on failure.
        """
        if self._engine is None:
            logger.warning("Health check called on uninitialized DatabaseService")
            return False

        start = time.perf_counter()
        try:
            async with self._engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as exc:
            logger.warning(
                "Database health check failed",
                extra={"error": str(exc), "error_type": type(exc).__name__},
            )
            return False
        finally:
            logger.debug(
                "Database health check completed",
                extra={"duration_ms": (time.perf_counter() - start) * 1000.0},
            )

    # ========================================================================
    # Session & Transaction Context Managers
    # ========================================================================

    def _require_engine(self) -> AsyncEngine:
        if self._engine is None:
            logger.error("DatabaseService operation attempted before initialization")
            raise DatabaseNotInitializedError(
                "DatabaseService must be initialized before use. "
                "Call DatabaseService.initialize() during startup."
            )
        return self._engine

    def _require_factory(self) -> async_sessionmaker[AsyncSession]:
        self._require_engine()
        assert self._session_factory is not None
        return self._session_factory

    async def _apply_statement_timeout(self, session: AsyncSession) -> None:
        if self.settings.is_postgres:
            await session.execute(
                text(
                    f"SET LOCAL statement_timeout = "
                    f"{int(self.settings.statement_timeout_ms)}"
                )
            )

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Session for read-only work. No commit; closed on exit.

        Raises
        ------
        DatabaseNotInitializedError
            If the service has not been initialized.
        PersistenceError
            If the storage layer fails.
        """
        factory = self._require_factory()

        start = time.perf_counter()
        async with factory() as session:
            try:
                await self._apply_statement_timeout(session)
                yield session
            except SQLAlchemyError as exc:
                logger.error(
                    "Database error in read session",
                    extra={"error": str(exc), "error_type": type(exc).__name__},
                )
                raise PersistenceError("read", exc) from exc
            finally:
                logger.debug(
                    "Database session closed",
                    extra={"duration_ms": (time.perf_counter() - start) * 1000.0},
                )

    @asynccontextmanager
    async def get_transaction(
        self, operation: str = "transaction"
    ) -> AsyncGenerator[AsyncSession, None]:
        """
        Session wrapped in one atomic transaction.

        On success the transaction commits. On any exception it rolls back;
        SQLAlchemy errors are re-raised as `PersistenceError`, everything
        else (domain errors included) propagates unchanged.

        Args:
            operation: Label used in logs and in the `PersistenceError`.
        """
        factory = self._require_factory()

        start = time.perf_counter()
        async with factory() as session:
            try:
                await self._apply_statement_timeout(session)
                logger.debug(
                    "Database transaction started", extra={"operation": operation}
                )
                yield session
                await session.commit()
            except SQLAlchemyError as exc:
                await session.rollback()
                logger.error(
                    "Database error in transaction; rolled back",
                    extra={
                        "operation": operation,
                        "error": str(exc),
                        "error_type": type(exc).__name__,
                        "duration_ms": (time.perf_counter() - start) * 1000.0,
                    },
                    exc_info=True,
                )
                raise PersistenceError(operation, exc) from exc
            except Exception as exc:
                await session.rollback()
                logger.debug(
                    "Transaction rolled back",
                    extra={
                        "operation": operation,
                        "error_type": type(exc).__name__,
                        "duration_ms": (time.perf_counter() - start) * 1000.0,
                    },
                )
                raise

            logger.debug(
                "Database transaction committed",
                extra={
                    "operation": operation,
                    "duration_ms": (time.perf_counter() - start) * 1000.0,
                },
            )
