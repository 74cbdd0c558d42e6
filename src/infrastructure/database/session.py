"""Async database engine and session lifecycle management.

Core functionality:
- **Connection pooling**: Configurable pool with overflow and recycling
  (PostgreSQL); a single shared connection for in-memory SQLite
- **Session factory**: Async session creation with proper cleanup
- **Schema creation**: Creates the record tables for local runs and tests
- **Health checks**: Database connectivity validation
- **Query monitoring**: Slow query detection through cursor event listeners

The module uses a singleton pattern through _DatabaseManager to ensure
a single engine instance across the application lifecycle.
"""

import asyncio
import threading
import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager, nullcontext
from typing import Any
from weakref import WeakKeyDictionary

from loguru import logger
from sqlalchemy import event, text
from sqlalchemy.engine import Connection
from sqlalchemy.engine.interfaces import DBAPICursor, ExecutionContext
from sqlalchemy.exc import ArgumentError, InvalidRequestError, SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import Pool, StaticPool

from src.core.config import get_settings
from src.core.constants import MILLISECONDS_PER_SECOND
from src.core.error_context import sanitize_sql_params
from src.infrastructure.constants import (
    COMMAND_TIMEOUT_SECONDS,
    MAX_LOGGED_STATEMENT_LENGTH,
    POOL_RECYCLE_SECONDS,
)
from src.infrastructure.database.base import Base
from src.infrastructure.database.models import RECORD_MODELS

# Store query start times for execution contexts
_query_start_times: WeakKeyDictionary[ExecutionContext, float] = WeakKeyDictionary()

# Sessions on a single shared connection must not interleave transactions
_shared_connection_locks: WeakKeyDictionary[Pool, asyncio.Lock] = WeakKeyDictionary()


def _before_cursor_execute(
    _conn: Connection,
    _cursor: DBAPICursor,
    _statement: str,
    _parameters: dict[str, Any] | list[Any] | tuple[Any, ...] | None,
    context: ExecutionContext,
    _executemany: bool,
) -> None:
    """Track query start time for performance monitoring."""
    _query_start_times[context] = time.time()


def _after_cursor_execute(
    _conn: Connection,
    cursor: DBAPICursor,
    statement: str,
    parameters: dict[str, Any] | list[Any] | tuple[Any, ...] | None,
    context: ExecutionContext,
    executemany: bool,
) -> None:
    """Log queries slower than the configured threshold.

    Args:
        _conn: Database connection (unused).
        cursor: Database cursor, read for the affected row count.
        statement: SQL statement that was executed.
        parameters: Query parameters.
        context: SQLAlchemy execution context.
        executemany: Whether this was an executemany operation.
    """
    settings = get_settings()

    duration_ms = 0.0
    start_time = _query_start_times.pop(context, None)
    if start_time is not None:
        duration_ms = (time.time() - start_time) * MILLISECONDS_PER_SECOND

    rows_affected: int | None = getattr(cursor, "rowcount", -1)
    if rows_affected is None:
        rows_affected = -1

    if duration_ms >= settings.log_config.slow_query_threshold_ms:
        clean_statement = " ".join(statement.split())[:MAX_LOGGED_STATEMENT_LENGTH]

        logger.warning(
            "Slow query detected: {}... Duration: {:.2f}ms Rows: {}",
            clean_statement[:100],
            round(duration_ms, 2),
            rows_affected,
            query=clean_statement,
            duration_ms=round(duration_ms, 2),
            rows_affected=rows_affected,
            parameters=sanitize_sql_params(parameters),
            executemany=executemany,
            threshold_ms=settings.log_config.slow_query_threshold_ms,
        )


def _engine_options(url: str) -> dict[str, Any]:
    """Build create_async_engine keyword arguments for the given URL."""
    db_config = get_settings().database_config

    if url.startswith("sqlite"):
        options: dict[str, Any] = {"echo": db_config.echo}
        if ":memory:" in url or url.rstrip("/").endswith("sqlite+aiosqlite:"):
            # Every session must see the same in-memory database
            options["poolclass"] = StaticPool
        return options

    return {
        "pool_size": db_config.pool_size,
        "max_overflow": db_config.max_overflow,
        "pool_timeout": db_config.pool_timeout,
        "pool_pre_ping": db_config.pool_pre_ping,
        "echo": db_config.echo,
        "pool_recycle": POOL_RECYCLE_SECONDS,
        "connect_args": {
            "server_settings": {"jit": "off"},
            "command_timeout": COMMAND_TIMEOUT_SECONDS,
        },
    }


def create_database_engine(database_url: str | None = None) -> AsyncEngine:
    """Create an async SQLAlchemy engine.

    Args:
        database_url: Optional database URL. If not provided, uses the
                     configured database URL from settings.

    Returns:
        AsyncEngine: Configured async engine instance.
    """
    settings = get_settings()
    url = database_url or settings.database_config.database_url

    engine = create_async_engine(url, **_engine_options(url))

    if settings.log_config.enable_sql_logging:
        try:
            event.listen(
                engine.sync_engine, "before_cursor_execute", _before_cursor_execute
            )
            event.listen(
                engine.sync_engine, "after_cursor_execute", _after_cursor_execute
            )
            logger.info("Registered custom query performance event listeners")
        except (InvalidRequestError, ArgumentError, AttributeError, TypeError) as e:
            logger.warning(
                "Failed to register query performance event listeners: {}: {}",
                type(e).__name__,
                str(e),
            )

    logger.info(
        "Created database engine - dialect: {}, sql_logging: {}",
        engine.dialect.name,
        settings.log_config.enable_sql_logging,
    )

    return engine


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create a session factory bound to an engine."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,  # Don't expire objects after commit
    )


class _DatabaseManager:
    """Internal class to manage database engine and session factory instances."""

    def __init__(self) -> None:
        self._engine: AsyncEngine | None = None
        self._async_session_factory: async_sessionmaker[AsyncSession] | None = None
        self._lock = threading.Lock()

    def get_engine(self) -> AsyncEngine:
        """Get or create the async engine instance."""
        if self._engine is None:
            with self._lock:
                if self._engine is None:
                    self._engine = create_database_engine()
        return self._engine

    def get_session_factory(self) -> async_sessionmaker[AsyncSession]:
        """Get or create the async session factory."""
        if self._async_session_factory is None:
            engine = self.get_engine()
            with self._lock:
                if self._async_session_factory is None:
                    self._async_session_factory = create_session_factory(engine)
                    logger.info("Created async session factory")
        return self._async_session_factory

    async def close(self) -> None:
        """Close the database engine and cleanup connections."""
        if self._engine is not None:
            await self._engine.dispose()
            logger.info("Database engine disposed")
            self._engine = None
            self._async_session_factory = None

    def reset(self) -> None:
        """Reset the manager state. Used primarily for testing."""
        self._engine = None
        self._async_session_factory = None


# Singleton instance
_db_manager = _DatabaseManager()


def get_engine() -> AsyncEngine:
    """Get or create the global async engine instance."""
    return _db_manager.get_engine()


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get or create the global async session factory."""
    return _db_manager.get_session_factory()


def _shared_connection_lock(
    factory: async_sessionmaker[AsyncSession],
) -> asyncio.Lock | None:
    """Return the lock serializing sessions of a single-connection engine.

    Engines on ``StaticPool`` hand every session the same connection, so a
    rollback in one session would discard the others' pending writes.
    """
    pool = getattr(factory.kw.get("bind"), "pool", None)
    if not isinstance(pool, StaticPool):
        return None
    lock = _shared_connection_locks.get(pool)
    if lock is None:
        lock = _shared_connection_locks[pool] = asyncio.Lock()
    return lock


@asynccontextmanager
async def get_async_session(
    session_factory: async_sessionmaker[AsyncSession] | None = None,
) -> AsyncGenerator[AsyncSession]:
    """Get an async database session with automatic cleanup.

    The session is committed on success or rolled back on error. On an
    engine that shares one connection between sessions (in-memory SQLite),
    sessions are opened one at a time.

    Args:
        session_factory: Factory to open the session from; the global one
            by default.

    Yields:
        AsyncGenerator[AsyncSession]: Database session for performing operations.

    Raises:
        Exception: Any exception raised while the session is in use is re-raised
                  after rollback and cleanup.

    Example:
        async with get_async_session() as session:
            result = await session.execute(select(User))
            users = result.scalars().all()
    """
    factory = session_factory or get_session_factory()
    lock = _shared_connection_lock(factory)
    async with lock if lock is not None else nullcontext(), factory() as session:
        logger.debug("Created new database session")
        try:
            yield session
            await session.commit()
            logger.debug("Database session committed successfully")
        except Exception:
            await session.rollback()
            logger.debug("Database session rolled back due to error")
            raise
        finally:
            await session.close()
            logger.debug("Database session closed")


async def init_database(engine: AsyncEngine | None = None) -> None:
    """Create every record table that does not exist yet.

    Production databases are migrated with Alembic; this is for local runs
    and tests.

    Args:
        engine: Engine to create the tables on; the global one by default.
    """
    target = engine or get_engine()
    async with target.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info(
        "Database schema ready - tables: {}",
        sorted(model.__tablename__ for model in RECORD_MODELS.values()),
    )


async def close_database() -> None:
    """Close the database engine and cleanup connections."""
    await _db_manager.close()


async def check_database_connection(
    engine: AsyncEngine | None = None,
) -> tuple[bool, str | None]:
    """Check if database connection is available.

    Args:
        engine: Engine to check; the global one by default.

    Returns:
        tuple[bool, str | None]: Whether the connection works, and the error
            message when it does not.
    """
    try:
        target = engine or get_engine()
        async with target.connect() as conn:
            result = await conn.execute(text("SELECT 1"))
            _ = result.scalar()
    except SQLAlchemyError as e:
        return False, str(e)
    else:
        return True, None
