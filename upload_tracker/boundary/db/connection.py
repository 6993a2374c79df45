"""
Database connection management.

Provides the async SQLAlchemy engine, session factory, and FastAPI
dependency for database session injection. The engine is created once per
process and shared by every request.

Dependencies: sqlalchemy, upload_tracker.configs
System role: Database connection lifecycle management
"""

from functools import lru_cache
from typing import AsyncGenerator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from upload_tracker.configs import get_settings


@lru_cache
def get_async_engine() -> AsyncEngine:
    """
    Create the process-wide async SQLAlchemy engine.

    PostgreSQL gets a sized connection pool with pre-ping so stale
    connections are detected before use. SQLite gets a busy timeout and
    foreign key enforcement.

    Returns:
        AsyncEngine: Configured async SQLAlchemy engine

    Raises:
        ArgumentError: If database URL is invalid or engine creation fails
    """
    db_config = get_settings().database

    if db_config.is_sqlite:
        engine = create_async_engine(
            db_config.async_database_url,
            echo=db_config.echo_sql,
            connect_args={"timeout": db_config.pool_timeout},
        )
        configure_sqlite_engine(engine)
        return engine

    return create_async_engine(
        db_config.async_database_url,
        echo=db_config.echo_sql,
        pool_size=db_config.pool_size,
        max_overflow=db_config.max_overflow,
        pool_timeout=db_config.pool_timeout,
        pool_pre_ping=True,
    )


def configure_sqlite_engine(engine: AsyncEngine) -> None:
    """
    Enforce foreign keys and open every transaction with BEGIN IMMEDIATE.

    SQLite only allows one writer. Taking the write lock when the
    transaction starts makes concurrent writers queue on the busy timeout
    instead of failing when they upgrade a read lock mid-transaction.

    Limitation: read-only sessions (status polls, audits) also open with
    BEGIN IMMEDIATE, so on SQLite they queue behind writers and block them
    for their duration. PostgreSQL readers never take this lock. SQLite is
    meant for development and tests only.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, _connection_record):
        # Driver must not emit its own BEGIN
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


@lru_cache
def get_async_session_factory() -> async_sessionmaker[AsyncSession]:
    """
    Create async session factory for database operations.

    Sessions never autoflush and keep attributes loaded after commit, so
    services control transaction boundaries explicitly.

    Returns:
        async_sessionmaker: Async session factory bound to the shared engine

    Usage:
        SessionFactory = get_async_session_factory()
        async with SessionFactory() as session:
            session.add(obj)
            await session.commit()
    """
    return async_sessionmaker(
        bind=get_async_engine(),
        autoflush=False,
        expire_on_commit=False,
    )


async def get_async_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency for async database session injection with automatic cleanup.

    Yields:
        AsyncSession: Async SQLAlchemy session scoped to the request

    Usage:
        @router.get("/jobs/{job_id}/status")
        async def get_status(job_id: UUID, db: AsyncSession = Depends(get_async_db)):
            ...
    """
    SessionFactory = get_async_session_factory()
    async with SessionFactory() as session:
        yield session


async def dispose_engine() -> None:
    """Close pooled connections and forget the cached engine (app shutdown)."""
    if get_async_engine.cache_info().currsize:
        await get_async_engine().dispose()
    get_async_session_factory.cache_clear()
    get_async_engine.cache_clear()
