# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database connection management using SQLAlchemy async.

This module owns the process-wide engine and sessionmaker and defines the
unit-of-work boundary used by every lifecycle mutation.

Uses SQLAlchemy 2.0 async API with the asyncpg driver in production and
aiosqlite in tests.

Example:
    from zoezi.infrastructure.database.connection import (
        atomic,
        get_sessionmaker,
        init_database,
    )

    await init_database(settings)

    async with get_sessionmaker()() as session:
        async with atomic(session):
            session.add(learner)
"""

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, AsyncIterator, Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from zoezi.infrastructure.database.models import Base

if TYPE_CHECKING:
    from zoezi.core.config.settings import Settings

# Module-level state for the database connection
_engine: Optional[AsyncEngine] = None
_sessionmaker: Optional[async_sessionmaker[AsyncSession]] = None


class DatabaseError(Exception):
    """Base exception for database operations.

    Attributes:
        message: Human-readable error description.
        original_error: The underlying SQLAlchemy or database error.
    """

    kind = "database_error"

    def __init__(self, message: str, original_error: Optional[Exception] = None) -> None:
        """Initialize the database error.

        Args:
            message: Human-readable error description.
            original_error: The underlying exception that caused this error.
        """
        super().__init__(message)
        self.message = message
        self.original_error = original_error

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.original_error:
            return f"{self.message}: {self.original_error}"
        return self.message


class TransactionAbortedError(DatabaseError):
    """Raised when a unit of work could not commit.

    Nothing of the operation was persisted; callers may retry it.
    """

    kind = "transaction_aborted"


def create_engine_from_settings(settings: "Settings") -> AsyncEngine:
    """Create an async engine for the configured database.

    Args:
        settings: Application settings containing database configuration.

    Returns:
        A new AsyncEngine.
    """
    db = settings.database
    if db.is_sqlite:
        return create_async_engine(db.url, echo=settings.debug)

    return create_async_engine(
        db.url,
        pool_size=db.pool_size,
        max_overflow=db.max_overflow,
        pool_pre_ping=True,
        pool_recycle=1800,
        echo=settings.debug,
    )


def create_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create the sessionmaker used by lifecycle services.

    Objects stay loaded after commit so services can keep returning them.
    """
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async def init_database(settings: "Settings") -> None:
    """Initialize the database connection pool.

    Args:
        settings: Application settings containing database configuration.

    Raises:
        DatabaseError: If connection pool creation fails.
    """
    global _engine, _sessionmaker

    try:
        _engine = create_engine_from_settings(settings)
        _sessionmaker = create_sessionmaker(_engine)
    except SQLAlchemyError as e:
        raise DatabaseError("Failed to initialize database connection", e) from e


async def close_database() -> None:
    """Close the database connection pool."""
    global _engine, _sessionmaker

    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _sessionmaker = None


def get_engine() -> AsyncEngine:
    """Get the database async engine.

    Raises:
        DatabaseError: If the database has not been initialized.
    """
    if _engine is None:
        raise DatabaseError("Database not initialized. Call init_database() first.")
    return _engine


def get_sessionmaker() -> async_sessionmaker[AsyncSession]:
    """Get the database sessionmaker.

    Raises:
        DatabaseError: If the database has not been initialized.
    """
    if _sessionmaker is None:
        raise DatabaseError("Database not initialized. Call init_database() first.")
    return _sessionmaker


@asynccontextmanager
async def atomic(session: AsyncSession) -> AsyncIterator[AsyncSession]:
    """Run a block of writes as one unit of work.

    Commits when the block exits normally. Any exception rolls the whole
    block back; SQLAlchemy failures, including the commit itself, surface
    as TransactionAbortedError and everything else is re-raised unchanged.

    Args:
        session: Session the block writes through.

    Yields:
        The same session.

    Raises:
        TransactionAbortedError: If the unit of work could not be committed.
    """
    try:
        yield session
        await session.commit()
    except SQLAlchemyError as e:
        await session.rollback()
        raise TransactionAbortedError("Unit of work aborted", e) from e
    except Exception:
        await session.rollback()
        raise


async def check_database_connection() -> bool:
    """Check if the database is reachable.

    Returns:
        True if the database is reachable, False otherwise.
    """
    if _engine is None:
        return False

    try:
        async with _engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError:
        return False


async def create_schema(engine: AsyncEngine) -> None:
    """Create all tables known to the model metadata."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def drop_schema(engine: AsyncEngine) -> None:
    """Drop all tables known to the model metadata."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
