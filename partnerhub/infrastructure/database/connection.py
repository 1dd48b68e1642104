# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Entity store database connections.

DatabaseManager owns the async engine for the PartnerHub store. The engine
and its sessionmaker are created on first use, so constructing a manager
never touches the network.

Example:
    manager = DatabaseManager(settings)

    async with manager.session() as db:
        colleges = await SqlCollegeRepository(db).find_partnered()

    await manager.close()
"""

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, AsyncIterator

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from partnerhub.infrastructure.database.models import Base

if TYPE_CHECKING:
    from partnerhub.core.config.settings import Settings


class DatabaseError(Exception):
    """Raised when the entity store cannot complete an operation.

    Attributes:
        original_error: The SQLAlchemy error behind this one, if any.
    """

    def __init__(self, message: str, original_error: Exception | None = None) -> None:
        detail = f"{message}: {original_error}" if original_error else message
        super().__init__(detail)
        self.original_error = original_error


class DatabaseManager:
    """Lazily connected engine and session factory for the entity store.

    Attributes:
        settings: Settings providing the database URL and pool sizes.
    """

    def __init__(self, settings: "Settings") -> None:
        self._settings = settings
        self._engine: AsyncEngine | None = None
        self._sessionmaker: async_sessionmaker[AsyncSession] | None = None

    @property
    def is_connected(self) -> bool:
        return self._engine is not None

    def _get_or_create_engine(self) -> AsyncEngine:
        if self._engine is None:
            db = self._settings.database
            try:
                self._engine = create_async_engine(
                    db.url,
                    pool_size=db.pool_size,
                    max_overflow=db.max_overflow,
                    pool_pre_ping=True,
                    pool_recycle=1800,
                    echo=self._settings.debug,
                )
            except SQLAlchemyError as e:
                raise DatabaseError("Failed to create database engine", e) from e
        return self._engine

    def _get_or_create_sessionmaker(self) -> async_sessionmaker[AsyncSession]:
        if self._sessionmaker is None:
            self._sessionmaker = async_sessionmaker(
                bind=self._get_or_create_engine(),
                class_=AsyncSession,
                expire_on_commit=False,
                autoflush=False,
            )
        return self._sessionmaker

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Open a session that commits on success and rolls back on error.

        Domain errors raised inside the block propagate unchanged; SQLAlchemy
        errors surface as DatabaseError.

        Yields:
            AsyncSession bound to the store.

        Raises:
            DatabaseError: If a database operation fails.
        """
        sessionmaker = self._get_or_create_sessionmaker()

        async with sessionmaker() as db:
            try:
                yield db
                await db.commit()
            except SQLAlchemyError as e:
                await db.rollback()
                raise DatabaseError("Database operation failed", e) from e
            except Exception:
                await db.rollback()
                raise

    async def create_schema(self) -> None:
        """Create any missing tables.

        Raises:
            DatabaseError: If DDL fails.
        """
        engine = self._get_or_create_engine()
        try:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except SQLAlchemyError as e:
            raise DatabaseError("Failed to create schema", e) from e

    async def check_connection(self) -> bool:
        """Return True if the store answers a trivial query."""
        try:
            engine = self._get_or_create_engine()
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except (SQLAlchemyError, DatabaseError):
            return False

    async def close(self) -> None:
        """Dispose of the connection pool; the next session reconnects."""
        if self._engine is not None:
            await self._engine.dispose()
        self._engine = None
        self._sessionmaker = None
