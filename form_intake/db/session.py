"""
form_intake/db/session.py

Async SQLAlchemy engine wrapper passed explicitly to repositories.
"""

from __future__ import annotations

from contextlib import AbstractAsyncContextManager

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine

from form_intake.config import DatabaseSettings, get_database_settings
from form_intake.db.errors import DatabaseUnavailableError


def create_db_engine(settings: DatabaseSettings) -> AsyncEngine:
    """
    Create an async engine; pool sizing only applies to server databases.
    """

    options: dict[str, object] = {"echo": settings.echo}
    if not settings.url.startswith("sqlite"):
        options.update(
            pool_pre_ping=True,
            pool_recycle=settings.pool_recycle,
            pool_size=settings.pool_size,
            max_overflow=settings.max_overflow,
        )
    return create_async_engine(settings.url, **options)


class Database:
    """
    Resource handle around one engine and its connection pool.

    Every operation acquires its own connection through `connect()` or
    `begin()`, which release it on every exit path.
    """

    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine

    @classmethod
    def from_settings(cls, settings: DatabaseSettings | None = None) -> Database:
        return cls(create_db_engine(settings or get_database_settings()))

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    def connect(self) -> AbstractAsyncContextManager[AsyncConnection]:
        return self._engine.connect()

    def begin(self) -> AbstractAsyncContextManager[AsyncConnection]:
        """Connection with a transaction committed on success, rolled back on error."""
        return self._engine.begin()

    async def ping(self) -> None:
        """Run SELECT 1. Raises DatabaseUnavailableError if the DB is unreachable."""
        try:
            async with self.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as exc:
            raise DatabaseUnavailableError("Database unavailable.") from exc

    async def is_reachable(self) -> bool:
        try:
            await self.ping()
        except DatabaseUnavailableError:
            return False
        return True

    async def dispose(self) -> None:
        await self._engine.dispose()
