"""
form_intake/repositories/table_repository.py

Shared persistence contract for one destination table.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from sqlalchemy import Table, func, insert, inspect, select
from sqlalchemy.engine import Connection
from sqlalchemy.exc import DBAPIError, IntegrityError, InterfaceError, OperationalError, SQLAlchemyError
from sqlalchemy.schema import CreateTable

from form_intake.db.errors import DatabaseUnavailableError, DuplicateRecordError, PersistenceError
from form_intake.db.session import Database
from form_intake.repositories.base import RowStore


def translate_error(exc: BaseException, message: str) -> PersistenceError:
    """
    Map a driver/SQLAlchemy failure onto the persistence error hierarchy.
    """

    if isinstance(exc, IntegrityError):
        return DuplicateRecordError(message)
    if isinstance(exc, (OperationalError, InterfaceError, OSError)):
        return DatabaseUnavailableError(message)
    if isinstance(exc, DBAPIError) and exc.connection_invalidated:
        return DatabaseUnavailableError(message)
    return PersistenceError(message)


class TableRepository(RowStore):
    """
    ensure_table / insert_row / insert_many over a single SQLAlchemy table.

    Every statement is an `insert()`/`select()` construct with bound
    parameters; values never reach the SQL text.
    """

    def __init__(self, database: Database, table: Table) -> None:
        self._database = database
        self._table = table

    @property
    def table(self) -> Table:
        return self._table

    @property
    def writable_columns(self) -> list[str]:
        return [
            column.name
            for column in self._table.columns
            if not column.primary_key and column.server_default is None
        ]

    async def ensure_table(self) -> None:
        """
        CREATE TABLE IF NOT EXISTS; an existing table is left untouched.
        """

        try:
            async with self._database.begin() as conn:
                await conn.execute(CreateTable(self._table, if_not_exists=True))
        except (SQLAlchemyError, OSError) as exc:
            raise translate_error(exc, f"Failed to ensure table {self._table.name}.") from exc

    async def insert_row(self, row: Mapping[str, Any]) -> int:
        """
        Insert one row in its own transaction and return its generated id.
        """

        stmt = insert(self._table).values(self._payload(row))
        try:
            async with self._database.begin() as conn:
                result = await conn.execute(stmt)
        except (SQLAlchemyError, OSError) as exc:
            raise translate_error(exc, f"Failed to insert row into {self._table.name}.") from exc
        return int(result.inserted_primary_key[0])

    async def insert_many(self, rows: Sequence[Mapping[str, Any]]) -> int:
        """
        Insert all rows in one transaction; any failure rolls back the batch.
        """

        if not rows:
            return 0

        payloads = [self._payload(row) for row in rows]
        try:
            async with self._database.begin() as conn:
                await conn.execute(insert(self._table), payloads)
        except (SQLAlchemyError, OSError) as exc:
            raise translate_error(
                exc, f"Failed to insert {len(payloads)} rows into {self._table.name}."
            ) from exc
        return len(payloads)

    async def fetch_row(self, row_id: int) -> dict[str, Any] | None:
        stmt = select(self._table).where(self._table.c.id == row_id)
        try:
            async with self._database.connect() as conn:
                result = await conn.execute(stmt)
                row = result.mappings().first()
        except (SQLAlchemyError, OSError) as exc:
            raise translate_error(exc, f"Failed to read from {self._table.name}.") from exc
        return dict(row) if row is not None else None

    async def count_rows(self) -> int:
        stmt = select(func.count()).select_from(self._table)
        try:
            async with self._database.connect() as conn:
                return int((await conn.execute(stmt)).scalar_one())
        except (SQLAlchemyError, OSError) as exc:
            raise translate_error(exc, f"Failed to count rows in {self._table.name}.") from exc

    async def existing_columns(self) -> list[str]:
        """
        Column names of the live table, empty when it does not exist.
        """

        def _inspect(sync_conn: Connection) -> list[str]:
            inspector = inspect(sync_conn)
            if not inspector.has_table(self._table.name):
                return []
            return [column["name"] for column in inspector.get_columns(self._table.name)]

        try:
            async with self._database.connect() as conn:
                return await conn.run_sync(_inspect)
        except (SQLAlchemyError, OSError) as exc:
            raise translate_error(exc, f"Failed to inspect {self._table.name}.") from exc

    def _payload(self, row: Mapping[str, Any]) -> dict[str, Any]:
        return {name: row.get(name) for name in self.writable_columns}
