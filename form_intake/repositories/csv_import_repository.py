"""
form_intake/repositories/csv_import_repository.py

Persistence for CSV rows into a table shaped by the file's header row.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

from sqlalchemy import Column, Integer, MetaData, Table

from form_intake.db.errors import PersistenceError
from form_intake.db.session import Database
from form_intake.repositories.table_repository import TableRepository
from form_intake.validators.column_rules import ColumnRuleSet

_TABLE_NAME_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]{0,62}")


class InvalidTableNameError(ValueError):
    """
    Raised when an import table name is not a plain SQL identifier.
    """


class SchemaMismatchError(PersistenceError):
    """
    Raised when an existing import table lacks columns present in the file.
    """

    def __init__(self, *, table_name: str, missing_columns: Sequence[str]) -> None:
        super().__init__(
            f"Table {table_name} already exists without column(s): "
            f"{', '.join(missing_columns)}. Existing tables are never altered."
        )
        self.table_name = table_name
        self.missing_columns = tuple(missing_columns)


def build_import_table(
    table_name: str,
    columns: Sequence[str],
    column_rules: ColumnRuleSet | None = None,
) -> Table:
    """
    Build an auto-increment `id` plus one column per canonical header.

    Storage types come from the column rules; every kind stores text.
    """

    if _TABLE_NAME_RE.fullmatch(table_name) is None:
        raise InvalidTableNameError(f"Invalid table name {table_name!r}.")
    if not columns:
        raise ValueError("An import table needs at least one column.")

    rules = column_rules or ColumnRuleSet()
    return Table(
        table_name,
        MetaData(),
        Column("id", Integer, primary_key=True, autoincrement=True),
        *(Column(name, rules.column_type(name).storage_type(), nullable=True) for name in columns),
    )


class CSVImportRepository(TableRepository):
    """
    Gateway for one dynamic CSV import table.
    """

    def __init__(
        self,
        database: Database,
        *,
        table_name: str,
        columns: Sequence[str],
        column_rules: ColumnRuleSet | None = None,
    ) -> None:
        super().__init__(database, build_import_table(table_name, columns, column_rules))
        self._columns = tuple(columns)

    @property
    def columns(self) -> tuple[str, ...]:
        return self._columns

    async def ensure_table(self) -> None:
        """
        Create the table if absent, then check an existing one can take the rows.
        """

        await super().ensure_table()
        existing = set(await self.existing_columns())
        missing = [column for column in self._columns if column not in existing]
        if missing:
            raise SchemaMismatchError(table_name=self.table.name, missing_columns=missing)
