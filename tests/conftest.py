"""
Shared fixtures: a file-backed SQLite database and an in-memory row store.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterator, Mapping, Sequence
from pathlib import Path
from typing import Any

import pytest
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import NullPool

from form_intake.db.errors import DuplicateRecordError
from form_intake.db.session import Database
from form_intake.repositories.base import RowStore


def make_database(path: Path) -> Database:
    # NullPool keeps no connection bound to an event loop between asyncio.run calls.
    return Database(create_async_engine(f"sqlite+aiosqlite:///{path}", poolclass=NullPool))


@pytest.fixture()
def database(tmp_path: Path) -> Iterator[Database]:
    db = make_database(tmp_path / "intake.db")
    yield db
    asyncio.run(db.dispose())


@pytest.fixture()
def unreachable_database(tmp_path: Path) -> Iterator[Database]:
    db = make_database(tmp_path / "missing-dir" / "intake.db")
    yield db
    asyncio.run(db.dispose())


class FakeRowStore(RowStore):
    """
    In-memory RowStore; rows whose `fail_column` value is in `failing_values`
    raise DuplicateRecordError.
    """

    def __init__(
        self,
        *,
        fail_column: str | None = None,
        failing_values: Sequence[str] = (),
        insert_delay: float = 0.0,
    ) -> None:
        self.rows: list[dict[str, Any]] = []
        self.ensure_calls = 0
        self.insert_many_calls = 0
        self.in_flight = 0
        self.max_in_flight = 0
        self._fail_column = fail_column
        self._failing_values = set(failing_values)
        self._insert_delay = insert_delay

    def _should_fail(self, row: Mapping[str, Any]) -> bool:
        return self._fail_column is not None and row.get(self._fail_column) in self._failing_values

    async def ensure_table(self) -> None:
        self.ensure_calls += 1

    async def insert_row(self, row: Mapping[str, Any]) -> int:
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self._insert_delay)
            if self._should_fail(row):
                raise DuplicateRecordError("duplicate row")
            self.rows.append(dict(row))
            return len(self.rows)
        finally:
            self.in_flight -= 1

    async def insert_many(self, rows: Sequence[Mapping[str, Any]]) -> int:
        self.insert_many_calls += 1
        if any(self._should_fail(row) for row in rows):
            raise DuplicateRecordError("duplicate row in batch")
        self.rows.extend(dict(row) for row in rows)
        return len(rows)


@pytest.fixture()
def fake_store() -> FakeRowStore:
    return FakeRowStore()
