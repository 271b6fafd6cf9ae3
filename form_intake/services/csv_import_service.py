"""
form_intake/services/csv_import_service.py

Service layer for CSV batch import.

Rows are read and validated one at a time. Each valid row is queued as its
own insert task as soon as it passes validation (bounded by a semaphore), and
the final tally is computed only after one `asyncio.gather` barrier over every
queued insert. Rows whose insert fails move from the valid to the invalid
count. In bulk mode the valid rows are written by a single `insert_many`
transaction instead.
"""

from __future__ import annotations

import asyncio
import csv
import io
import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from form_intake.config import CSVImportSettings, get_csv_import_settings
from form_intake.db.errors import PersistenceError
from form_intake.db.session import Database
from form_intake.domain.submission import ImportSummary, RowValidationError
from form_intake.logging_utils import log_event
from form_intake.normalization.record_normalizer import normalize_header, normalize_headers
from form_intake.repositories.base import RowStore
from form_intake.repositories.csv_import_repository import CSVImportRepository
from form_intake.validators.column_rules import ColumnRuleSet
from form_intake.validators.row_validator import RowValidator

logger = logging.getLogger(__name__)

StoreFactory = Callable[[Sequence[str]], RowStore]


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class CSVFormatError(ValueError):
    """
    Raised when the file cannot be read as a CSV with a header row.
    """


class CSVImportPersistenceError(RuntimeError):
    """
    Raised when the destination table cannot be prepared.
    """


# ---------------------------------------------------------------------------
# Reading
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ParsedCSV:
    """
    Header row mapped to canonical column names plus the numbered data rows.
    """

    source_headers: list[str]
    columns: list[str]
    rows: list[tuple[int, list[str]]]

    @property
    def unnamed_columns(self) -> list[str]:
        """Columns named `column_<n>` because their source header had no usable text."""
        return [
            column
            for column, header in zip(self.columns, self.source_headers)
            if not normalize_header(header)
        ]


def read_csv_file(path: Path, *, max_bytes: int) -> bytes:
    """
    Read at most `max_bytes` from `path`; larger files are rejected.
    """

    with path.open("rb") as handle:
        raw = handle.read(max_bytes + 1)
    if len(raw) > max_bytes:
        raise CSVFormatError(f"CSV file exceeds the {max_bytes} byte limit.")
    return raw


def parse_csv_bytes(raw: bytes) -> ParsedCSV:
    try:
        text = raw.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise CSVFormatError("CSV must be UTF-8 encoded.") from exc
    return parse_csv_text(text)


def parse_csv_text(text: str) -> ParsedCSV:
    """
    Parse CSV text; blank lines are skipped, row numbers count the header as 1.
    """

    reader = csv.reader(io.StringIO(text, newline=""))
    try:
        headers = next(reader, None)
        if not headers or all(not header.strip() for header in headers):
            raise CSVFormatError("CSV header row is missing.")

        rows = [
            (row_number, fields)
            for row_number, fields in enumerate(reader, start=2)
            if fields
        ]
    except csv.Error as exc:
        raise CSVFormatError(f"Invalid CSV format: {exc}") from exc

    return ParsedCSV(source_headers=headers, columns=normalize_headers(headers), rows=rows)


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class CSVImportService:
    """
    Coordinates CSV parsing, validation, and concurrent persistence.
    """

    def __init__(
        self,
        *,
        store_factory: StoreFactory,
        column_rules: ColumnRuleSet | None = None,
        bulk_insert: bool = False,
        max_concurrency: int = 10,
        max_validation_errors: int = 500,
        log_validation_errors: bool = True,
        validator: RowValidator | None = None,
    ) -> None:
        self._store_factory = store_factory
        self._column_rules = column_rules or ColumnRuleSet()
        self._bulk_insert = bulk_insert
        self._max_concurrency = max(1, max_concurrency)
        self._max_validation_errors = max(1, max_validation_errors)
        self._log_validation_errors = log_validation_errors
        self._validator = validator or RowValidator()

    async def import_bytes(self, raw: bytes) -> ImportSummary:
        return await self.import_parsed(parse_csv_bytes(raw))

    async def import_text(self, text: str) -> ImportSummary:
        return await self.import_parsed(parse_csv_text(text))

    async def import_parsed(self, parsed: ParsedCSV) -> ImportSummary:
        """
        Validate every row, persist the valid ones, and return the tally.
        """

        store = self._store_factory(parsed.columns)
        try:
            await store.ensure_table()
        except PersistenceError as exc:
            raise CSVImportPersistenceError(str(exc)) from exc

        columns = parsed.columns
        field_specs = self._column_rules.field_specs(
            columns,
            optional_columns=parsed.unnamed_columns,
        )
        semaphore = asyncio.Semaphore(self._max_concurrency)

        captured_errors: list[RowValidationError] = []
        rows_rejected = 0
        accepted_rows: list[int] = []
        accepted_values: list[dict[str, str]] = []
        pending: list[asyncio.Task[int]] = []

        async def insert_one(values: Mapping[str, str]) -> int:
            async with semaphore:
                return await store.insert_row(values)

        for row_number, fields in parsed.rows:
            if len(fields) > len(columns):
                rows_rejected += 1
                self._record_error(
                    captured_errors,
                    RowValidationError(
                        row_number=row_number,
                        message=f"Row has {len(fields)} fields but the header has {len(columns)}.",
                    ),
                )
                continue

            record = dict(zip(columns, fields))
            if self._validator.is_completely_empty_row(record):
                rows_rejected += 1
                self._record_error(
                    captured_errors,
                    RowValidationError(
                        row_number=row_number,
                        message="Completely empty rows are not allowed.",
                    ),
                )
                continue

            result = self._validator.validate(record, field_specs)
            if not result.is_valid:
                rows_rejected += 1
                for error in result.errors:
                    self._record_error(
                        captured_errors,
                        RowValidationError(
                            row_number=row_number,
                            column=error.field,
                            message=error.message,
                            value=record.get(error.field),
                        ),
                    )
                continue

            accepted_rows.append(row_number)
            accepted_values.append(result.values)
            if not self._bulk_insert:
                pending.append(asyncio.create_task(insert_one(result.values)))

        if self._bulk_insert:
            inserted, failed = await self._persist_bulk(store, accepted_rows, accepted_values, captured_errors)
        else:
            inserted, failed = await self._settle_inserts(pending, accepted_rows, captured_errors)

        summary = ImportSummary(
            rows_read=len(parsed.rows),
            valid_count=inserted,
            invalid_count=rows_rejected + failed,
            validation_errors=captured_errors,
        )
        log_event(
            logger,
            logging.INFO,
            "csv_import_finished",
            rows_read=summary.rows_read,
            valid_count=summary.valid_count,
            invalid_count=summary.invalid_count,
            bulk=self._bulk_insert,
        )
        return summary

    # ------------------------------------------------------------------
    # Persistence internals
    # ------------------------------------------------------------------

    async def _settle_inserts(
        self,
        pending: list[asyncio.Task[int]],
        row_numbers: list[int],
        captured_errors: list[RowValidationError],
    ) -> tuple[int, int]:
        results = await asyncio.gather(*pending, return_exceptions=True)

        inserted = 0
        failed = 0
        for row_number, result in zip(row_numbers, results):
            if isinstance(result, PersistenceError):
                failed += 1
                logger.error("CSV row insert failed row=%s error=%s", row_number, result)
                self._record_error(
                    captured_errors,
                    RowValidationError(row_number=row_number, message=f"Database insert failed: {result}"),
                )
            elif isinstance(result, BaseException):
                raise result
            else:
                inserted += 1
        return inserted, failed

    async def _persist_bulk(
        self,
        store: RowStore,
        row_numbers: list[int],
        values: list[dict[str, str]],
        captured_errors: list[RowValidationError],
    ) -> tuple[int, int]:
        if not values:
            return 0, 0
        try:
            return await store.insert_many(values), 0
        except PersistenceError as exc:
            logger.error("CSV bulk insert rolled back rows=%d error=%s", len(values), exc)
            for row_number in row_numbers:
                self._record_error(
                    captured_errors,
                    RowValidationError(row_number=row_number, message=f"Bulk insert rolled back: {exc}"),
                )
            return 0, len(values)

    def _record_error(
        self,
        captured_errors: list[RowValidationError],
        error: RowValidationError,
    ) -> None:
        if self._log_validation_errors:
            logger.warning(
                "CSV validation error row=%s column=%s message=%s value=%r",
                error.row_number,
                error.column,
                error.message,
                error.value,
            )

        if len(captured_errors) < self._max_validation_errors:
            captured_errors.append(error)


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


def build_csv_import_service(
    database: Database,
    *,
    settings: CSVImportSettings | None = None,
    table_name: str | None = None,
    column_types: Mapping[str, str] | None = None,
    bulk_insert: bool | None = None,
) -> CSVImportService:
    """
    Build the import service writing to `database` with env-driven defaults.

    Explicit arguments override the corresponding settings.
    """

    settings = settings or get_csv_import_settings()
    column_rules = ColumnRuleSet({**settings.column_types, **(column_types or {})})
    destination = table_name or settings.table_name

    def store_factory(columns: Sequence[str]) -> RowStore:
        return CSVImportRepository(
            database,
            table_name=destination,
            columns=columns,
            column_rules=column_rules,
        )

    return CSVImportService(
        store_factory=store_factory,
        column_rules=column_rules,
        bulk_insert=settings.bulk_insert if bulk_insert is None else bulk_insert,
        max_concurrency=settings.max_concurrency,
        max_validation_errors=settings.max_validation_errors,
        log_validation_errors=settings.log_validation_errors,
    )
