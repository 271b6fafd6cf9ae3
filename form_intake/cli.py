"""
Import a CSV file into the database from the command line.

Exit status is 0 when the run completes, even if some rows were rejected, and
1 when the file is missing or unreadable or the database cannot be reached.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
from collections.abc import Sequence
from pathlib import Path

from form_intake.config import (
    CSVImportSettings,
    get_app_settings,
    get_csv_import_settings,
    parse_column_types,
)
from form_intake.db.errors import DatabaseUnavailableError
from form_intake.db.session import Database
from form_intake.logging_utils import configure_logging
from form_intake.repositories.csv_import_repository import InvalidTableNameError
from form_intake.services.csv_import_service import (
    CSVFormatError,
    CSVImportPersistenceError,
    build_csv_import_service,
    read_csv_file,
)
from form_intake.validators.column_rules import UnknownColumnKindError

logger = logging.getLogger(__name__)


def build_parser(settings: CSVImportSettings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Validate a CSV file and import its valid rows.")
    parser.add_argument(
        "csv_path",
        nargs="?",
        default=settings.default_file,
        help=f"CSV file to import (default: {settings.default_file}).",
    )
    parser.add_argument(
        "--table",
        dest="table",
        default=settings.table_name,
        help=f"Destination table (default: {settings.table_name}).",
    )
    parser.add_argument(
        "--bulk",
        dest="bulk",
        action="store_true",
        default=settings.bulk_insert,
        help="Insert all valid rows in one transaction instead of one insert per row.",
    )
    parser.add_argument(
        "--column-type",
        dest="column_types",
        action="append",
        default=[],
        metavar="COLUMN=KIND",
        help="Explicit column kind (email, date, iso_date, integer, number, text). Repeatable.",
    )
    return parser


async def run_import(
    csv_path: Path,
    *,
    database: Database,
    settings: CSVImportSettings,
    table_name: str,
    column_types: dict[str, str],
    bulk_insert: bool,
) -> int:
    """
    Run one import against `database` and print the JSON summary.
    """

    if not csv_path.is_file():
        logger.error("CSV file not found: %s", csv_path)
        return 1

    try:
        await database.ping()
    except DatabaseUnavailableError as exc:
        logger.error("Database connection failed: %s", exc)
        return 1
    logger.info("Database connectivity confirmed")

    try:
        raw = read_csv_file(csv_path, max_bytes=settings.max_file_bytes)
        service = build_csv_import_service(
            database,
            settings=settings,
            table_name=table_name,
            column_types=column_types,
            bulk_insert=bulk_insert,
        )
        summary = await service.import_bytes(raw)
    except OSError as exc:
        logger.error("CSV file could not be read: %s", exc)
        return 1
    except CSVFormatError as exc:
        logger.error("CSV read error: %s", exc)
        return 1
    except CSVImportPersistenceError as exc:
        logger.error("Import table is not usable: %s", exc)
        return 1
    except (UnknownColumnKindError, InvalidTableNameError) as exc:
        logger.error("Invalid import options: %s", exc)
        return 1

    payload = {
        "file": str(csv_path),
        "table": table_name,
        "rows_read": summary.rows_read,
        "valid_count": summary.valid_count,
        "invalid_count": summary.invalid_count,
        "validation_errors": [
            {
                "row_number": error.row_number,
                "column": error.column,
                "message": error.message,
                "value": error.value,
            }
            for error in summary.validation_errors
        ],
    }
    print(json.dumps(payload, indent=2))
    logger.info("Valid rows inserted: %d", summary.valid_count)
    logger.info("Invalid rows skipped: %d", summary.invalid_count)
    return 0


def main(argv: Sequence[str] | None = None, *, database: Database | None = None) -> int:
    configure_logging(get_app_settings().log_level)
    try:
        settings = get_csv_import_settings()
    except ValueError as exc:
        logger.error("Invalid configuration: %s", exc)
        return 1

    parser = build_parser(settings)
    args = parser.parse_args(argv)

    try:
        column_types = parse_column_types(",".join(args.column_types))
        if database is None:
            database = Database.from_settings()
    except (ValueError, RuntimeError) as exc:
        logger.error("Invalid configuration: %s", exc)
        return 1

    async def _run() -> int:
        try:
            return await run_import(
                Path(args.csv_path),
                database=database,
                settings=settings,
                table_name=args.table,
                column_types=column_types,
                bulk_insert=args.bulk,
            )
        finally:
            await database.dispose()

    return asyncio.run(_run())


if __name__ == "__main__":
    raise SystemExit(main())
