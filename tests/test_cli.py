from __future__ import annotations

import asyncio
import json
from pathlib import Path

import pytest

from form_intake import cli
from form_intake.config import CSVImportSettings
from form_intake.db.session import Database
from form_intake.repositories.csv_import_repository import CSVImportRepository

CSV_TEXT = "Name,Email,Age\nAnn,ann@example.com,33\nBob,,41\nCara,cara@example.com,\n"


@pytest.fixture()
def csv_file(tmp_path: Path) -> Path:
    path = tmp_path / "people.csv"
    path.write_text(CSV_TEXT, encoding="utf-8")
    return path


def _run(csv_path: Path, database: Database, **overrides) -> int:
    options = {
        "settings": CSVImportSettings(max_concurrency=1),
        "table_name": "people",
        "column_types": {},
        "bulk_insert": False,
    }
    options.update(overrides)

    async def scenario() -> int:
        try:
            return await cli.run_import(csv_path, database=database, **options)
        finally:
            await database.dispose()

    return asyncio.run(scenario())


def test_run_import_prints_summary(csv_file: Path, database: Database, capsys: pytest.CaptureFixture[str]) -> None:
    assert _run(csv_file, database) == 0

    payload = json.loads(capsys.readouterr().out)
    assert payload["file"] == str(csv_file)
    assert payload["table"] == "people"
    assert (payload["rows_read"], payload["valid_count"], payload["invalid_count"]) == (3, 2, 1)
    assert payload["validation_errors"] == [
        {"row_number": 3, "column": "email", "message": "email is required", "value": ""}
    ]

    repo = CSVImportRepository(database, table_name="people", columns=["name", "email", "age"])
    assert asyncio.run(repo.count_rows()) == 2


def test_missing_file_exits_with_error(tmp_path: Path, database: Database) -> None:
    assert _run(tmp_path / "nope.csv", database) == 1


def test_unreachable_database_exits_with_error(csv_file: Path, unreachable_database: Database) -> None:
    assert _run(csv_file, unreachable_database) == 1


def test_invalid_table_name_exits_with_error(csv_file: Path, database: Database) -> None:
    assert _run(csv_file, database, table_name="bad-name") == 1


def test_oversized_file_exits_with_error(csv_file: Path, database: Database) -> None:
    assert _run(csv_file, database, settings=CSVImportSettings(max_file_bytes=10)) == 1


def test_main_with_bulk_and_column_override(
    csv_file: Path,
    database: Database,
    capsys: pytest.CaptureFixture[str],
) -> None:
    exit_code = cli.main(
        [str(csv_file), "--table", "people", "--bulk", "--column-type", "age=text"],
        database=database,
    )

    assert exit_code == 0
    payload = json.loads(capsys.readouterr().out)
    # age is required once it is typed as text, so Cara's blank age is rejected.
    assert (payload["valid_count"], payload["invalid_count"]) == (1, 2)


def test_main_rejects_malformed_column_type(csv_file: Path, database: Database) -> None:
    assert cli.main([str(csv_file), "--column-type", "age"], database=database) == 1


def test_main_rejects_unknown_column_kind(csv_file: Path, database: Database) -> None:
    assert cli.main([str(csv_file), "--bulk", "--column-type", "age=money"], database=database) == 1


def test_parser_defaults_come_from_settings() -> None:
    parser = cli.build_parser(CSVImportSettings(default_file="in.csv", table_name="rows", bulk_insert=True))

    args = parser.parse_args([])

    assert (args.csv_path, args.table, args.bulk, args.column_types) == ("in.csv", "rows", True, [])
