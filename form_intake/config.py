"""
form_intake/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache

from form_intake.db.config import load_env_files, resolve_database_url


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure `.env` files are loaded once before reading settings.
    """

    load_env_files()


def _get_bool_env(name: str, default: bool) -> bool:
    """
    Read a boolean from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    """
    Read a string from environment variables with fallback.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


def _get_optional_str_env(name: str) -> str | None:
    """
    Read an optional string value from environment variables.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return None
    stripped = value.strip()
    return stripped if stripped else None


def parse_column_types(raw: str | None) -> dict[str, str]:
    """
    Parse `column=kind,column=kind` into a mapping.

    Raises ValueError on entries without `=`.
    """

    if not raw:
        return {}
    mapping: dict[str, str] = {}
    for entry in raw.split(","):
        entry = entry.strip()
        if not entry:
            continue
        if "=" not in entry:
            raise ValueError(f"Column type entry {entry!r} must look like column=kind.")
        column, kind = entry.split("=", 1)
        mapping[column.strip()] = kind.strip().lower()
    return mapping


@dataclass(frozen=True)
class DatabaseSettings:
    """
    Engine and pool settings.
    """

    url: str
    echo: bool = False
    pool_size: int = 10
    max_overflow: int = 0
    pool_recycle: int = 1800


@dataclass(frozen=True)
class AppSettings:
    """
    HTTP service settings.
    """

    host: str = "0.0.0.0"
    port: int = 3000
    tls_key_path: str = "certs/key.pem"
    tls_cert_path: str = "certs/cert.pem"
    max_body_bytes: int = 50 * 1024
    log_level: str = "INFO"


@dataclass(frozen=True)
class CSVImportSettings:
    """
    Runtime settings for CSV batch import.
    """

    default_file: str = "data.csv"
    table_name: str = "csv_imports"
    max_file_bytes: int = 10 * 1024 * 1024
    max_concurrency: int = 10
    bulk_insert: bool = False
    max_validation_errors: int = 500
    log_validation_errors: bool = True
    column_types: dict[str, str] = field(default_factory=dict)


@lru_cache(maxsize=1)
def get_database_settings() -> DatabaseSettings:
    """
    Return cached database settings from environment variables.
    """

    return DatabaseSettings(
        url=resolve_database_url(),
        echo=_get_bool_env("SQL_ECHO", False),
        pool_size=max(1, _get_int_env("DB_POOL_SIZE", 10)),
        max_overflow=max(0, _get_int_env("DB_MAX_OVERFLOW", 0)),
        pool_recycle=_get_int_env("DB_POOL_RECYCLE", 1800),
    )


@lru_cache(maxsize=1)
def get_app_settings() -> AppSettings:
    """
    Return cached HTTP service settings.
    """

    return AppSettings(
        host=_get_str_env("HOST", "0.0.0.0"),
        port=_get_int_env("PORT", 3000),
        tls_key_path=_get_str_env("TLS_KEY_PATH", "certs/key.pem"),
        tls_cert_path=_get_str_env("TLS_CERT_PATH", "certs/cert.pem"),
        max_body_bytes=max(1, _get_int_env("MAX_BODY_BYTES", 50 * 1024)),
        log_level=_get_str_env("LOG_LEVEL", "INFO").upper(),
    )


@lru_cache(maxsize=1)
def get_csv_import_settings() -> CSVImportSettings:
    """
    Return cached CSV import settings from environment variables.
    """

    return CSVImportSettings(
        default_file=_get_str_env("CSV_IMPORT_DEFAULT_FILE", "data.csv"),
        table_name=_get_str_env("CSV_IMPORT_TABLE", "csv_imports"),
        max_file_bytes=max(1, _get_int_env("CSV_IMPORT_MAX_BYTES", 10 * 1024 * 1024)),
        max_concurrency=max(1, _get_int_env("CSV_IMPORT_MAX_CONCURRENCY", 10)),
        bulk_insert=_get_bool_env("CSV_IMPORT_BULK", False),
        max_validation_errors=max(1, _get_int_env("CSV_IMPORT_MAX_VALIDATION_ERRORS", 500)),
        log_validation_errors=_get_bool_env("CSV_IMPORT_LOG_VALIDATION_ERRORS", True),
        column_types=parse_column_types(_get_optional_str_env("CSV_IMPORT_COLUMN_TYPES")),
    )
