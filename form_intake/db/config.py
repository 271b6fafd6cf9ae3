"""
Shared environment-driven database configuration helpers.
"""

from __future__ import annotations

import os
from pathlib import Path

from sqlalchemy.engine import URL

DEFAULT_DRIVER = "postgresql+psycopg"


def load_env_files(base_dir: Path | None = None) -> None:
    """
    Load simple KEY=VALUE pairs from `.env` and `.env.local` (if present).
    Existing process environment variables are not overwritten.
    """

    root = base_dir or Path.cwd()
    for filename in (".env", ".env.local"):
        env_path = root / filename
        if not env_path.exists():
            continue

        for raw_line in env_path.read_text(encoding="utf-8").splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue

            key, value = line.split("=", 1)
            key = key.strip()
            value = value.strip().strip('"').strip("'")
            if key and key not in os.environ:
                os.environ[key] = value


def normalize_postgres_url(url: str) -> str:
    """
    Normalize postgres URLs to SQLAlchemy's psycopg driver form.
    """

    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql+psycopg://", 1)
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+psycopg://", 1)
    return url


def resolve_database_url() -> str:
    """
    Resolve the database URL from environment variables and optional .env files.

    Priority:
    1) DATABASE_URL
    2) DB_HOST / DB_PORT / DB_USER / DB_PASSWORD / DB_NAME
    """

    load_env_files()

    direct_url = os.getenv("DATABASE_URL")
    if direct_url and direct_url.strip():
        return normalize_postgres_url(direct_url.strip())

    port_raw = os.getenv("DB_PORT", "").strip()
    try:
        port = int(port_raw) if port_raw else None
    except ValueError as exc:
        raise RuntimeError(f"DB_PORT must be an integer, got {port_raw!r}.") from exc

    url = URL.create(
        DEFAULT_DRIVER,
        username=os.getenv("DB_USER", "postgres").strip() or None,
        password=os.getenv("DB_PASSWORD") or None,
        host=os.getenv("DB_HOST", "localhost").strip() or "localhost",
        port=port,
        database=os.getenv("DB_NAME", "form_intake").strip() or None,
    )
    return url.render_as_string(hide_password=False)
