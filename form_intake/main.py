from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from form_intake import __version__
from form_intake.config import AppSettings, get_app_settings
from form_intake.db.errors import PersistenceError
from form_intake.db.session import Database
from form_intake.logging_utils import configure_logging
from form_intake.repositories.form_submission_repository import FormSubmissionRepository
from form_intake.services.submission_service import SubmissionService

logger = logging.getLogger(__name__)


async def _prepare_database(database: Database) -> FormSubmissionRepository:
    """
    Ping the database and create the submissions table if absent.

    Raises RuntimeError so the process refuses to serve against a broken store.
    """

    repository = FormSubmissionRepository(database)
    try:
        await database.ping()
        logger.info("Database connectivity confirmed")
        await repository.ensure_table()
        logger.info("Schema ready (table %s)", repository.table.name)
    except PersistenceError as exc:
        logger.critical("Startup failed: %s", exc)
        raise RuntimeError(f"Startup failed: {exc}") from exc
    return repository


@asynccontextmanager
async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Build the database handle and services on boot; release the pool on exit."""
    database: Database = application.state.database or Database.from_settings()
    application.state.database = database
    try:
        repository = await _prepare_database(database)
        application.state.submission_service = SubmissionService(repository)
        yield
    finally:
        await database.dispose()
        logger.info("Database pool disposed")


def create_app(
    *,
    database: Database | None = None,
    settings: AppSettings | None = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    When `database` is omitted the lifespan builds one from environment
    settings.
    """

    settings = settings or get_app_settings()
    configure_logging(settings.log_level)

    application = FastAPI(
        title="Form Intake API",
        version=__version__,
        lifespan=_lifespan,
    )
    application.state.settings = settings
    application.state.database = database

    from form_intake.api.routers import csv_import_router, pages_router, submissions_router

    application.include_router(pages_router)
    application.include_router(submissions_router)
    application.include_router(csv_import_router)

    return application


app = create_app()
