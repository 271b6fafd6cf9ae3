"""
form_intake/api/routers/pages.py

HTML form page and health check.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from fastapi import APIRouter, Depends, status
from fastapi.responses import HTMLResponse, JSONResponse

from form_intake.api.dependencies import get_database
from form_intake.db.session import Database
from form_intake.schemas.submission import HealthResponse

FORM_PAGE = Path(__file__).resolve().parents[2] / "static" / "form.html"

router = APIRouter(tags=["pages"])


@lru_cache(maxsize=1)
def _form_html() -> str:
    return FORM_PAGE.read_text(encoding="utf-8")


@router.get("/", response_class=HTMLResponse)
async def form_page() -> HTMLResponse:
    return HTMLResponse(_form_html())


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": HealthResponse}},
)
async def healthcheck(database: Database = Depends(get_database)) -> JSONResponse:
    if await database.is_reachable():
        return JSONResponse(status_code=status.HTTP_200_OK, content={"status": "ok", "db": "up"})
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"status": "error", "db": "down"},
    )
