"""
form_intake/api/dependencies.py

Shared FastAPI dependencies and request body helpers.
"""

from __future__ import annotations

import json
from typing import Any

from fastapi import File, HTTPException, Request, UploadFile, status

from form_intake.db.session import Database
from form_intake.services.csv_import_service import CSVImportService, build_csv_import_service
from form_intake.services.submission_service import SubmissionService

CSV_CONTENT_TYPES = {
    "text/csv",
    "application/csv",
    "application/vnd.ms-excel",
}

FORM_CONTENT_TYPES = {
    "application/x-www-form-urlencoded",
    "multipart/form-data",
}

HTTP_413_CONTENT_TOO_LARGE = 413


class PayloadError(ValueError):
    """
    Raised when a submission body cannot be read as one flat object.
    """

    def __init__(self, message: str, *, status_code: int = status.HTTP_400_BAD_REQUEST) -> None:
        super().__init__(message)
        self.status_code = status_code


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_submission_service(request: Request) -> SubmissionService:
    return request.app.state.submission_service


def get_csv_import_service(request: Request) -> CSVImportService:
    return build_csv_import_service(get_database(request))


def get_csv_upload(file: UploadFile = File(...)) -> UploadFile:
    """
    Validate that the uploaded file is a CSV by extension or MIME type.
    """

    filename = (file.filename or "").strip().lower()
    content_type = (file.content_type or "").strip().lower()

    is_csv_filename = filename.endswith(".csv")
    is_csv_content_type = content_type in CSV_CONTENT_TYPES

    if not is_csv_filename and not is_csv_content_type:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only CSV files are allowed.",
        )

    return file


def _replay(request: Request, body: bytes) -> Request:
    """
    Rebuild a request around an already-consumed body so it can be parsed again.
    """

    async def receive() -> dict[str, Any]:
        return {"type": "http.request", "body": body, "more_body": False}

    return Request(request.scope, receive)


async def read_submission_payload(request: Request, *, max_bytes: int) -> dict[str, Any]:
    """
    Read a JSON or form-encoded body into a dict, enforcing `max_bytes`.
    """

    declared_length = request.headers.get("content-length", "")
    if declared_length.isdigit() and int(declared_length) > max_bytes:
        raise PayloadError("Request body is too large.", status_code=HTTP_413_CONTENT_TOO_LARGE)

    # Chunked bodies carry no length, so the limit is enforced while reading.
    buffer = bytearray()
    async for chunk in request.stream():
        buffer.extend(chunk)
        if len(buffer) > max_bytes:
            raise PayloadError("Request body is too large.", status_code=HTTP_413_CONTENT_TOO_LARGE)
    body = bytes(buffer)

    content_type = request.headers.get("content-type", "").split(";", 1)[0].strip().lower()
    if content_type in FORM_CONTENT_TYPES:
        form = await _replay(request, body).form()
        return {key: value for key, value in form.items() if isinstance(value, str)}

    try:
        payload = json.loads(body or b"null")
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise PayloadError("Request body must be valid JSON.") from exc
    if not isinstance(payload, dict):
        raise PayloadError("Request body must be a JSON object.")
    return payload
