"""
form_intake/api/routers/submissions.py

Web form submission endpoints.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from form_intake.api.dependencies import (
    HTTP_413_CONTENT_TOO_LARGE,
    PayloadError,
    get_submission_service,
    read_submission_payload,
)
from form_intake.schemas.submission import (
    FieldErrorResponse,
    SubmissionCreatedResponse,
    SubmissionErrorResponse,
)
from form_intake.services.submission_service import SubmissionPersistenceError, SubmissionService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["submissions"])

_ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"model": SubmissionErrorResponse},
    HTTP_413_CONTENT_TOO_LARGE: {"model": SubmissionErrorResponse},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": SubmissionErrorResponse},
}


def _error(status_code: int, body: SubmissionErrorResponse) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body.model_dump())


@router.post(
    "/submit",
    status_code=status.HTTP_201_CREATED,
    response_model=SubmissionCreatedResponse,
    responses=_ERROR_RESPONSES,
)
@router.post(
    "/api/submit",
    status_code=status.HTTP_201_CREATED,
    response_model=SubmissionCreatedResponse,
    responses=_ERROR_RESPONSES,
)
async def submit_form(
    request: Request,
    service: SubmissionService = Depends(get_submission_service),
) -> SubmissionCreatedResponse | JSONResponse:
    """
    Validate one form submission and store it.
    """

    try:
        payload = await read_submission_payload(
            request,
            max_bytes=request.app.state.settings.max_body_bytes,
        )
    except PayloadError as exc:
        return _error(exc.status_code, SubmissionErrorResponse(message=str(exc)))

    try:
        outcome = await service.submit(payload)
    except SubmissionPersistenceError:
        logger.exception("Form submission could not be stored")
        return _error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            SubmissionErrorResponse(message="Server error"),
        )

    if not outcome.accepted:
        return _error(
            status.HTTP_400_BAD_REQUEST,
            SubmissionErrorResponse(
                message="Validation failed",
                errors=[
                    FieldErrorResponse(field=error.field, msg=error.message)
                    for error in outcome.validation.errors
                ],
            ),
        )

    return SubmissionCreatedResponse(id=outcome.row_id)
