"""
form_intake/schemas/submission.py

Response schemas for the form submission endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class FieldErrorResponse(BaseModel):
    """
    One failing field in a rejected submission.
    """

    field: str
    msg: str


class SubmissionCreatedResponse(BaseModel):
    ok: bool = True
    message: str = "Saved to database"
    id: int = Field(..., ge=1)


class SubmissionErrorResponse(BaseModel):
    """
    Body for rejected or failed submissions.
    """

    message: str
    errors: list[FieldErrorResponse] = Field(default_factory=list)


class HealthResponse(BaseModel):
    status: str
    db: str
