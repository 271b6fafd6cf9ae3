"""
form_intake/schemas package marker.
"""

from form_intake.schemas.csv_import import CSVImportSummaryResponse, CSVValidationErrorResponse
from form_intake.schemas.submission import (
    FieldErrorResponse,
    HealthResponse,
    SubmissionCreatedResponse,
    SubmissionErrorResponse,
)

__all__ = [
    "CSVImportSummaryResponse",
    "CSVValidationErrorResponse",
    "FieldErrorResponse",
    "HealthResponse",
    "SubmissionCreatedResponse",
    "SubmissionErrorResponse",
]
