"""
form_intake/domain package marker.
"""

from form_intake.domain.submission import (
    ErrorCode,
    FieldError,
    ImportSummary,
    RowValidationError,
    ValidationResult,
)

__all__ = [
    "ErrorCode",
    "FieldError",
    "ImportSummary",
    "RowValidationError",
    "ValidationResult",
]
