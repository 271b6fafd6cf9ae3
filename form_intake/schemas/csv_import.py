"""
form_intake/schemas/csv_import.py

Response schemas for the CSV import endpoint.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from form_intake.domain.submission import ImportSummary


class CSVValidationErrorResponse(BaseModel):
    """
    API response model for one row-level error.
    """

    row_number: int = Field(..., ge=1)
    message: str
    column: str | None = None
    value: str | None = None


class CSVImportSummaryResponse(BaseModel):
    """
    API response model for a CSV import run.
    """

    rows_read: int = Field(..., ge=0)
    valid_count: int = Field(..., ge=0)
    invalid_count: int = Field(..., ge=0)
    validation_errors: list[CSVValidationErrorResponse] = Field(default_factory=list)

    @classmethod
    def from_summary(cls, summary: ImportSummary) -> CSVImportSummaryResponse:
        return cls(
            rows_read=summary.rows_read,
            valid_count=summary.valid_count,
            invalid_count=summary.invalid_count,
            validation_errors=[
                CSVValidationErrorResponse(
                    row_number=error.row_number,
                    column=error.column,
                    message=error.message,
                    value=error.value,
                )
                for error in summary.validation_errors
            ],
        )
