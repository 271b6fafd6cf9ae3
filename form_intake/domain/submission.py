"""
form_intake/domain/submission.py

Domain models shared by form intake and CSV batch import.
"""

from __future__ import annotations

from dataclasses import dataclass, field


class ErrorCode:
    MISSING = "missing"
    TOO_LONG = "too_long"
    WRONG_LENGTH = "wrong_length"
    WRONG_SHAPE = "wrong_shape"
    WRONG_CHARSET = "wrong_charset"


@dataclass(frozen=True)
class FieldError:
    """
    One failed rule for one field.
    """

    field: str
    message: str
    code: str = ErrorCode.WRONG_SHAPE


@dataclass(frozen=True)
class ValidationResult:
    """
    Outcome of validating one record: every field error plus the trimmed values.
    """

    errors: list[FieldError] = field(default_factory=list)
    values: dict[str, str] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.errors


@dataclass(frozen=True)
class RowValidationError:
    """
    One CSV row error detail.
    """

    row_number: int
    message: str
    column: str | None = None
    value: str | None = None


@dataclass(frozen=True)
class ImportSummary:
    """
    End-of-run CSV import tally.
    """

    rows_read: int
    valid_count: int
    invalid_count: int
    validation_errors: list[RowValidationError] = field(default_factory=list)
