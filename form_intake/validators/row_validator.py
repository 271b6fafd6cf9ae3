"""
form_intake/validators/row_validator.py

Declarative field specs and the validator that applies them to one record.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from form_intake.domain.submission import ErrorCode, FieldError, ValidationResult
from form_intake.normalization.record_normalizer import RecordNormalizer
from form_intake.validators import field_validators as fv


@dataclass(frozen=True)
class FieldRule:
    """
    One predicate plus the error reported when it fails.

    `message` may reference the field name as `{field}`.
    """

    check: fv.Predicate
    message: str
    code: str

    def describe(self, field_name: str) -> str:
        return self.message.format(field=field_name)


@dataclass(frozen=True)
class FieldSpec:
    """
    Rule set for one record field.

    Presence is checked first from `required`; `rules` then run in order and
    stop at the first failure. A blank optional field skips its rules.
    """

    name: str
    rules: tuple[FieldRule, ...] = ()
    required: bool = True
    aliases: tuple[str, ...] = ()

    def lookup(self, record: Mapping[str, Any]) -> Any:
        found: Any = None
        for key in (self.name, *self.aliases):
            if key not in record or record[key] is None:
                continue
            if found is None:
                found = record[key]
            if str(record[key]).strip():
                return record[key]
        return found


def max_length(limit: int) -> FieldRule:
    return FieldRule(
        fv.has_max_length(limit),
        f"{{field}} must be at most {limit} characters",
        ErrorCode.TOO_LONG,
    )


def exact_length(length: int) -> FieldRule:
    return FieldRule(
        fv.has_exact_length(length),
        f"{{field}} must be exactly {length} characters",
        ErrorCode.WRONG_LENGTH,
    )


ALNUM = FieldRule(fv.is_alnum, "{field} must contain only letters and digits", ErrorCode.WRONG_CHARSET)
DIGITS_ONLY = FieldRule(fv.is_digits_only, "{field} must contain only digits", ErrorCode.WRONG_CHARSET)
STARTS_WITH_DIGIT = FieldRule(fv.starts_with_digit, "{field} must start with a digit", ErrorCode.WRONG_SHAPE)
EMAIL_SHAPE = FieldRule(fv.is_email_shape, "{field} must be a valid email address", ErrorCode.WRONG_SHAPE)
NON_EMPTY = FieldRule(fv.is_non_empty, "{field} must not be empty", ErrorCode.MISSING)
INTEGER = FieldRule(fv.is_integer_like, "{field} must be an integer", ErrorCode.WRONG_SHAPE)
NUMBER = FieldRule(fv.is_number_like, "{field} must be a number", ErrorCode.WRONG_SHAPE)
DATE = FieldRule(fv.is_date_like, "{field} must be a date", ErrorCode.WRONG_SHAPE)
ISO_DATE = FieldRule(fv.is_iso_date, "{field} must be a date in YYYY-MM-DD format", ErrorCode.WRONG_SHAPE)


FORM_FIELD_SPECS: tuple[FieldSpec, ...] = (
    FieldSpec("first_name", (max_length(20), ALNUM)),
    FieldSpec("second_name", (max_length(20), ALNUM)),
    FieldSpec("email", (EMAIL_SHAPE,)),
    FieldSpec("phone", (exact_length(10), DIGITS_ONLY), aliases=("phone_number",)),
    FieldSpec("eircode", (exact_length(6), STARTS_WITH_DIGIT, ALNUM)),
)


class RowValidator:
    """
    Applies field specs to a record and collects every failing field.
    """

    def __init__(self, normalizer: RecordNormalizer | None = None) -> None:
        self._normalizer = normalizer or RecordNormalizer()

    def validate(
        self,
        record: Mapping[str, Any],
        field_specs: Sequence[FieldSpec],
    ) -> ValidationResult:
        """
        Validate one record against `field_specs`.

        Values are cleaned by the normalizer before any rule runs, and the
        cleaned values are returned whether or not the record is valid.
        """

        errors: list[FieldError] = []
        values: dict[str, str] = {}

        for spec in field_specs:
            value = self._normalizer.normalize_value(spec.name, spec.lookup(record))
            values[spec.name] = value

            if value == "":
                if spec.required:
                    errors.append(FieldError(spec.name, f"{spec.name} is required", ErrorCode.MISSING))
                continue

            for rule in spec.rules:
                if not rule.check(value):
                    errors.append(FieldError(spec.name, rule.describe(spec.name), rule.code))
                    break

        return ValidationResult(errors=errors, values=values)

    def is_completely_empty_row(self, row: Mapping[Any, Any]) -> bool:
        """
        Return True when all values in the row are empty or whitespace.
        """

        return all(self._is_blank(value) for value in row.values())

    @staticmethod
    def _is_blank(value: Any) -> bool:
        if value is None:
            return True
        if isinstance(value, (list, tuple)):
            return all(str(item).strip() == "" for item in value)
        return str(value).strip() == ""
