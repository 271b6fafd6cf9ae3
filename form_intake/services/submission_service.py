"""
form_intake/services/submission_service.py

Validate one web form submission and store it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from form_intake.db.errors import PersistenceError
from form_intake.domain.submission import ValidationResult
from form_intake.logging_utils import log_event
from form_intake.normalization.record_normalizer import FORM_NORMALIZER
from form_intake.repositories.base import RowStore
from form_intake.validators.row_validator import FORM_FIELD_SPECS, FieldSpec, RowValidator

logger = logging.getLogger(__name__)


class SubmissionPersistenceError(RuntimeError):
    """
    Raised when a valid submission cannot be stored.
    """


@dataclass(frozen=True)
class SubmissionOutcome:
    validation: ValidationResult
    row_id: int | None = None

    @property
    def accepted(self) -> bool:
        return self.row_id is not None


class SubmissionService:
    """
    Coordinates cleaning, validation and persistence for form submissions.
    """

    def __init__(
        self,
        store: RowStore,
        *,
        validator: RowValidator | None = None,
        field_specs: Sequence[FieldSpec] = FORM_FIELD_SPECS,
    ) -> None:
        self._store = store
        self._validator = validator or RowValidator(FORM_NORMALIZER)
        self._field_specs = tuple(field_specs)

    async def submit(self, payload: Mapping[str, Any]) -> SubmissionOutcome:
        """
        Validate `payload` and insert it when every field passes.

        Validation failures come back in the outcome; only storage failures
        raise.
        """

        validation = self._validator.validate(payload, self._field_specs)
        if not validation.is_valid:
            log_event(
                logger,
                logging.INFO,
                "submission_rejected",
                fields=[error.field for error in validation.errors],
            )
            return SubmissionOutcome(validation=validation)

        try:
            row_id = await self._store.insert_row(validation.values)
        except PersistenceError as exc:
            log_event(
                logger,
                logging.ERROR,
                "submission_persist_failed",
                error_type=type(exc).__name__,
                error=str(exc),
            )
            raise SubmissionPersistenceError("Failed to store submission.") from exc

        log_event(logger, logging.INFO, "submission_saved", row_id=row_id)
        return SubmissionOutcome(validation=validation, row_id=row_id)
