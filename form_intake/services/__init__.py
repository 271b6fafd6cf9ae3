"""
form_intake/services package marker.
"""

from form_intake.services.csv_import_service import (
    CSVFormatError,
    CSVImportPersistenceError,
    CSVImportService,
    build_csv_import_service,
)
from form_intake.services.submission_service import (
    SubmissionOutcome,
    SubmissionPersistenceError,
    SubmissionService,
)

__all__ = [
    "CSVFormatError",
    "CSVImportPersistenceError",
    "CSVImportService",
    "build_csv_import_service",
    "SubmissionOutcome",
    "SubmissionPersistenceError",
    "SubmissionService",
]
