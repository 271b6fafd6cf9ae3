"""
form_intake/repositories package marker.
"""

from form_intake.repositories.base import RowStore
from form_intake.repositories.csv_import_repository import (
    CSVImportRepository,
    InvalidTableNameError,
    SchemaMismatchError,
)
from form_intake.repositories.form_submission_repository import FormSubmissionRepository
from form_intake.repositories.table_repository import TableRepository

__all__ = [
    "CSVImportRepository",
    "FormSubmissionRepository",
    "InvalidTableNameError",
    "RowStore",
    "SchemaMismatchError",
    "TableRepository",
]
