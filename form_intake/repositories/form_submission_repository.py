"""
form_intake/repositories/form_submission_repository.py

Persistence for validated web form submissions.
"""

from __future__ import annotations

from form_intake.db.models.form_submission import FormSubmission
from form_intake.db.session import Database
from form_intake.repositories.table_repository import TableRepository


class FormSubmissionRepository(TableRepository):
    """
    Gateway for the fixed `form_submissions` table.

    A duplicate email surfaces as DuplicateRecordError from insert_row.
    """

    def __init__(self, database: Database) -> None:
        super().__init__(database, FormSubmission.__table__)
