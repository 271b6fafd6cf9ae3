"""
ORM model registry.
"""

from form_intake.db.models.form_submission import FormSubmission

__all__ = ["FormSubmission"]
