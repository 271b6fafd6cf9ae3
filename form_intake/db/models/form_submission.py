"""
form_intake/db/models/form_submission.py

Validated web form submissions.
"""

from __future__ import annotations

from sqlalchemy import Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from form_intake.db.base import Base, CreatedAtMixin


class FormSubmission(CreatedAtMixin, Base):
    __tablename__ = "form_submissions"
    __table_args__ = (UniqueConstraint("email", name="uq_form_submissions_email"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    second_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str] = mapped_column(String(20), nullable=False)
    eircode: Mapped[str] = mapped_column(String(6), nullable=False)
