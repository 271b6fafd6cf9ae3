"""
form_intake/validators package marker.
"""

from form_intake.validators.column_rules import ColumnKind, ColumnRuleSet, UnknownColumnKindError
from form_intake.validators.row_validator import FORM_FIELD_SPECS, FieldRule, FieldSpec, RowValidator

__all__ = [
    "ColumnKind",
    "ColumnRuleSet",
    "FORM_FIELD_SPECS",
    "FieldRule",
    "FieldSpec",
    "RowValidator",
    "UnknownColumnKindError",
]
