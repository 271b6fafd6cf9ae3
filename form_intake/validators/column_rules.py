"""
form_intake/validators/column_rules.py

Column typing for CSV imports.

A column's kind comes from an explicit override when one is configured,
otherwise from the first matching entry of DEFAULT_HEADER_PATTERNS, which is
checked in this fixed order:

    email -> date -> integer -> number -> text

so `date_id` and `created_at` are date columns and `id_number` is an integer
column.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Mapping, Sequence

from sqlalchemy import Text
from sqlalchemy.types import TypeEngine

from form_intake.normalization.record_normalizer import normalize_header
from form_intake.validators.row_validator import (
    DATE,
    EMAIL_SHAPE,
    INTEGER,
    ISO_DATE,
    NON_EMPTY,
    NUMBER,
    FieldRule,
    FieldSpec,
)


class ColumnKind:
    EMAIL = "email"
    DATE = "date"
    ISO_DATE = "iso_date"
    INTEGER = "integer"
    NUMBER = "number"
    TEXT = "text"


class UnknownColumnKindError(ValueError):
    """
    Raised when a column override names a kind that does not exist.
    """


@dataclass(frozen=True)
class ColumnType:
    """
    Validator and storage type for one column kind.
    """

    kind: str
    rule: FieldRule
    required: bool
    storage_type: type[TypeEngine] = Text


COLUMN_TYPES: dict[str, ColumnType] = {
    ColumnKind.EMAIL: ColumnType(ColumnKind.EMAIL, EMAIL_SHAPE, required=True),
    ColumnKind.DATE: ColumnType(ColumnKind.DATE, DATE, required=False),
    ColumnKind.ISO_DATE: ColumnType(ColumnKind.ISO_DATE, ISO_DATE, required=False),
    ColumnKind.INTEGER: ColumnType(ColumnKind.INTEGER, INTEGER, required=False),
    ColumnKind.NUMBER: ColumnType(ColumnKind.NUMBER, NUMBER, required=False),
    ColumnKind.TEXT: ColumnType(ColumnKind.TEXT, NON_EMPTY, required=True),
}


@dataclass(frozen=True)
class HeaderPattern:
    kind: str
    pattern: re.Pattern[str]

    def matches(self, column: str) -> bool:
        return self.pattern.search(column) is not None


DEFAULT_HEADER_PATTERNS: tuple[HeaderPattern, ...] = (
    HeaderPattern(ColumnKind.EMAIL, re.compile(r"e_?mail")),
    HeaderPattern(ColumnKind.DATE, re.compile(r"date|dob|birth|created|updated|timestamp|_at$")),
    HeaderPattern(ColumnKind.INTEGER, re.compile(r"(?:^|_)(?:id|age|count|qty)s?(?:_|$)")),
    HeaderPattern(ColumnKind.NUMBER, re.compile(r"(?:^|_)(?:number|price|amount|total)s?(?:_|$)")),
)


class ColumnRuleSet:
    """
    Resolves canonical column names to column types.
    """

    def __init__(
        self,
        overrides: Mapping[str, str] | None = None,
        *,
        patterns: Sequence[HeaderPattern] = DEFAULT_HEADER_PATTERNS,
    ) -> None:
        self._overrides: dict[str, str] = {}
        for column, kind in (overrides or {}).items():
            normalized_kind = kind.strip().lower()
            if normalized_kind not in COLUMN_TYPES:
                allowed = ", ".join(sorted(COLUMN_TYPES))
                raise UnknownColumnKindError(
                    f"Unknown column kind {kind!r} for column {column!r}. Allowed values: {allowed}."
                )
            self._overrides[normalize_header(column)] = normalized_kind
        self._patterns = tuple(patterns)

    def kind_for(self, column: str) -> str:
        if column in self._overrides:
            return self._overrides[column]
        for pattern in self._patterns:
            if pattern.matches(column):
                return pattern.kind
        return ColumnKind.TEXT

    def column_type(self, column: str) -> ColumnType:
        return COLUMN_TYPES[self.kind_for(column)]

    def field_specs(
        self,
        columns: Sequence[str],
        *,
        optional_columns: Iterable[str] = (),
    ) -> tuple[FieldSpec, ...]:
        """
        Build one field spec per canonical column, in column order.

        Columns in `optional_columns` accept blank values whatever their kind.
        """

        optional = frozenset(optional_columns)
        specs: list[FieldSpec] = []
        for column in columns:
            column_type = self.column_type(column)
            required = column_type.required and column not in optional
            specs.append(FieldSpec(column, (column_type.rule,), required=required))
        return tuple(specs)
