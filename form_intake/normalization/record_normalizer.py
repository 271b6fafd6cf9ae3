"""
form_intake/normalization/record_normalizer.py

Input cleaning applied before validation and storage, plus CSV header
canonicalisation.
"""

from __future__ import annotations

import re
from typing import Any, Iterable

MAX_IDENTIFIER_LENGTH = 63
RESERVED_COLUMNS: frozenset[str] = frozenset({"id"})

_ACRONYM_BOUNDARY_RE = re.compile(r"([A-Z]+)([A-Z][a-z])")
_CAMEL_BOUNDARY_RE = re.compile(r"([a-z0-9])([A-Z])")
_NON_WORD_RE = re.compile(r"\W+")
_REPEATED_UNDERSCORE_RE = re.compile(r"_+")
_MARKUP_RE = re.compile(r"[<>]")


class RecordNormalizer:
    """
    Trims every value; optionally strips `<`/`>` and upper-cases named fields.
    """

    def __init__(
        self,
        *,
        strip_markup: bool = False,
        uppercase_fields: Iterable[str] = (),
    ) -> None:
        self._strip_markup = strip_markup
        self._uppercase_fields = frozenset(uppercase_fields)

    def clean_value(self, value: Any) -> str:
        if value is None:
            return ""
        cleaned = str(value).strip()
        if self._strip_markup:
            cleaned = _MARKUP_RE.sub("", cleaned).strip()
        return cleaned

    def normalize_value(self, field_name: str, value: Any) -> str:
        cleaned = self.clean_value(value)
        if field_name in self._uppercase_fields:
            return cleaned.upper()
        return cleaned


# The form service cleans markup characters and stores eircodes upper-cased.
FORM_NORMALIZER = RecordNormalizer(strip_markup=True, uppercase_fields=("eircode",))


def normalize_header(header: str) -> str:
    """
    Convert an arbitrary column header into a lowercase_underscore identifier.

    >>> normalize_header("  First Name ")
    'first_name'
    >>> normalize_header("customerID")
    'customer_id'
    >>> normalize_header("E-mail (work)")
    'e_mail_work'
    """

    value = _ACRONYM_BOUNDARY_RE.sub(r"\1_\2", header.strip())
    value = _CAMEL_BOUNDARY_RE.sub(r"\1_\2", value)
    value = _NON_WORD_RE.sub("_", value).lower()
    value = _REPEATED_UNDERSCORE_RE.sub("_", value)
    return value.strip("_")


def _truncate_utf8(value: str, limit: int) -> str:
    # Never splits a multi-byte character.
    return value.encode("utf-8")[:limit].decode("utf-8", "ignore")


def normalize_headers(headers: Iterable[str | None]) -> list[str]:
    """
    Canonicalise a header row into unique column identifiers.

    Blank results become `column_<position>`; identifiers are capped at
    MAX_IDENTIFIER_LENGTH UTF-8 bytes; collisions with earlier columns or with
    RESERVED_COLUMNS get a numeric suffix (`_2`, `_3`, ...).
    """

    taken: set[str] = set(RESERVED_COLUMNS)
    result: list[str] = []
    for position, header in enumerate(headers, start=1):
        base = normalize_header(header or "") or f"column_{position}"
        base = _truncate_utf8(base, MAX_IDENTIFIER_LENGTH)

        candidate = base
        suffix = 2
        while candidate in taken:
            tail = f"_{suffix}"
            candidate = _truncate_utf8(base, MAX_IDENTIFIER_LENGTH - len(tail)) + tail
            suffix += 1

        taken.add(candidate)
        result.append(candidate)
    return result
