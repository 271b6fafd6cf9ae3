"""
form_intake/validators/field_validators.py

Pure string predicates, one per semantic field type.

Every predicate fails closed: `None` and the empty string are never valid.
"""

from __future__ import annotations

import math
import re
from datetime import date, datetime
from email.utils import parsedate_to_datetime
from typing import Callable

Predicate = Callable[[str | None], bool]

_ALNUM_RE = re.compile(r"[A-Za-z0-9]+")
_EMAIL_RE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
_DIGITS_RE = re.compile(r"[0-9]+")
_INTEGER_RE = re.compile(r"[+-]?[0-9]+")
_NUMBER_RE = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_ISO_DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")

DATE_FORMATS: tuple[str, ...] = (
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%d/%m/%Y",
    "%m-%d-%Y",
    "%d-%m-%Y",
    "%d.%m.%Y",
    "%Y.%m.%d",
    "%Y%m%d",
    "%d %b %Y",
    "%d %B %Y",
    "%d-%b-%Y",
    "%b %d %Y",
    "%b %d, %Y",
    "%B %d, %Y",
    "%a, %d %b %Y",
    "%Y-%m-%d %H:%M:%S",
    "%Y/%m/%d %H:%M:%S",
)


def is_non_empty(value: str | None) -> bool:
    return value is not None and value.strip() != ""


def is_alnum(value: str | None) -> bool:
    """True iff the value is non-empty and only ASCII letters or digits."""
    return value is not None and _ALNUM_RE.fullmatch(value) is not None


def is_email_shape(value: str | None) -> bool:
    """True iff the value looks like `local@domain.tld` with no whitespace."""
    return value is not None and _EMAIL_RE.fullmatch(value) is not None


def is_digits_only(value: str | None) -> bool:
    return value is not None and _DIGITS_RE.fullmatch(value) is not None


def starts_with_digit(value: str | None) -> bool:
    return bool(value) and value[0] in "0123456789"


def is_integer_like(value: str | None) -> bool:
    if value is None:
        return False
    return _INTEGER_RE.fullmatch(value.strip()) is not None


def is_number_like(value: str | None) -> bool:
    """True iff the trimmed value is a finite decimal or scientific number."""
    if value is None:
        return False
    raw = value.strip()
    if _NUMBER_RE.fullmatch(raw) is None:
        return False
    return math.isfinite(float(raw))


def is_date_like(value: str | None) -> bool:
    """
    True iff the value parses as a calendar date.

    ISO 8601 (optionally with time and `Z` offset) is tried first, then
    each layout in DATE_FORMATS, then RFC 2822 (`Mon, 15 Jan 2024 10:00:00 +0000`).
    """

    if not is_non_empty(value):
        return False
    raw = value.strip()

    normalized = raw[:-1] + "+00:00" if raw.endswith("Z") else raw
    try:
        datetime.fromisoformat(normalized)
        return True
    except ValueError:
        pass

    for fmt in DATE_FORMATS:
        try:
            datetime.strptime(raw, fmt)
            return True
        except ValueError:
            continue

    try:
        parsedate_to_datetime(raw)
    except (TypeError, ValueError):
        return False
    return True


def is_iso_date(value: str | None) -> bool:
    """Strict `YYYY-MM-DD` that is also a real calendar date."""
    if value is None or _ISO_DATE_RE.fullmatch(value) is None:
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def has_max_length(limit: int) -> Predicate:
    def check(value: str | None) -> bool:
        return value is not None and len(value) <= limit

    return check


def has_exact_length(length: int) -> Predicate:
    def check(value: str | None) -> bool:
        return value is not None and len(value) == length

    return check
