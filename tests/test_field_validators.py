"""
tests/test_field_validators.py

Pure predicate checks: no database, no I/O.
"""

from __future__ import annotations

import pytest

from form_intake.validators import field_validators as fv


class TestIsAlnum:
    @pytest.mark.parametrize("value", ["Jane", "doe", "A1b2C3", "x", "a" * 20, "0123456789"])
    def test_accepts_letters_and_digits(self, value: str) -> None:
        assert fv.is_alnum(value)

    @pytest.mark.parametrize("value", ["", None, "Jane Doe", "O'Neil", "anne-marie", "zoë", "<b>", "a_b"])
    def test_rejects_anything_else(self, value: str | None) -> None:
        assert not fv.is_alnum(value)


class TestIsEmailShape:
    @pytest.mark.parametrize("value", ["jane@example.com", "a.b+c@mail.example.ie", "x@y.z"])
    def test_accepts_loose_email_shape(self, value: str) -> None:
        assert fv.is_email_shape(value)

    @pytest.mark.parametrize(
        "value",
        ["", None, "jane", "jane@example", "jane@@example.com", "ja ne@example.com", "@example.com", "jane@.com"],
    )
    def test_rejects_malformed(self, value: str | None) -> None:
        assert not fv.is_email_shape(value)


class TestDigits:
    def test_digits_only(self) -> None:
        assert fv.is_digits_only("0851234567")
        assert not fv.is_digits_only("12345abcde")
        assert not fv.is_digits_only("")
        assert not fv.is_digits_only(None)
        assert not fv.is_digits_only("085 123")

    def test_non_ascii_digits_are_rejected(self) -> None:
        assert not fv.is_digits_only("١٢٣")

    def test_starts_with_digit(self) -> None:
        assert fv.starts_with_digit("1ABCDE")
        assert not fv.starts_with_digit("A12345")
        assert not fv.starts_with_digit("")
        assert not fv.starts_with_digit(None)


class TestNumeric:
    @pytest.mark.parametrize("value", ["42", " 42 ", "-7", "+3", "0"])
    def test_integer_like(self, value: str) -> None:
        assert fv.is_integer_like(value)

    @pytest.mark.parametrize("value", ["", "4.2", "forty", "1_000", None])
    def test_not_integer_like(self, value: str | None) -> None:
        assert not fv.is_integer_like(value)

    @pytest.mark.parametrize("value", ["42", "4.2", ".5", "-0.25", "1e3", " 19.99 "])
    def test_number_like(self, value: str) -> None:
        assert fv.is_number_like(value)

    @pytest.mark.parametrize("value", ["", "nan", "inf", "1e999", "12,5", "abc", None])
    def test_not_number_like(self, value: str | None) -> None:
        assert not fv.is_number_like(value)


class TestDates:
    @pytest.mark.parametrize(
        "value",
        [
            "2024-02-29",
            "2024/02/29",
            "02/28/2024",
            "31/12/2024",
            "2024-02-29T10:00:00Z",
            "5 Mar 2024",
            "March 5, 2024",
            "01-15-2024",
            "15-Jan-2024",
            "2024.01.15",
            "Jan 5 2024",
            "Mon, 15 Jan 2024",
            "Mon, 15 Jan 2024 10:30:00 +0000",
        ],
    )
    def test_date_like_accepts_common_layouts(self, value: str) -> None:
        assert fv.is_date_like(value)

    @pytest.mark.parametrize(
        "value",
        ["", None, "2023-02-29", "yesterday", "13/13/2024", "Mon, 31 Feb 2024 10:30:00 +0000"],
    )
    def test_date_like_rejects_non_dates(self, value: str | None) -> None:
        assert not fv.is_date_like(value)

    def test_iso_date_is_strict(self) -> None:
        assert fv.is_iso_date("2024-02-29")
        assert not fv.is_iso_date("2023-02-29")
        assert not fv.is_iso_date("2024/02/29")
        assert not fv.is_iso_date("2024-2-9")
        assert not fv.is_iso_date(None)


class TestLengthFactories:
    def test_max_length(self) -> None:
        check = fv.has_max_length(20)
        assert check("a" * 20)
        assert not check("a" * 21)

    def test_exact_length(self) -> None:
        check = fv.has_exact_length(6)
        assert check("1ABCDE")
        assert not check("1234A")
        assert not check(None)
