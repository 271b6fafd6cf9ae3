from __future__ import annotations

import unittest

from form_intake.domain.submission import ErrorCode
from form_intake.normalization.record_normalizer import FORM_NORMALIZER
from form_intake.validators.row_validator import (
    FORM_FIELD_SPECS,
    INTEGER,
    FieldSpec,
    RowValidator,
)


def _valid_form(**overrides: str) -> dict[str, str]:
    payload = {
        "first_name": "Jane",
        "second_name": "Doe",
        "email": "jane@example.com",
        "phone": "0851234567",
        "eircode": "1ABCDE",
    }
    payload.update(overrides)
    return payload


class TestFormValidation(unittest.TestCase):
    def setUp(self) -> None:
        self.validator = RowValidator(FORM_NORMALIZER)

    def _errors_by_field(self, record: dict[str, str]) -> dict[str, str]:
        result = self.validator.validate(record, FORM_FIELD_SPECS)
        return {error.field: error.message for error in result.errors}

    def test_valid_form_passes(self) -> None:
        result = self.validator.validate(_valid_form(), FORM_FIELD_SPECS)

        self.assertTrue(result.is_valid)
        self.assertEqual(result.values["first_name"], "Jane")
        self.assertEqual(result.values["eircode"], "1ABCDE")

    def test_every_missing_field_is_reported(self) -> None:
        result = self.validator.validate({}, FORM_FIELD_SPECS)

        self.assertEqual(len(result.errors), 5)
        self.assertEqual(
            [error.field for error in result.errors],
            ["first_name", "second_name", "email", "phone", "eircode"],
        )
        self.assertTrue(all(error.code == ErrorCode.MISSING for error in result.errors))
        self.assertEqual(result.errors[0].message, "first_name is required")

    def test_whitespace_only_counts_as_missing(self) -> None:
        errors = self._errors_by_field(_valid_form(second_name="   "))

        self.assertEqual(errors, {"second_name": "second_name is required"})

    def test_only_first_failing_rule_is_reported(self) -> None:
        result = self.validator.validate(_valid_form(first_name="J" * 21 + "!"), FORM_FIELD_SPECS)

        self.assertEqual(len(result.errors), 1)
        self.assertEqual(result.errors[0].code, ErrorCode.TOO_LONG)
        self.assertEqual(result.errors[0].message, "first_name must be at most 20 characters")

    def test_name_with_space_is_rejected(self) -> None:
        errors = self._errors_by_field(_valid_form(first_name="Mary Ann"))

        self.assertEqual(errors["first_name"], "first_name must contain only letters and digits")

    def test_phone_rules(self) -> None:
        self.assertEqual(
            self._errors_by_field(_valid_form(phone="12345"))["phone"],
            "phone must be exactly 10 characters",
        )
        self.assertEqual(
            self._errors_by_field(_valid_form(phone="12345abcde"))["phone"],
            "phone must contain only digits",
        )

    def test_phone_number_alias_is_accepted(self) -> None:
        record = _valid_form()
        record["phone_number"] = record.pop("phone")

        result = self.validator.validate(record, FORM_FIELD_SPECS)

        self.assertTrue(result.is_valid)
        self.assertEqual(result.values["phone"], "0851234567")

    def test_blank_phone_falls_through_to_alias(self) -> None:
        result = self.validator.validate(_valid_form(phone=" ", phone_number="0851234567"), FORM_FIELD_SPECS)

        self.assertTrue(result.is_valid)

    def test_eircode_length_is_checked_before_first_character(self) -> None:
        errors = self._errors_by_field(_valid_form(eircode="D02AB12"))

        self.assertEqual(errors["eircode"], "eircode must be exactly 6 characters")

    def test_eircode_must_start_with_digit(self) -> None:
        errors = self._errors_by_field(_valid_form(eircode="D02AB1"))

        self.assertEqual(errors["eircode"], "eircode must start with a digit")

    def test_eircode_is_upper_cased_before_storage(self) -> None:
        result = self.validator.validate(_valid_form(eircode="1abcde"), FORM_FIELD_SPECS)

        self.assertTrue(result.is_valid)
        self.assertEqual(result.values["eircode"], "1ABCDE")

    def test_markup_characters_are_stripped(self) -> None:
        result = self.validator.validate(_valid_form(first_name="<Jane>"), FORM_FIELD_SPECS)

        self.assertTrue(result.is_valid)
        self.assertEqual(result.values["first_name"], "Jane")

    def test_email_shape(self) -> None:
        errors = self._errors_by_field(_valid_form(email="jane.example.com"))

        self.assertEqual(errors, {"email": "email must be a valid email address"})

    def test_values_are_returned_for_invalid_records(self) -> None:
        result = self.validator.validate(_valid_form(phone=" 123 "), FORM_FIELD_SPECS)

        self.assertFalse(result.is_valid)
        self.assertEqual(result.values["phone"], "123")


class TestOptionalFields(unittest.TestCase):
    def test_blank_optional_field_skips_rules(self) -> None:
        validator = RowValidator()
        specs = (FieldSpec("age", (INTEGER,), required=False),)

        self.assertTrue(validator.validate({"age": ""}, specs).is_valid)
        self.assertFalse(validator.validate({"age": "old"}, specs).is_valid)


class TestEmptyRowDetection(unittest.TestCase):
    def setUp(self) -> None:
        self.validator = RowValidator()

    def test_all_blank_values(self) -> None:
        self.assertTrue(self.validator.is_completely_empty_row({"a": "", "b": "  ", "c": None}))

    def test_any_value_present(self) -> None:
        self.assertFalse(self.validator.is_completely_empty_row({"a": "", "b": "x"}))

    def test_list_values(self) -> None:
        self.assertTrue(self.validator.is_completely_empty_row({None: ["", " "]}))


if __name__ == "__main__":
    unittest.main()
