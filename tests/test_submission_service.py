from __future__ import annotations

import asyncio

import pytest

from conftest import FakeRowStore
from form_intake.services.submission_service import SubmissionPersistenceError, SubmissionService

VALID_SUBMISSION = {
    "first_name": "Jane",
    "second_name": "Doe",
    "email": "jane@example.com",
    "phone": "0851234567",
    "eircode": "1abcde",
}


def test_valid_submission_is_stored_cleaned(fake_store: FakeRowStore) -> None:
    outcome = asyncio.run(SubmissionService(fake_store).submit(VALID_SUBMISSION))

    assert outcome.accepted
    assert outcome.row_id == 1
    assert fake_store.rows == [{**VALID_SUBMISSION, "eircode": "1ABCDE"}]


def test_invalid_submission_is_not_stored(fake_store: FakeRowStore) -> None:
    outcome = asyncio.run(SubmissionService(fake_store).submit({**VALID_SUBMISSION, "email": "nope"}))

    assert not outcome.accepted
    assert [error.field for error in outcome.validation.errors] == ["email"]
    assert fake_store.rows == []


def test_extra_keys_never_reach_the_store(fake_store: FakeRowStore) -> None:
    asyncio.run(SubmissionService(fake_store).submit({**VALID_SUBMISSION, "is_admin": "true"}))

    assert set(fake_store.rows[0]) == {"first_name", "second_name", "email", "phone", "eircode"}


def test_store_failure_raises() -> None:
    store = FakeRowStore(fail_column="email", failing_values=["jane@example.com"])

    with pytest.raises(SubmissionPersistenceError):
        asyncio.run(SubmissionService(store).submit(VALID_SUBMISSION))
