from __future__ import annotations

import pytest

from contactbook.core import validation as v


def test_empty_name_and_bad_email_give_exactly_two_errors() -> None:
    assert v.validate_fields("", "invalid-email") == [v.NAME_REQUIRED, v.EMAIL_INVALID]


def test_valid_pair_has_no_errors() -> None:
    assert v.validate_fields("John Doe", "john.doe@example.com") == []


def test_rules_are_not_short_circuited() -> None:
    long_email = "a" * 260 + "@x"  # too long and no dot in the domain
    errors = v.validate_fields("x" * 101, long_email)

    assert errors == [v.NAME_TOO_LONG, v.EMAIL_TOO_LONG, v.EMAIL_INVALID]


def test_name_length_limit_is_inclusive() -> None:
    assert v.validate_fields("x" * 100, "a@b.co") == []
    assert v.validate_fields("x" * 101, "a@b.co") == [v.NAME_TOO_LONG]


def test_whitespace_only_name_is_reported() -> None:
    errors = v.validate_fields("   ", "a@b.co")

    assert v.NAME_REQUIRED in errors
    assert v.NAME_WHITESPACE in errors


@pytest.mark.parametrize("name", [None, 42, ["Bob"]])
def test_non_string_name_is_required_error(name) -> None:
    assert v.validate_fields(name, "a@b.co") == [v.NAME_REQUIRED]


@pytest.mark.parametrize("email", [None, "", 7])
def test_missing_email(email) -> None:
    assert v.validate_fields("Bob", email) == [v.EMAIL_REQUIRED]


@pytest.mark.parametrize(
    "email",
    [
        "john.doe@example.com",
        "first+tag@sub.example.org",
        "o'brien@mail-host.ie",
    ],
)
def test_valid_emails(email) -> None:
    assert v.is_valid_email(email)


@pytest.mark.parametrize(
    "email",
    [
        "invalid-email",
        "user@localhost",
        "user@-bad.com",
        "user@bad-.com",
        "two@@example.com",
        "spaces in@example.com",
        "@example.com",
    ],
)
def test_invalid_emails(email) -> None:
    assert not v.is_valid_email(email)


def test_email_length_limit() -> None:
    local = "a" * 64
    domain = ".".join(["b" * 60] * 3) + ".com"  # 64 + 1 + 186 = 251 chars
    ok = f"{local}@{domain}"
    assert len(ok) <= 254
    assert v.validate_fields("Bob", ok) == []

    too_long = f"{local}@{'c' * 10}.{domain}"
    assert len(too_long) > 254
    assert v.validate_fields("Bob", too_long) == [v.EMAIL_TOO_LONG]


def test_validate_record_requires_id_and_parseable_timestamps() -> None:
    record = {
        "name": "Bob",
        "email": "bob@example.com",
        "createdAt": "not a date",
        "updatedAt": "2025-01-01T00:00:00.000Z",
    }

    assert v.validate_record(record) == [v.ID_REQUIRED, v.CREATED_AT_INVALID]


def test_validate_record_accepts_missing_timestamps() -> None:
    assert v.validate_record({"id": "abc", "name": "Bob", "email": "bob@example.com"}) == []


def test_realtime_check_ignores_blank_field() -> None:
    assert v.validate_name("", strict=False) is None
    assert v.validate_email("   ", strict=False) is None

    assert v.validate_name("") == v.NAME_REQUIRED
    assert v.validate_email("") == v.EMAIL_REQUIRED


def test_realtime_check_flags_non_blank_field() -> None:
    assert v.validate_email("nope", strict=False) == v.EMAIL_INVALID
    assert v.validate_name("x" * 120, strict=False) == v.NAME_TOO_LONG


def test_validate_form_is_keyed_by_field() -> None:
    assert v.validate_form("", "invalid-email") == {
        "name": v.NAME_REQUIRED,
        "email": v.EMAIL_INVALID,
    }
    assert v.validate_form(" Jane ", " jane@example.com ") == {}


def test_validate_record_rejects_updated_before_created() -> None:
    record = {
        "id": "a1",
        "name": "Ann",
        "email": "ann@example.com",
        "createdAt": "2099-01-01T00:00:00.000Z",
        "updatedAt": "2020-01-01T00:00:00.000Z",
    }

    assert v.validate_record(record) == [v.UPDATED_BEFORE_CREATED]
    record["updatedAt"] = record["createdAt"]
    assert v.validate_record(record) == []
