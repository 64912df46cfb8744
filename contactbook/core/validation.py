"""Field and record validation for contacts.

Every check runs independently and contributes at most one message, so callers
get the full list of problems in a stable order. Nothing here touches storage
or the UI.
"""

from __future__ import annotations

import re
from typing import Any, Mapping

import pandas as pd

from contactbook.config import EMAIL_MAX_LENGTH, NAME_MAX_LENGTH

NAME_REQUIRED = "name required"
NAME_TOO_LONG = "name too long"
NAME_WHITESPACE = "whitespace-only name"
EMAIL_REQUIRED = "email required"
EMAIL_TOO_LONG = "email too long"
EMAIL_INVALID = "invalid email format"
ID_REQUIRED = "id required"
CREATED_AT_INVALID = "invalid createdAt"
UPDATED_AT_INVALID = "invalid updatedAt"
UPDATED_BEFORE_CREATED = "updatedAt before createdAt"

_LABEL = r"[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
EMAIL_PATTERN = re.compile(
    r"^[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+@" + _LABEL + r"(?:\." + _LABEL + r")+$"
)


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.match(email))


def _parse_timestamp(value: Any) -> pd.Timestamp | None:
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        t = pd.to_datetime(value, utc=True, errors="coerce")
    except (TypeError, ValueError, OverflowError):
        return None
    return None if pd.isna(t) else t


def is_valid_timestamp(value: Any) -> bool:
    """Return True if ``value`` parses as a timestamp."""
    return _parse_timestamp(value) is not None


def _name_errors(name: Any) -> list[str]:
    errors: list[str] = []
    if not isinstance(name, str) or not name.strip():
        errors.append(NAME_REQUIRED)
        # A non-empty string of blanks is also reported on its own.
        if isinstance(name, str) and name:
            errors.append(NAME_WHITESPACE)
        return errors
    if len(name.strip()) > NAME_MAX_LENGTH:
        errors.append(NAME_TOO_LONG)
    return errors


def _email_errors(email: Any) -> list[str]:
    if not isinstance(email, str) or not email:
        return [EMAIL_REQUIRED]
    errors: list[str] = []
    if len(email) > EMAIL_MAX_LENGTH:
        errors.append(EMAIL_TOO_LONG)
    if not is_valid_email(email):
        errors.append(EMAIL_INVALID)
    return errors


def validate_fields(name: Any, email: Any) -> list[str]:
    """Validate a candidate name/email pair before a contact exists."""
    return _name_errors(name) + _email_errors(email)


def validate_record(data: Mapping[str, Any]) -> list[str]:
    """Validate a full stored record (camelCase or snake_case keys).

    Timestamps are optional here; when present they must parse, and
    ``updatedAt`` may not precede ``createdAt``.
    """
    errors = validate_fields(data.get("name"), data.get("email"))

    record_id = data.get("id")
    if not isinstance(record_id, str) or not record_id:
        errors.append(ID_REQUIRED)

    created_at = data.get("created_at", data.get("createdAt"))
    updated_at = data.get("updated_at", data.get("updatedAt"))
    created = _parse_timestamp(created_at)
    updated = _parse_timestamp(updated_at)
    if created_at is not None and created is None:
        errors.append(CREATED_AT_INVALID)
    if updated_at is not None and updated is None:
        errors.append(UPDATED_AT_INVALID)
    if created is not None and updated is not None and updated < created:
        errors.append(UPDATED_BEFORE_CREATED)

    return errors


# ---------------------------------------------------------------------------
# Interactive form checks
# ---------------------------------------------------------------------------


def validate_name(value: str | None, *, strict: bool = True) -> str | None:
    """Return the first problem with a form name value, or None.

    With ``strict=False`` (the as-you-type check) a blank field is not an
    error yet; blur and submit use the strict form.
    """
    text = (value or "").strip()
    if not strict and not text:
        return None
    errors = _name_errors(text)
    return errors[0] if errors else None


def validate_email(value: str | None, *, strict: bool = True) -> str | None:
    """Return the first problem with a form email value, or None."""
    text = (value or "").strip()
    if not strict and not text:
        return None
    errors = _email_errors(text)
    return errors[0] if errors else None


def validate_form(name: str | None, email: str | None) -> dict[str, str]:
    """Strict check of both form fields, keyed by field name."""
    errors: dict[str, str] = {}
    name_error = validate_name(name)
    if name_error:
        errors["name"] = name_error
    email_error = validate_email(email)
    if email_error:
        errors["email"] = email_error
    return errors
