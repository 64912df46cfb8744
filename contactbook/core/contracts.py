from __future__ import annotations

import random
import string
import time
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable

import pandas as pd

from contactbook.config import SCHEMA_VERSION
from contactbook.core.validation import validate_fields, validate_record

_BASE36 = string.digits + string.ascii_lowercase

# Mapping between dataclass attributes and the on-disk (camelCase) keys.
PERSISTED_KEYS = {
    "id": "id",
    "name": "name",
    "email": "email",
    "created_at": "createdAt",
    "updated_at": "updatedAt",
    "schema_version": "schemaVersion",
}


class ValidationError(ValueError):
    """Raised when contact fields fail validation.

    ``errors`` holds the ordered rule messages.
    """

    def __init__(self, errors: list[str]) -> None:
        super().__init__(", ".join(errors))
        self.errors = list(errors)


def _to_base36(n: int) -> str:
    if n == 0:
        return "0"
    out = []
    while n:
        n, rem = divmod(n, 36)
        out.append(_BASE36[rem])
    return "".join(reversed(out))


def generate_id() -> str:
    """Millisecond clock in base 36 followed by a random base-36 suffix."""
    millis = int(time.time() * 1000)
    suffix = "".join(random.choices(_BASE36, k=11))
    return _to_base36(millis) + suffix


def format_iso(ts: datetime) -> str:
    """Format as UTC ISO-8601 with millisecond precision and a trailing Z."""
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    ts = ts.astimezone(timezone.utc)
    return ts.strftime("%Y-%m-%dT%H:%M:%S.") + f"{ts.microsecond // 1000:03d}Z"


def parse_iso(value: str) -> datetime:
    """Parse a stored timestamp; raises ValueError if it is not one.

    Our own ``...Z`` strings take the fast path. Anything else stored data
    may hold goes through pandas, matching what validation accepts.
    """
    if not isinstance(value, str):
        raise TypeError(f"expected a timestamp string, got {type(value).__name__}")
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        ts = datetime.fromisoformat(text)
    except ValueError:
        try:
            parsed = pd.to_datetime(value, utc=True, errors="coerce")
        except (TypeError, ValueError, OverflowError):
            parsed = None
        if parsed is None or pd.isna(parsed):
            raise ValueError(f"not a timestamp: {value!r}") from None
        ts = parsed.to_pydatetime(warn=False)
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts


def _to_millis(ts: datetime) -> datetime:
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.replace(microsecond=(ts.microsecond // 1000) * 1000)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Contact:
    id: str
    name: str
    email: str
    created_at: str
    updated_at: str
    # Unknown tags from stored data are carried through unchanged.
    schema_version: Any = SCHEMA_VERSION

    @classmethod
    def create(
        cls,
        name: str,
        email: str,
        *,
        clock: Callable[[], datetime] = utc_now,
        id_factory: Callable[[], str] = generate_id,
    ) -> "Contact":
        """Build a new contact with a fresh id and equal timestamps."""
        name = (name or "").strip() if isinstance(name, str) else name
        email = (email or "").strip() if isinstance(email, str) else email
        errors = validate_fields(name, email)
        if errors:
            raise ValidationError(errors)
        now = format_iso(clock())
        return cls(
            id=id_factory(),
            name=name,
            email=email,
            created_at=now,
            updated_at=now,
            schema_version=SCHEMA_VERSION,
        )

    def update(
        self,
        *,
        name: str | None = None,
        email: str | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Replace name/email and refresh ``updated_at``.

        Validation happens before anything changes, so a rejected update
        leaves the contact untouched. ``updated_at`` always lands at least one
        millisecond after both the previous ``updated_at`` and ``created_at``.
        """
        new_name = self.name if name is None else name.strip()
        new_email = self.email if email is None else email.strip()
        errors = validate_fields(new_name, new_email)
        if errors:
            raise ValidationError(errors)

        now = _to_millis(clock())
        floor = None
        for stamp in (self.created_at, self.updated_at):
            try:
                parsed = parse_iso(stamp)
            except (TypeError, ValueError):
                continue
            if floor is None or parsed > floor:
                floor = parsed
        if floor is not None and now <= floor:
            now = floor + timedelta(milliseconds=1)

        self.name = new_name
        self.email = new_email
        self.updated_at = format_iso(now)

    def validate(self) -> list[str]:
        return validate_record(self.to_dict())

    def to_dict(self) -> dict[str, Any]:
        """Plain-data projection with the persisted (camelCase) keys."""
        return {disk: getattr(self, attr) for attr, disk in PERSISTED_KEYS.items()}

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "Contact":
        kwargs = {}
        for attr, disk in PERSISTED_KEYS.items():
            if disk in d:
                kwargs[attr] = d[disk]
            elif attr in d:
                kwargs[attr] = d[attr]
        return cls(**kwargs)
