"""Upgrade stored contact records to the current schema.

Stored payloads are untrusted: they may come from an older release, a newer
one, or a hand-edited file. ``migrate`` never mutates its input and always
says which path it took, so callers can report unknown versions instead of
silently coercing them. The result is not validated here; callers run
``Contact.validate`` before accepting it.

Adding a schema version means adding a branch to ``migrate`` and bumping
``SCHEMA_VERSION`` in the config.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Mapping

from contactbook.config import SCHEMA_VERSION
from contactbook.core.contracts import Contact, PERSISTED_KEYS, format_iso, utc_now
from contactbook.core.validation import validate_record


class MigrationError(ValueError):
    """Raised when a stored element cannot be read as a record at all."""


@dataclass(frozen=True)
class Current:
    """Already a valid current-version record; passed through."""

    contact: Contact


@dataclass(frozen=True)
class Upgraded:
    """Version absent or current, with missing fields filled in."""

    contact: Contact
    filled: tuple[str, ...] = ()


@dataclass(frozen=True)
class UnknownVersion:
    """Unrecognised ``schemaVersion``; best-effort record."""

    contact: Contact
    version: Any


MigrationResult = Current | Upgraded | UnknownVersion


def _stored_version(raw: Mapping[str, Any]) -> Any:
    # Early builds wrote the tag as "version". 0 and "" count as untagged.
    if "schemaVersion" in raw:
        return raw["schemaVersion"]
    if "schema_version" in raw:
        return raw["schema_version"]
    return raw.get("version")


def _field(raw: Mapping[str, Any], attr: str) -> Any:
    disk = PERSISTED_KEYS[attr]
    if disk in raw:
        return raw[disk]
    return raw.get(attr)


def _is_current(raw: Mapping[str, Any]) -> bool:
    if _stored_version(raw) != SCHEMA_VERSION:
        return False
    if any(_field(raw, attr) is None for attr in PERSISTED_KEYS):
        return False
    return not validate_record({disk: _field(raw, attr) for attr, disk in PERSISTED_KEYS.items()})


def migrate(raw: Any, *, clock: Callable[[], datetime] = utc_now) -> MigrationResult:
    if isinstance(raw, Contact):
        return Current(raw)
    if not isinstance(raw, Mapping):
        raise MigrationError(f"expected an object, got {type(raw).__name__}")

    version = _stored_version(raw)
    values = {attr: _field(raw, attr) for attr in ("id", "name", "email", "created_at", "updated_at")}

    if _is_current(raw):
        return Current(Contact(schema_version=SCHEMA_VERSION, **values))

    if version in (None, 0, "") or version == SCHEMA_VERSION:
        now = format_iso(clock())
        filled = tuple(attr for attr in ("created_at", "updated_at") if not values[attr])
        for attr in filled:
            values[attr] = now
        return Upgraded(Contact(schema_version=SCHEMA_VERSION, **values), filled=filled)

    # Future versions go above this line. Unknown ones keep their tag and are
    # left for validation to accept or reject.
    now = format_iso(clock())
    values["created_at"] = values["created_at"] or now
    values["updated_at"] = values["updated_at"] or now
    return UnknownVersion(Contact(schema_version=version, **values), version=version)

