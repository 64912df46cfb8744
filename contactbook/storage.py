"""Key/value persistence for the contact collection.

The whole collection lives under one key as a JSON array. Stores are
substitutable: a directory of JSON files is the primary backend, and an
in-process dict takes over for the session when the directory is not usable.

``ContactRepository`` never raises for bad stored data or failed writes. Loads
degrade to whatever records survive migration and validation; saves report an
outcome the UI can show while the in-memory collection stays authoritative.
"""

from __future__ import annotations

import json
import logging
from enum import Enum
from pathlib import Path
from typing import Any, Protocol, Sequence

from contactbook.config import PROBE_KEY, QUOTA_BYTES, STORAGE_KEY
from contactbook.core.contracts import Contact
from contactbook.core.migration import MigrationError, UnknownVersion, migrate
from contactbook.diagnostics import EventLog

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Base class for store failures."""


class StorageQuotaExceeded(StorageError):
    """A write would exceed the store's quota."""


class StorageWriteError(StorageError):
    """Any other write failure."""


class KeyValueStore(Protocol):
    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemoryStore:
    """Dict-backed store that lives as long as the process/session."""

    def __init__(self, quota_bytes: int = QUOTA_BYTES) -> None:
        self.quota_bytes = quota_bytes
        self._items: dict[str, str] = {}

    def _used_bytes(self, excluding: str | None = None) -> int:
        return sum(
            len(k.encode("utf-8")) + len(v.encode("utf-8"))
            for k, v in self._items.items()
            if k != excluding
        )

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        needed = len(key.encode("utf-8")) + len(value.encode("utf-8"))
        if self._used_bytes(excluding=key) + needed > self.quota_bytes:
            raise StorageQuotaExceeded(f"quota of {self.quota_bytes} bytes exceeded writing {key!r}")
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class FileStore:
    """One ``<key>.json`` file per key under ``root``."""

    def __init__(self, root: str | Path, quota_bytes: int = QUOTA_BYTES) -> None:
        self.root = Path(root)
        self.quota_bytes = quota_bytes

    def path_for(self, key: str) -> Path:
        return self.root / f"{key}.json"

    def _used_bytes(self, excluding: str | None = None) -> int:
        if not self.root.exists():
            return 0
        skip = self.path_for(excluding).name if excluding is not None else None
        return sum(p.stat().st_size for p in self.root.glob("*.json") if p.name != skip)

    def get_item(self, key: str) -> str | None:
        path = self.path_for(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set_item(self, key: str, value: str) -> None:
        data = value.encode("utf-8")
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            if self._used_bytes(excluding=key) + len(data) > self.quota_bytes:
                raise StorageQuotaExceeded(f"quota of {self.quota_bytes} bytes exceeded writing {key!r}")

            # Write to a sibling temp file first so a crash never leaves a
            # half-written payload under the real key.
            path = self.path_for(key)
            tmp = path.with_suffix(".json.tmp")
            tmp.write_bytes(data)
            tmp.replace(path)
        except StorageQuotaExceeded:
            raise
        except OSError as exc:
            raise StorageWriteError(f"failed to write {key!r}: {exc}") from exc

    def remove_item(self, key: str) -> None:
        try:
            self.path_for(key).unlink()
        except FileNotFoundError:
            pass


def probe_store(store: KeyValueStore, probe_key: str = PROBE_KEY) -> bool:
    """Return True if ``store`` accepts a write/remove round trip."""
    try:
        store.set_item(probe_key, probe_key)
        store.remove_item(probe_key)
        return True
    except Exception as exc:  # noqa: BLE001
        logger.debug("Storage probe failed: %r", exc)
        return False


def select_store(
    primary: KeyValueStore,
    fallback: KeyValueStore,
    *,
    events: EventLog | None = None,
) -> KeyValueStore:
    """Probe ``primary`` once and return it, or ``fallback`` if unusable."""
    if probe_store(primary):
        return primary
    msg = "Primary storage is not available. Falling back to session storage."
    if events is not None:
        events.warning("storage_fallback", msg, primary=type(primary).__name__)
    else:
        logger.warning(msg)
    return fallback


class SaveOutcome(str, Enum):
    OK = "ok"
    QUOTA_EXCEEDED = "quota_exceeded"
    FAILED = "failed"

    @property
    def message(self) -> str | None:
        return SAVE_MESSAGES.get(self)


SAVE_MESSAGES = {
    SaveOutcome.QUOTA_EXCEEDED: "Storage quota exceeded. Please delete some contacts to free up space.",
    SaveOutcome.FAILED: "Failed to save contacts. Your changes might not persist.",
}


def serialize_contacts(contacts: Sequence[Contact]) -> str:
    return json.dumps([c.to_dict() for c in contacts], ensure_ascii=False)


class ContactRepository:
    """Loads and saves the collection under a single storage key."""

    def __init__(
        self,
        store: KeyValueStore,
        key: str = STORAGE_KEY,
        *,
        events: EventLog | None = None,
    ) -> None:
        self.store = store
        self.key = key
        self.events = events if events is not None else EventLog()

    def _parse(self, raw: str | None) -> list[Any] | None:
        if raw is None or raw.strip() in ("", "null", "undefined"):
            self.events.info("load_no_data", "No existing data found. Starting with an empty list.")
            return None

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            self.events.error(
                "load_corrupt_json",
                "Stored data is corrupted. Starting with an empty list.",
                error=str(exc),
            )
            return None

        if not isinstance(data, list):
            self.events.warning(
                "load_not_array",
                "Stored data is not an array. Starting with an empty list.",
                payload_type=type(data).__name__,
            )
            return None
        return data

    def load(self) -> list[Contact]:
        try:
            raw = self.store.get_item(self.key)
        except Exception as exc:  # noqa: BLE001
            self.events.error("load_failed", "Unexpected error reading stored contacts.", error=repr(exc))
            return []

        data = self._parse(raw)
        if data is None:
            return []

        contacts: list[Contact] = []
        seen_ids: set[str] = set()
        dropped = 0
        for index, item in enumerate(data):
            try:
                result = migrate(item)
            except MigrationError as exc:
                self.events.warning("record_dropped", f"Failed to migrate contact at index {index}.", index=index, errors=[str(exc)])
                dropped += 1
                continue

            if isinstance(result, UnknownVersion):
                self.events.warning(
                    "unknown_schema_version",
                    f"Unknown contact version: {result.version!r}",
                    index=index,
                    version=result.version,
                )

            contact = result.contact
            errors = contact.validate()
            if not errors and contact.id in seen_ids:
                errors = ["duplicate id"]
            if errors:
                self.events.warning("record_dropped", f"Invalid contact at index {index}.", index=index, errors=errors)
                dropped += 1
                continue

            seen_ids.add(contact.id)
            contacts.append(contact)

        if dropped:
            self.events.warning("records_skipped", f"{dropped} invalid contacts were found and skipped.", count=dropped)
        self.events.info("load_complete", f"Loaded {len(contacts)} contacts from storage.", count=len(contacts))
        return contacts

    def save(self, contacts: Sequence[Contact]) -> SaveOutcome:
        try:
            self.store.set_item(self.key, serialize_contacts(contacts))
        except StorageQuotaExceeded as exc:
            self.events.error("save_failed", SaveOutcome.QUOTA_EXCEEDED.message, reason="quota", error=str(exc))
            return SaveOutcome.QUOTA_EXCEEDED
        except Exception as exc:  # noqa: BLE001
            self.events.error("save_failed", SaveOutcome.FAILED.message, reason="other", error=repr(exc))
            return SaveOutcome.FAILED
        return SaveOutcome.OK
