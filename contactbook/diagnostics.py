"""Storage diagnostics for the contact book.

Every load/save problem (corrupt payload, dropped record, failed write,
fallback to the in-memory store) becomes an event. Events are forwarded to
``logging``, kept in a small in-memory buffer and, when a path is configured,
appended to a JSONL journal that the diagnostics panel reads back so problems
from earlier sessions stay visible.

No Streamlit imports here.
"""

from __future__ import annotations

import json
import logging
import os
from collections import deque
from dataclasses import asdict, is_dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any

from contactbook.config import EVENTS_DIR

logger = logging.getLogger(__name__)

MAX_RECENT_EVENTS = 200
HISTORY_EVENTS = 50


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def default_events_path() -> Path:
    return Path(EVENTS_DIR) / "diagnostics.jsonl"


def json_friendly(obj: Any) -> Any:
    """Reduce an event field to something ``json.dumps`` accepts.

    Enums collapse to their value (``SaveOutcome`` lands as its string),
    naive datetimes are read as UTC, containers recurse, and anything else
    falls back to ``str``.
    """
    if obj is None or isinstance(obj, (str, int, float, bool)):
        return obj
    if isinstance(obj, Enum):
        return json_friendly(obj.value)
    if isinstance(obj, datetime):
        when = obj if obj.tzinfo else obj.replace(tzinfo=timezone.utc)
        return when.astimezone(timezone.utc).isoformat()
    if isinstance(obj, Path):
        return str(obj)
    if is_dataclass(obj) and not isinstance(obj, type):
        return json_friendly(asdict(obj))
    if isinstance(obj, dict):
        return {str(k): json_friendly(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple, set)):
        return [json_friendly(v) for v in obj]
    return str(obj)


def append_event(path: Path, event: dict[str, Any]) -> None:
    """Write ``event`` as one journal line, stamping ``ts_utc`` if absent."""
    record = {"ts_utc": _utc_now_iso(), **event}
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("a", encoding="utf-8", newline="\n") as f:
        f.write(json.dumps(json_friendly(record), ensure_ascii=False) + "\n")
        f.flush()
        try:
            os.fsync(f.fileno())
        except OSError:
            # fsync is unsupported on some filesystems.
            pass


def read_events(path: Path, *, max_events: int | None = None) -> list[dict[str, Any]]:
    """Return journal events oldest first, at most the last ``max_events``.

    A missing journal is empty. Lines that are blank, truncated by a crash
    mid-write, or not JSON objects are skipped.
    """
    if not path.exists():
        return []

    tail: deque[dict[str, Any]] = deque(maxlen=max_events)
    with path.open("r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line:
                continue
            try:
                event = json.loads(line)
            except json.JSONDecodeError:
                continue
            if isinstance(event, dict):
                tail.append(event)
    return list(tail)


class EventLog:
    """Diagnostics sink shared by the repository and the controller.

    Events are kept in a bounded in-memory buffer, forwarded to ``logging``
    and, when ``path`` is set, appended to a JSONL journal. A journal write
    failure is logged and otherwise ignored.
    """

    def __init__(self, path: Path | None = None, *, max_recent: int = MAX_RECENT_EVENTS) -> None:
        self.path = path
        self._recent: deque[dict[str, Any]] = deque(maxlen=max_recent)

    def emit(self, event_type: str, message: str, *, level: int = logging.INFO, **fields: Any) -> dict[str, Any]:
        event = {
            "type": event_type,
            "level": logging.getLevelName(level),
            "message": message,
            "ts_utc": _utc_now_iso(),
            **fields,
        }
        event = json_friendly(event)
        self._recent.append(event)
        logger.log(level, "%s: %s", event_type, message)

        if self.path is not None:
            try:
                append_event(self.path, event)
            except OSError as exc:
                logger.warning("Could not write diagnostics journal %s: %s", self.path, exc)
        return event

    def info(self, event_type: str, message: str, **fields: Any) -> dict[str, Any]:
        return self.emit(event_type, message, level=logging.INFO, **fields)

    def warning(self, event_type: str, message: str, **fields: Any) -> dict[str, Any]:
        return self.emit(event_type, message, level=logging.WARNING, **fields)

    def error(self, event_type: str, message: str, **fields: Any) -> dict[str, Any]:
        return self.emit(event_type, message, level=logging.ERROR, **fields)

    @property
    def recent(self) -> list[dict[str, Any]]:
        return list(self._recent)

    def of_type(self, event_type: str) -> list[dict[str, Any]]:
        return [e for e in self._recent if e.get("type") == event_type]

    def history(self, limit: int = HISTORY_EVENTS) -> list[dict[str, Any]]:
        """Latest events, read back from the journal when there is one."""
        if self.path is not None:
            try:
                return read_events(self.path, max_events=limit)
            except OSError as exc:
                logger.warning("Could not read diagnostics journal %s: %s", self.path, exc)
        return self.recent[-limit:]
