# contactbook/config.py

import os
from dataclasses import dataclass, field

# --- Base paths ---
# Project root can be overridden if needed (e.g. for tests or deployment)
BASE_DIR = os.path.abspath(
    os.getenv("CONTACTBOOK_BASE_DIR", os.path.join(os.path.dirname(__file__), ".."))
)


# ---------------------------
# Structured configuration
# ---------------------------

@dataclass(frozen=True)
class PathsConfig:
    """Filesystem configuration.

    Values can be overridden via environment variables:
    - CONTACTBOOK_DATA_DIR
    - CONTACTBOOK_EVENTS_DIR
    """

    data_dir: str = field(
        default_factory=lambda: os.getenv(
            "CONTACTBOOK_DATA_DIR", os.path.join(BASE_DIR, "data")
        )
    )
    events_dir: str = field(
        default_factory=lambda: os.getenv(
            "CONTACTBOOK_EVENTS_DIR", os.path.join(BASE_DIR, "ui_state")
        )
    )


@dataclass(frozen=True)
class StorageConfig:
    """Key/value storage settings.

    The quota mirrors the ~5 MiB budget browsers grant local storage.
    """

    storage_key: str = field(
        default_factory=lambda: os.getenv("CONTACTBOOK_STORAGE_KEY", "contacts")
    )
    quota_bytes: int = field(
        default_factory=lambda: int(os.getenv("CONTACTBOOK_QUOTA_BYTES", str(5 * 1024 * 1024)))
    )
    probe_key: str = "testStorageAvailability"


@dataclass(frozen=True)
class ContactRulesConfig:
    """Field limits and schema version for contact records."""

    name_max_length: int = 100
    email_max_length: int = 254
    schema_version: int = 1


@dataclass(frozen=True)
class ListConfig:
    """Contact list presentation settings."""

    page_size: int = field(
        default_factory=lambda: int(os.getenv("CONTACTBOOK_PAGE_SIZE", "5"))
    )
    max_visible_pages: int = 5


# Instantiate default configs
PATHS = PathsConfig()
STORAGE = StorageConfig()
RULES = ContactRulesConfig()
LIST = ListConfig()


# --- Module-level aliases ---
DATA_DIR = PATHS.data_dir
EVENTS_DIR = PATHS.events_dir

STORAGE_KEY = STORAGE.storage_key
QUOTA_BYTES = STORAGE.quota_bytes
PROBE_KEY = STORAGE.probe_key

NAME_MAX_LENGTH = RULES.name_max_length
EMAIL_MAX_LENGTH = RULES.email_max_length
SCHEMA_VERSION = RULES.schema_version

PAGE_SIZE = LIST.page_size
MAX_VISIBLE_PAGES = LIST.max_visible_pages
