"""UI state management for the Streamlit app.

Provides centralized access to session state and builds the per-session
``ContactManager`` on first use.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import streamlit as st

from contactbook.config import DATA_DIR, QUOTA_BYTES, STORAGE_KEY
from contactbook.controller import AppState, ContactManager
from contactbook.core.contracts import Contact
from contactbook.core.pagination import PageView
from contactbook.diagnostics import EventLog, default_events_path
from contactbook.storage import ContactRepository, FileStore, MemoryStore, select_store

MANAGER_KEY = "contact_manager"

# Widget keys for the contact form.
NAME_INPUT_KEY = "name_input"
EMAIL_INPUT_KEY = "email_input"


def get_ui_state() -> dict[str, Any]:
    """Return the centralized UI state dict, initializing if needed.

    Holds presentation-only values the controller does not own: the last
    rendered view and the id of a delete awaiting confirmation.
    """
    if "ui_state" not in st.session_state:
        st.session_state["ui_state"] = {
            "view": None,
            "pending_delete_id": None,
        }
    return st.session_state["ui_state"]


def _record_view(state: AppState, view: PageView) -> None:
    get_ui_state()["view"] = view


def _confirm_pending_delete(contact: Contact) -> bool:
    ui_state = get_ui_state()
    confirmed = ui_state.get("pending_delete_id") == contact.id
    ui_state["pending_delete_id"] = None
    return confirmed


def build_manager(
    *,
    data_dir: str | Path = DATA_DIR,
    storage_key: str = STORAGE_KEY,
    quota_bytes: int = QUOTA_BYTES,
    events_path: Path | None = None,
) -> ContactManager:
    """Wire store, repository and controller for one browser session."""
    events = EventLog(events_path if events_path is not None else default_events_path())
    store = select_store(
        FileStore(data_dir, quota_bytes=quota_bytes),
        MemoryStore(quota_bytes=quota_bytes),
        events=events,
    )
    repository = ContactRepository(store, storage_key, events=events)
    manager = ContactManager(
        repository,
        render=_record_view,
        confirm=_confirm_pending_delete,
        events=events,
    )
    manager.start()
    return manager


def get_manager() -> ContactManager:
    """Return this session's manager, loading stored contacts on first call."""
    if MANAGER_KEY not in st.session_state:
        st.session_state[MANAGER_KEY] = build_manager()
    return st.session_state[MANAGER_KEY]
