from __future__ import annotations

import itertools

from contactbook.controller import ContactManager
from contactbook.storage import ContactRepository, MemoryStore
from contactbook.ui.page_modules import contacts_page
from contactbook.ui.state import EMAIL_INPUT_KEY, NAME_INPUT_KEY


def _setup():
    ui_state = {"view": None, "pending_delete_id": None}

    def confirm(contact):
        ok = ui_state.get("pending_delete_id") == contact.id
        ui_state["pending_delete_id"] = None
        return ok

    counter = itertools.count(1)
    manager = ContactManager(
        ContactRepository(MemoryStore()),
        confirm=confirm,
        id_factory=lambda: f"c{next(counter)}",
    )
    manager.start()
    return manager, {NAME_INPUT_KEY: "", EMAIL_INPUT_KEY: ""}, ui_state


def test_submit_creates_and_clears_inputs():
    manager, session, _ = _setup()
    session.update({NAME_INPUT_KEY: " Ada Lovelace ", EMAIL_INPUT_KEY: "ada@example.com"})

    contacts_page.handle_submit(manager, session)

    assert [c.name for c in manager.contacts] == ["Ada Lovelace"]
    assert session == {NAME_INPUT_KEY: "", EMAIL_INPUT_KEY: ""}


def test_invalid_submit_keeps_inputs():
    manager, session, _ = _setup()
    session.update({NAME_INPUT_KEY: "", EMAIL_INPUT_KEY: "invalid-email"})

    contacts_page.handle_submit(manager, session)

    assert manager.contacts == []
    assert session[EMAIL_INPUT_KEY] == "invalid-email"
    assert set(manager.state.form_errors) == {"name", "email"}


def test_edit_prefills_inputs_and_submit_updates():
    manager, session, ui_state = _setup()
    contact = manager.create("Ada", "ada@example.com")

    contacts_page.handle_edit(manager, session, ui_state, contact.id)
    assert session == {NAME_INPUT_KEY: "Ada", EMAIL_INPUT_KEY: "ada@example.com"}

    session[NAME_INPUT_KEY] = "Ada King"
    contacts_page.handle_submit(manager, session)

    assert contact.name == "Ada King"
    assert not manager.state.is_editing
    assert session[NAME_INPUT_KEY] == ""


def test_delete_needs_confirmation_step():
    manager, session, ui_state = _setup()
    contact = manager.create("Ada", "ada@example.com")

    # Confirm without a pending request does nothing.
    contacts_page.handle_delete_confirm(manager, session, ui_state)
    assert manager.contacts == [contact]

    contacts_page.handle_delete_request(ui_state, contact.id)
    contacts_page.handle_delete_cancel(ui_state)
    contacts_page.handle_delete_confirm(manager, session, ui_state)
    assert manager.contacts == [contact]

    contacts_page.handle_delete_request(ui_state, contact.id)
    contacts_page.handle_delete_confirm(manager, session, ui_state)
    assert manager.contacts == []
    assert ui_state["pending_delete_id"] is None


def test_deleting_the_edited_contact_clears_inputs():
    manager, session, ui_state = _setup()
    contact = manager.create("Ada", "ada@example.com")
    contacts_page.handle_edit(manager, session, ui_state, contact.id)

    contacts_page.handle_delete_request(ui_state, contact.id)
    contacts_page.handle_delete_confirm(manager, session, ui_state)

    assert session == {NAME_INPUT_KEY: "", EMAIL_INPUT_KEY: ""}
    assert manager.state.form_heading == "Add New Contact"


def test_reset_leaves_edit_mode():
    manager, session, ui_state = _setup()
    contact = manager.create("Ada", "ada@example.com")
    contacts_page.handle_edit(manager, session, ui_state, contact.id)

    contacts_page.handle_reset(manager, session)

    assert not manager.state.is_editing
    assert session[NAME_INPUT_KEY] == ""
