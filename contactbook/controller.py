"""Application controller for the contact book.

``ContactManager`` owns the only in-memory collection and runs every user
action to completion: validate, mutate, persist, re-page, render. The
presentation layer plugs in through two callables:

- ``render(state, view)`` is invoked after every state change.
- ``confirm(contact)`` is asked before a delete goes ahead.

Nothing here imports Streamlit, so the whole flow runs under plain pytest.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Literal

from contactbook.config import PAGE_SIZE
from contactbook.core import pagination
from contactbook.core.contracts import Contact, ValidationError, generate_id, utc_now
from contactbook.core.pagination import PageView
from contactbook.core.validation import validate_email, validate_form, validate_name
from contactbook.diagnostics import EventLog
from contactbook.storage import ContactRepository, SaveOutcome

ADDED = "Contact added successfully!"
UPDATED = "Contact updated successfully!"
DELETED = "Contact deleted successfully!"
UPDATE_NOT_FOUND = "Failed to update contact. It no longer exists."
DELETE_NOT_FOUND = "Failed to delete contact. Please try again."

RenderFn = Callable[["AppState", PageView], None]
ConfirmFn = Callable[[Contact], bool]

_FIELD_CHECKS = {"name": validate_name, "email": validate_email}


@dataclass(frozen=True)
class Flash:
    kind: Literal["success", "error"]
    text: str


@dataclass
class AppState:
    contacts: list[Contact] = field(default_factory=list)
    editing_id: str | None = None
    current_page: int = 1
    page_size: int = PAGE_SIZE
    form_errors: dict[str, str] = field(default_factory=dict)
    flash: Flash | None = None
    loaded: bool = False

    @property
    def is_editing(self) -> bool:
        return self.editing_id is not None

    @property
    def form_heading(self) -> str:
        return "Edit Contact" if self.is_editing else "Add New Contact"

    @property
    def submit_label(self) -> str:
        return "Save Changes" if self.is_editing else "Add Contact"


def delete_prompt(contact: Contact | None) -> str:
    name = contact.name if contact is not None else "this contact"
    return f'Are you sure you want to delete "{name}"?'


def _no_render(state: AppState, view: PageView) -> None:
    return None


def _always_confirm(contact: Contact) -> bool:
    return True


class ContactManager:
    def __init__(
        self,
        repository: ContactRepository,
        *,
        render: RenderFn = _no_render,
        confirm: ConfirmFn = _always_confirm,
        clock: Callable[[], datetime] = utc_now,
        id_factory: Callable[[], str] = generate_id,
        events: EventLog | None = None,
        page_size: int = PAGE_SIZE,
    ) -> None:
        self.repository = repository
        self.render = render
        self.confirm = confirm
        self.clock = clock
        self.id_factory = id_factory
        self.events = events if events is not None else repository.events
        self.state = AppState(page_size=page_size)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def contacts(self) -> list[Contact]:
        """A copy of the collection in insertion order."""
        return list(self.state.contacts)

    def get(self, contact_id: str) -> Contact | None:
        for contact in self.state.contacts:
            if contact.id == contact_id:
                return contact
        return None

    def view(self) -> PageView:
        return pagination.paginate(self.state.contacts, self.state.current_page, self.state.page_size)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _refresh(self) -> PageView:
        view = self.view()
        self.state.current_page = view.page
        self.render(self.state, view)
        return view

    def _persist(self) -> bool:
        outcome = self.repository.save(self.state.contacts)
        if outcome is not SaveOutcome.OK:
            self.state.flash = Flash("error", outcome.message or "Failed to save contacts.")
            return False
        return True

    def _id_in_use(self, contact_id: str) -> bool:
        return self.get(contact_id) is not None

    def _new_id(self) -> str:
        contact_id = self.id_factory()
        while self._id_in_use(contact_id):
            contact_id = self.id_factory()
        return contact_id

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def start(self) -> PageView:
        """Load the stored collection and render the first page."""
        self.state.contacts = self.repository.load()
        self.state.current_page = 1
        self.state.loaded = True
        return self._refresh()

    def submit(self, name: str | None, email: str | None) -> Contact | None:
        """Handle a form submission in add or edit mode."""
        name = (name or "").strip()
        email = (email or "").strip()

        errors = validate_form(name, email)
        self.state.form_errors = errors
        if errors:
            self.state.flash = None
            self._refresh()
            return None

        if self.state.editing_id is not None:
            return self.update(self.state.editing_id, name, email)
        return self.create(name, email)

    def create(self, name: str, email: str) -> Contact | None:
        try:
            contact = Contact.create(name, email, clock=self.clock, id_factory=self._new_id)
        except ValidationError as exc:
            self.events.error("create_rejected", "Contact validation failed.", errors=exc.errors)
            self.state.flash = Flash("error", "Failed to create contact: " + ", ".join(exc.errors))
            self._refresh()
            return None

        self.state.contacts.append(contact)
        self.state.current_page = pagination.page_after_create(len(self.state.contacts), self.state.page_size)
        self._reset_form()
        self.state.flash = Flash("success", ADDED)
        self._persist()
        self.events.info("contact_created", f"Created contact {contact.id}.", id=contact.id)
        self._refresh()
        return contact

    def update(self, contact_id: str, name: str, email: str) -> Contact | None:
        contact = self.get(contact_id)
        if contact is None:
            self.events.warning("update_not_found", f"No contact with id {contact_id}.", id=contact_id)
            self._reset_form()
            self.state.flash = Flash("error", UPDATE_NOT_FOUND)
            self._refresh()
            return None

        try:
            contact.update(name=name, email=email, clock=self.clock)
        except ValidationError as exc:
            self.events.error("update_rejected", "Contact validation failed.", id=contact_id, errors=exc.errors)
            self.state.flash = Flash("error", "Failed to update contact: " + ", ".join(exc.errors))
            self._refresh()
            return None

        self.state.current_page = pagination.page_after_update(self.state.current_page)
        self._reset_form()
        self.state.flash = Flash("success", UPDATED)
        self._persist()
        self.events.info("contact_updated", f"Updated contact {contact.id}.", id=contact.id)
        self._refresh()
        return contact

    def delete(self, contact_id: str) -> bool:
        """Remove a contact after confirmation; returns True if removed."""
        contact = self.get(contact_id)
        if contact is None:
            self.events.warning("delete_not_found", f"No contact with id {contact_id}.", id=contact_id)
            self.state.flash = Flash("error", DELETE_NOT_FOUND)
            self._refresh()
            return False

        if not self.confirm(contact):
            return False

        self.state.contacts = [c for c in self.state.contacts if c.id != contact_id]
        self.state.current_page = pagination.page_after_delete(
            self.state.current_page, len(self.state.contacts), self.state.page_size
        )
        if self.state.editing_id == contact_id:
            self._reset_form()
        self.state.flash = Flash("success", DELETED)
        self._persist()
        self.events.info("contact_deleted", f"Deleted contact {contact_id}.", id=contact_id)
        self._refresh()
        return True

    def edit(self, contact_id: str) -> Contact | None:
        """Enter edit mode for ``contact_id``; the form shows its values."""
        contact = self.get(contact_id)
        if contact is None:
            return None
        self.state.editing_id = contact_id
        self.state.form_errors = {}
        self.state.flash = None
        self._refresh()
        return contact

    def check_field(self, field_name: str, value: str | None, *, strict: bool = False) -> str | None:
        """Validate one form field and record/clear its message.

        The non-strict check (used while typing) leaves blank fields alone.
        """
        checker = _FIELD_CHECKS[field_name]
        error = checker(value, strict=strict)
        if error:
            self.state.form_errors[field_name] = error
        else:
            self.state.form_errors.pop(field_name, None)
        return error

    def _reset_form(self) -> None:
        self.state.editing_id = None
        self.state.form_errors = {}

    def reset_form(self) -> None:
        """Leave edit mode and clear validation messages."""
        self._reset_form()
        self.state.flash = None
        self._refresh()

    def go_to_page(self, page: int) -> PageView:
        self.state.current_page = pagination.go_to_page(
            page, len(self.state.contacts), self.state.current_page, self.state.page_size
        )
        return self._refresh()

    def next_page(self) -> PageView:
        return self.go_to_page(self.state.current_page + 1)

    def previous_page(self) -> PageView:
        return self.go_to_page(self.state.current_page - 1)

    def dismiss_flash(self) -> None:
        self.state.flash = None
