from __future__ import annotations

from typing import Any, MutableMapping

from contactbook.controller import ContactManager, delete_prompt
from contactbook.core.pagination import EMPTY_MESSAGE
from contactbook.ui import components
from contactbook.ui.state import EMAIL_INPUT_KEY, NAME_INPUT_KEY


def _clear_inputs(session: MutableMapping[str, Any]) -> None:
    session[NAME_INPUT_KEY] = ""
    session[EMAIL_INPUT_KEY] = ""


def handle_submit(manager: ContactManager, session: MutableMapping[str, Any]) -> None:
    contact = manager.submit(session.get(NAME_INPUT_KEY), session.get(EMAIL_INPUT_KEY))
    if contact is not None or not manager.state.is_editing:
        # Successful create/update, or an edit target that vanished.
        if not manager.state.form_errors:
            _clear_inputs(session)


def handle_reset(manager: ContactManager, session: MutableMapping[str, Any]) -> None:
    manager.reset_form()
    _clear_inputs(session)


def handle_edit(
    manager: ContactManager,
    session: MutableMapping[str, Any],
    ui_state: MutableMapping[str, Any],
    contact_id: str,
) -> None:
    ui_state["pending_delete_id"] = None
    contact = manager.edit(contact_id)
    if contact is not None:
        session[NAME_INPUT_KEY] = contact.name
        session[EMAIL_INPUT_KEY] = contact.email


def handle_delete_request(ui_state: MutableMapping[str, Any], contact_id: str) -> None:
    ui_state["pending_delete_id"] = contact_id


def handle_delete_confirm(
    manager: ContactManager,
    session: MutableMapping[str, Any],
    ui_state: MutableMapping[str, Any],
) -> None:
    contact_id = ui_state.get("pending_delete_id")
    if contact_id is None:
        return
    was_editing = manager.state.editing_id == contact_id
    removed = manager.delete(contact_id)
    ui_state["pending_delete_id"] = None
    if removed and was_editing:
        _clear_inputs(session)


def handle_delete_cancel(ui_state: MutableMapping[str, Any]) -> None:
    ui_state["pending_delete_id"] = None


def render_contacts_tab(*, st, manager: ContactManager, get_ui_state) -> None:
    ui_state = get_ui_state()
    session = st.session_state
    state = manager.state

    session.setdefault(NAME_INPUT_KEY, "")
    session.setdefault(EMAIL_INPUT_KEY, "")

    # ------------------------------------------------------------------
    # Form
    # ------------------------------------------------------------------
    st.subheader(state.form_heading)

    components.render_flash(st, state.flash)
    if state.flash is not None and state.flash.kind == "success":
        # Success messages show once.
        manager.dismiss_flash()

    st.text_input(
        "Name",
        key=NAME_INPUT_KEY,
        on_change=lambda: manager.check_field("name", session.get(NAME_INPUT_KEY)),
    )
    components.render_field_error(st, state.form_errors, "name")

    st.text_input(
        "Email",
        key=EMAIL_INPUT_KEY,
        on_change=lambda: manager.check_field("email", session.get(EMAIL_INPUT_KEY)),
    )
    components.render_field_error(st, state.form_errors, "email")

    submit_col, reset_col, _ = st.columns([1, 1, 4])
    with submit_col:
        st.button(
            state.submit_label,
            key="submit_contact",
            type="primary",
            on_click=handle_submit,
            args=(manager, session),
        )
    with reset_col:
        st.button(
            "Cancel" if state.is_editing else "Reset",
            key="reset_contact",
            on_click=handle_reset,
            args=(manager, session),
        )

    st.divider()

    # ------------------------------------------------------------------
    # List
    # ------------------------------------------------------------------
    st.subheader("Contacts")
    view = manager.view()

    if view.is_empty:
        st.info(EMPTY_MESSAGE)
        return

    pending_id = ui_state.get("pending_delete_id")
    if pending_id is not None:
        components.render_delete_confirmation(
            st,
            delete_prompt(manager.get(pending_id)),
            on_confirm=lambda: handle_delete_confirm(manager, session, ui_state),
            on_cancel=lambda: handle_delete_cancel(ui_state),
        )

    for contact in view.items:
        components.render_contact_card(
            st,
            contact,
            on_edit=lambda cid: handle_edit(manager, session, ui_state, cid),
            on_delete=lambda cid: handle_delete_request(ui_state, cid),
            disabled=pending_id is not None,
        )

    components.render_pagination(st, view, on_page=manager.go_to_page)
