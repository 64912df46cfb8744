"""Reusable Streamlit components for the contact book.

Design principles:
- Components take ``st`` as their first argument and hold no state of their own
- Actions are wired through ``on_click`` callbacks so they run before the rerun
- Every user-supplied value interpolated into HTML is escaped
"""

from __future__ import annotations

from typing import Any, Callable

from contactbook.core.contracts import Contact
from contactbook.core.pagination import PageView, page_window
from contactbook.ui.formatting import escape_html, format_date


# =============================================================================
# THEME & STYLING
# =============================================================================

def inject_custom_css(st) -> None:
    """Inject custom CSS for the contact cards and pagination strip."""
    st.markdown("""
    <style>
        :root {
            --primary-color: #667eea;
            --danger-color: #f56565;
            --neutral-color: #718096;
            --card-shadow: 0 4px 6px -1px rgba(0, 0, 0, 0.1), 0 2px 4px -1px rgba(0, 0, 0, 0.06);
        }

        .contact-item {
            padding: 0.75rem 1rem;
            border-radius: 0.5rem;
            border-left: 4px solid var(--primary-color);
            box-shadow: var(--card-shadow);
            margin-bottom: 0.5rem;
        }
        .contact-name { font-size: 1.1rem; font-weight: 600; margin: 0; }
        .contact-email { margin: 0.1rem 0; }
        .contact-meta { font-size: 0.8rem; color: var(--neutral-color); margin: 0; }

        .pagination-info {
            font-size: 0.875rem;
            color: var(--neutral-color);
            text-align: center;
            margin-top: 0.5rem;
        }
        .pagination-ellipsis { color: var(--neutral-color); text-align: center; }
    </style>
    """, unsafe_allow_html=True)


# =============================================================================
# FORM MESSAGES
# =============================================================================

def render_flash(st, flash: Any) -> None:
    """Render a form-level success or error message.

    Args:
        st: Streamlit module
        flash: ``Flash`` with ``kind`` and ``text``, or None
    """
    if flash is None:
        return
    if flash.kind == "success":
        st.success(flash.text)
    else:
        st.error(flash.text)


def render_field_error(st, errors: dict[str, str], field_name: str) -> None:
    message = errors.get(field_name)
    if message:
        st.caption(f":red[{message}]")


# =============================================================================
# CONTACT LIST
# =============================================================================

def render_contact_card(
    st,
    contact: Contact,
    *,
    on_edit: Callable[[str], None],
    on_delete: Callable[[str], None],
    disabled: bool = False,
) -> None:
    """Render one contact with its Edit/Delete buttons.

    Args:
        st: Streamlit module
        contact: Contact to show
        on_edit: Callback taking the contact id
        on_delete: Callback taking the contact id
        disabled: Disable both buttons (e.g. while a delete is pending)
    """
    info_col, edit_col, delete_col = st.columns([6, 1, 1])
    with info_col:
        st.markdown(f"""
        <div class="contact-item" data-testid="contact-item" data-contact-id="{escape_html(contact.id)}">
            <p class="contact-name">{escape_html(contact.name)}</p>
            <p class="contact-email">{escape_html(contact.email)}</p>
            <p class="contact-meta">Updated: {escape_html(format_date(contact.updated_at))}</p>
        </div>
        """, unsafe_allow_html=True)
    with edit_col:
        st.button(
            "Edit",
            key=f"edit_{contact.id}",
            help=f"Edit {contact.name}",
            on_click=on_edit,
            args=(contact.id,),
            disabled=disabled,
        )
    with delete_col:
        st.button(
            "Delete",
            key=f"delete_{contact.id}",
            help=f"Delete {contact.name}",
            on_click=on_delete,
            args=(contact.id,),
            disabled=disabled,
        )


def render_delete_confirmation(
    st,
    prompt: str,
    *,
    on_confirm: Callable[[], None],
    on_cancel: Callable[[], None],
) -> None:
    """Render the yes/no step shown before a delete goes ahead."""
    st.warning(prompt)
    yes_col, no_col, _ = st.columns([1, 1, 4])
    with yes_col:
        st.button("Delete", key="confirm_delete", type="primary", on_click=on_confirm)
    with no_col:
        st.button("Cancel", key="cancel_delete", on_click=on_cancel)


def render_pagination(st, view: PageView, *, on_page: Callable[[int], None]) -> None:
    """Render Previous / numbered pages / Next plus the range summary.

    Nothing is drawn when everything fits on one page.
    """
    if not view.show_controls:
        return

    window = page_window(view.page, view.total_pages)
    cols = st.columns(len(window) + 2)

    with cols[0]:
        st.button(
            "‹ Previous",
            key="page_prev",
            disabled=not view.has_previous,
            on_click=on_page,
            args=(view.page - 1,),
        )

    for col, number in zip(cols[1:-1], window):
        with col:
            if number is None:
                st.markdown('<div class="pagination-ellipsis">...</div>', unsafe_allow_html=True)
            else:
                st.button(
                    str(number),
                    key=f"page_{number}",
                    type="primary" if number == view.page else "secondary",
                    help=f"Go to page {number}",
                    on_click=on_page,
                    args=(number,),
                )

    with cols[-1]:
        st.button(
            "Next ›",
            key="page_next",
            disabled=not view.has_next,
            on_click=on_page,
            args=(view.page + 1,),
        )

    st.markdown(
        f'<div class="pagination-info" data-testid="pagination-info">{escape_html(view.info_text)}</div>',
        unsafe_allow_html=True,
    )


def render_diagnostics(st, events: list[dict[str, Any]]) -> None:
    """Show recent storage warnings/errors in a collapsed panel."""
    problems = [e for e in events if e.get("level") in ("WARNING", "ERROR")]
    if not problems:
        return
    with st.expander(f"Storage diagnostics ({len(problems)})", expanded=False):
        for e in problems:
            st.write(f"`{e.get('type')}` {e.get('message')}")
