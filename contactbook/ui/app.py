"""Streamlit UI entrypoint.

Sets up the page and delegates rendering to the contacts page module. Run
with ``streamlit run ui/app.py`` from the repository root.
"""

from __future__ import annotations

import logging

import streamlit as st

from contactbook.ui import components
from contactbook.ui.page_modules import contacts_page
from contactbook.ui.state import get_manager, get_ui_state


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    st.set_page_config(page_title="Contact Book", layout="centered")
    components.inject_custom_css(st)
    st.title("Contact Book")

    manager = get_manager()
    contacts_page.render_contacts_tab(st=st, manager=manager, get_ui_state=get_ui_state)
    components.render_diagnostics(st, manager.events.history())


if __name__ == "__main__":
    main()
