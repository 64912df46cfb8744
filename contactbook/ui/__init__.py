"""Thin Streamlit UI layer.

Pages here:
- collect form inputs
- forward actions to the ContactManager through on_click callbacks
- render the current page of contacts

Business logic lives in contactbook.core and contactbook.controller.
"""
