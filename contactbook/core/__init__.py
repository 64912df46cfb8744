"""Core (pure) contact layer.

Validation, the record model, schema migration and pagination. This package
is UI-agnostic and safe to import from:
- the Streamlit page
- the controller
- tests

It should not import Streamlit or touch storage.
"""
