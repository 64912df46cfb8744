"""Single-page contact book backed by a JSON key/value store."""

__version__ = "0.1.0"
