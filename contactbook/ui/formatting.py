"""Formatting helpers for UI display."""

from __future__ import annotations

import html

import pandas as pd


def format_date(ts: str | None) -> str:
    """Short human date such as ``Jan 5, 2025``; empty string if unparseable."""
    if not ts:
        return ""
    try:
        t = pd.to_datetime(str(ts), utc=True, errors="coerce")
    except (TypeError, ValueError, OverflowError):
        return ""
    if pd.isna(t):
        return ""
    return f"{t.strftime('%b')} {t.day}, {t.year}"


def escape_html(text: str) -> str:
    """Escape ``& < > " '`` for values interpolated into markdown/HTML."""
    return html.escape(str(text), quote=True).replace("&#x27;", "&#039;")
