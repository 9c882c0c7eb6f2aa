"""Text formatting helpers."""

from __future__ import annotations

import re
from html import escape as _escape
from html import unescape

NBSP = "\xa0"


def escape(text: str) -> str:
    """Escape &, <, >, " and ' for use in markup text and attribute values."""
    return _escape(text, quote=True)


def normalize_spaces(text: str) -> str:
    """Replace non-breaking spaces with plain spaces."""
    return text.replace(NBSP, " ")


def clean_html(html: str) -> str:
    """Strip HTML tags and decode entities."""
    text = re.sub(r"<[^>]+>", "", html)
    return unescape(text).strip()


def truncate(text: str, max_length: int = 300, suffix: str = "...") -> str:
    """Truncate text to max_length, breaking at word boundary."""
    if len(text) <= max_length:
        return text
    truncated = text[: max_length - len(suffix)]
    # Break at last space
    last_space = truncated.rfind(" ")
    if last_space > max_length // 2:
        truncated = truncated[:last_space]
    return truncated + suffix
