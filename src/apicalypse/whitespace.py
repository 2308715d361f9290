"""Whitespace helpers used to validate and normalise option arguments."""

from __future__ import annotations

# Space, tab, line feed, carriage return and form feed.
WHITESPACE = " \t\n\r\f"

_REMOVE_TABLE = str.maketrans("", "", WHITESPACE)


def is_blank(value: str | None) -> bool:
    """Return ``True`` when ``value`` is empty or contains only whitespace."""

    if not value:
        return True
    return all(char in WHITESPACE for char in value)


def remove_whitespace(value: str) -> str:
    """Strip every whitespace character from ``value``, not just the ends."""

    return value.translate(_REMOVE_TABLE)


__all__ = ["WHITESPACE", "is_blank", "remove_whitespace"]
