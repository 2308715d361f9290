"""Render filter sets into Apicalypse query strings."""

from __future__ import annotations

from collections.abc import Mapping
from urllib.parse import quote

# Characters left unescaped in a URL path segment besides the unreserved set.
PATH_SAFE = "$&+:=@"


def render(filters: Mapping[str, str]) -> str:
    """Return ``filters`` as a query string such as ``"fields name; limit 5; "``."""

    if not filters:
        return ""
    return "".join(f"{key} {value}; " for key, value in filters.items())


def encode(filters: Mapping[str, str]) -> str:
    """Return the rendered query escaped for use in a URL path."""

    return quote(render(filters), safe=PATH_SAFE)


__all__ = ["PATH_SAFE", "encode", "render"]
