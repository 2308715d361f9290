"""Build HTTP requests carrying Apicalypse queries."""

from __future__ import annotations

from collections.abc import Mapping

import requests

from apicalypse.errors import BlankArgumentError
from apicalypse.filters import FuncOption, new_filters
from apicalypse.serializer import encode, render
from apicalypse.whitespace import is_blank

DEFAULT_METHOD = "GET"


def build_request(
    method: str,
    url: str,
    *options: FuncOption,
    in_url: bool = False,
    headers: Mapping[str, str] | None = None,
) -> requests.Request:
    """Return an unprepared request for ``url`` carrying the query built from ``options``.

    The query travels as the UTF-8 encoded request body, or appended to the
    URL after a ``?`` when ``in_url`` is set. An empty query adds nothing.
    """

    if is_blank(url):
        raise BlankArgumentError("request url is blank or empty")
    if is_blank(method):
        method = DEFAULT_METHOD

    filters = new_filters(*options)
    body: bytes | None = None
    if in_url:
        query = encode(filters)
        if query:
            url = f"{url}?{query}"
    else:
        rendered = render(filters)
        if rendered:
            body = rendered.encode("utf-8")

    return requests.Request(method, url, headers=dict(headers or {}), data=body)


def new_request(method: str, url: str, *options: FuncOption) -> requests.PreparedRequest:
    """Return a prepared request with the query as its body."""

    return build_request(method, url, *options).prepare()


def new_url_request(method: str, url: str, *options: FuncOption) -> requests.PreparedRequest:
    """Return a prepared request with the URL-escaped query appended to the URL."""

    return build_request(method, url, *options, in_url=True).prepare()


__all__ = ["DEFAULT_METHOD", "build_request", "new_request", "new_url_request"]
