"""HTTP client sending Apicalypse queries to a configured API."""

from __future__ import annotations

from collections.abc import Iterator
from functools import partial
from typing import Any

import backoff
import requests
from requests import PreparedRequest, Response

from apicalypse.config import ClientConfig
from apicalypse.errors import ApiClientError
from apicalypse.filters import FuncOption, compose_options, limit, offset
from apicalypse.logging_setup import get_logger, redact_secrets
from apicalypse.request import build_request
from apicalypse.session import get_shared_session


class ApicalypseClient:
    """Send queries built from functional options and decode the JSON results."""

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        session: requests.Session | None = None,
    ) -> None:
        self.config = config or ClientConfig()
        self.session = session or get_shared_session()
        self.logger = get_logger(self.__class__.__name__, base_url=self.config.resolved_base_url)

    def _prepare(self, endpoint: str, options: tuple[FuncOption, ...]) -> PreparedRequest:
        request = build_request(
            self.config.method,
            self.config.url_for(endpoint),
            *options,
            in_url=self.config.body_mode == "url",
            headers=self.config.headers,
        )
        return self.session.prepare_request(request)

    def _send_with_backoff(self, prepared: PreparedRequest) -> Response:
        def _call() -> Response:
            return self.session.send(prepared, timeout=self.config.timeout)

        wait_gen = partial(backoff.expo, factor=self.config.retries.backoff_multiplier)
        sender = backoff.on_exception(
            wait_gen,
            requests.exceptions.RequestException,
            max_tries=self.config.retries.max_tries,
            giveup=lambda exc: isinstance(
                exc, (requests.exceptions.HTTPError, requests.exceptions.RetryError)
            ),
        )(_call)
        return sender()

    def _fetch(self, endpoint: str, options: tuple[FuncOption, ...]) -> Any:
        prepared = self._prepare(endpoint, options)
        body = prepared.body.decode("utf-8") if isinstance(prepared.body, bytes) else prepared.body

        self.logger.info(
            "request",
            method=prepared.method,
            url=prepared.url,
            query=body,
            headers=redact_secrets(prepared.headers),
        )

        try:
            response = self._send_with_backoff(prepared)
        except requests.exceptions.RequestException as exc:
            self.logger.error("transport_error", error=str(exc))
            raise ApiClientError(str(exc), url=prepared.url) from exc

        if not 200 <= response.status_code < 300:
            self.logger.warning(
                "unexpected_status",
                status_code=response.status_code,
                text=response.text,
            )
            raise ApiClientError(
                f"unexpected status code {response.status_code}",
                status_code=response.status_code,
                url=prepared.url,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            self.logger.error("invalid_json", error=str(exc))
            raise ApiClientError("response was not valid JSON", url=prepared.url) from exc

        self.logger.info("response", status_code=response.status_code)
        return payload

    def query(self, endpoint: str, *options: FuncOption) -> list[dict[str, Any]]:
        """Run a query against ``endpoint`` and return the decoded records."""

        payload = self._fetch(endpoint, options)
        if isinstance(payload, dict):
            return [payload]
        if isinstance(payload, list) and all(isinstance(item, dict) for item in payload):
            return payload
        raise ApiClientError("expected a JSON object or an array of objects")

    def count(self, endpoint: str, *options: FuncOption) -> int:
        """Return the number of records matching the query on ``endpoint``."""

        payload = self._fetch(f"{endpoint.rstrip('/')}/count", options)
        if not isinstance(payload, dict) or not isinstance(payload.get("count"), int):
            raise ApiClientError("expected a JSON object with an integer 'count'")
        return payload["count"]

    def paginate(
        self,
        endpoint: str,
        *options: FuncOption,
        page_size: int | None = None,
        max_pages: int | None = None,
    ) -> Iterator[dict[str, Any]]:
        """Iterate over records from ``endpoint`` page by page using limit and offset.

        Any ``limit`` or ``offset`` among ``options`` is overridden. Iteration
        stops at the first page shorter than ``page_size`` or after
        ``max_pages`` pages. ``page_size`` is checked when this is called, no
        request is sent until the iterator is consumed.
        """

        size = page_size if page_size is not None else self.config.page_size
        if size < 1:
            raise ValueError("page_size must be a positive integer")
        return self._iter_pages(endpoint, compose_options(*options), size, max_pages)

    def _iter_pages(
        self,
        endpoint: str,
        base: FuncOption,
        size: int,
        max_pages: int | None,
    ) -> Iterator[dict[str, Any]]:
        page = 0
        while max_pages is None or page < max_pages:
            records = self.query(endpoint, base, limit(size), offset(page * size))
            self.logger.debug("page", page=page, records=len(records))
            yield from records
            if len(records) < size:
                return
            page += 1


__all__ = ["ApicalypseClient"]
