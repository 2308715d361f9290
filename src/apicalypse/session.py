"""Shared requests session for the Apicalypse client."""

from __future__ import annotations

import threading

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

# Retries are driven by ``ApicalypseClient`` from ``ClientConfig.retries``;
# the transport never retries and always hands status codes back.
TRANSPORT_RETRY = Retry(total=0, status_forcelist=None, raise_on_status=False)

_SESSION: requests.Session | None = None
_LOCK = threading.Lock()


def create_session(pool_maxsize: int = 10) -> requests.Session:
    """Create a session whose adapters leave retrying and status handling to the caller."""

    session = requests.Session()
    adapter = HTTPAdapter(max_retries=TRANSPORT_RETRY, pool_maxsize=pool_maxsize)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    return session


def get_shared_session() -> requests.Session:
    """Return the process-wide session, creating it on first use."""
    global _SESSION
    if _SESSION is None:
        with _LOCK:
            if _SESSION is None:
                _SESSION = create_session()
    return _SESSION


def reset_shared_session() -> None:
    """Close and forget the shared session. Used by the tests."""

    global _SESSION
    with _LOCK:
        if _SESSION is not None:
            _SESSION.close()
        _SESSION = None


__all__ = ["TRANSPORT_RETRY", "create_session", "get_shared_session", "reset_shared_session"]
