"""Structured logging configuration for the Apicalypse client."""

from __future__ import annotations

import logging
import sys
from collections.abc import Mapping
from typing import Any

import structlog
from structlog.stdlib import BoundLogger

LOGGER_NAME = "apicalypse"

_LOGGING_CONFIGURED = False

# Library output stays silent until the application configures logging.
logging.getLogger(LOGGER_NAME).addHandler(logging.NullHandler())

SENSITIVE_KEYS = (
    "authorization",
    "client-id",
    "client_id",
    "api_key",
    "token",
    "password",
    "secret",
    "bearer",
)


def redact_secrets(value: Any) -> Any:
    """Return ``value`` with the string values of credential-like keys masked.

    Mappings are walked recursively; anything else is returned unchanged.
    """
    if isinstance(value, Mapping):
        redacted: dict[str, Any] = {}
        for key, item in value.items():
            if isinstance(item, str) and any(marker in str(key).lower() for marker in SENSITIVE_KEYS):
                redacted[key] = "[REDACTED]"
            else:
                redacted[key] = redact_secrets(item)
        return redacted
    return value


def _redact_secrets_processor(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Remove credentials from the structlog event dictionary."""
    return redact_secrets(event_dict)


def configure_logging(level: str = "INFO", console_format: str = "text") -> BoundLogger:
    """Configure stdlib logging and structlog.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        console_format: ``text`` for human readable output, ``json`` for JSON lines

    Returns:
        Configured structlog logger
    """
    global _LOGGING_CONFIGURED

    if _LOGGING_CONFIGURED:
        return structlog.get_logger()

    numeric_level = getattr(logging, level.upper(), logging.INFO)
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(numeric_level)
    logging.basicConfig(level=numeric_level, handlers=[handler], format="%(message)s", force=True)

    renderer: Any
    if console_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            _redact_secrets_processor,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    _LOGGING_CONFIGURED = True
    return structlog.get_logger()


def get_logger(name: str, **initial_values: Any) -> BoundLogger:
    """Return a structlog logger bound to ``initial_values``.

    Events go to the stdlib logger ``apicalypse.<name>``, so nothing is
    emitted before :func:`configure_logging` (or the host application) sets
    up handlers.
    """
    if name != LOGGER_NAME and not name.startswith(f"{LOGGER_NAME}."):
        name = f"{LOGGER_NAME}.{name}"
    return structlog.wrap_logger(logging.getLogger(name)).bind(**initial_values)


def reset_logging() -> None:
    """Allow :func:`configure_logging` to run again. Intended for tests."""
    global _LOGGING_CONFIGURED
    _LOGGING_CONFIGURED = False
    structlog.reset_defaults()


__all__ = [
    "LOGGER_NAME",
    "SENSITIVE_KEYS",
    "configure_logging",
    "get_logger",
    "redact_secrets",
    "reset_logging",
]
