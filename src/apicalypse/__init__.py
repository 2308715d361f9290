"""Build Apicalypse queries from functional options and send them over HTTP."""
from __future__ import annotations

__version__ = "0.1.0"

from apicalypse.client import ApicalypseClient
from apicalypse.config import ClientConfig, Config, LoggingSettings, RetrySettings
from apicalypse.errors import (
    ApiClientError,
    ApicalypseError,
    BlankArgumentError,
    ConfigError,
    MissingInputError,
    NegativeInputError,
    NilOptionError,
    OptionError,
)
from apicalypse.filters import (
    FilterName,
    FilterSet,
    FuncOption,
    apply_options,
    compose_options,
    exclude,
    fields,
    limit,
    new_filters,
    offset,
    search,
    sort,
    where,
)
from apicalypse.logging_setup import configure_logging, get_logger
from apicalypse.request import build_request, new_request, new_url_request
from apicalypse.serializer import encode, render

__all__ = [
    "ApiClientError",
    "ApicalypseClient",
    "ApicalypseError",
    "BlankArgumentError",
    "ClientConfig",
    "Config",
    "ConfigError",
    "FilterName",
    "FilterSet",
    "FuncOption",
    "LoggingSettings",
    "MissingInputError",
    "NegativeInputError",
    "NilOptionError",
    "OptionError",
    "RetrySettings",
    "apply_options",
    "build_request",
    "compose_options",
    "configure_logging",
    "encode",
    "exclude",
    "fields",
    "get_logger",
    "limit",
    "new_filters",
    "new_request",
    "new_url_request",
    "offset",
    "render",
    "search",
    "sort",
    "where",
]
