"""Exception hierarchy for the Apicalypse query builder."""

from __future__ import annotations


class ApicalypseError(Exception):
    """Base exception for all query builder errors."""


class OptionError(ApicalypseError, ValueError):
    """Raised when a functional option rejects its arguments.

    ``option`` holds the name of the filter the option was meant to set, when
    known.
    """

    default_message = "invalid option"

    def __init__(self, message: str | None = None, *, option: str | None = None) -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        self.option = option

    def __str__(self) -> str:
        if self.option:
            return f"[{self.option}] {self.message}"
        return self.message


class MissingInputError(OptionError):
    """Raised when an option is called without input parameters."""

    default_message = "missing input parameters"


class BlankArgumentError(OptionError):
    """Raised when an argument that should not be blank is blank or empty."""

    default_message = "a provided argument is blank or empty"


class NegativeInputError(OptionError):
    """Raised when a number that should not be negative is negative."""

    default_message = "input cannot be a negative number"


class NilOptionError(OptionError):
    """Raised when ``None`` or a non-callable is supplied in place of an option."""

    default_message = "option is missing or not callable"


class ConfigError(ApicalypseError):
    """Raised when configuration files are missing or invalid."""


class ApiClientError(ApicalypseError):
    """Raised when the API cannot be reached or returns an unusable response."""

    def __init__(self, message: str, *, status_code: int | None = None, url: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.url = url


__all__ = [
    "ApiClientError",
    "ApicalypseError",
    "BlankArgumentError",
    "ConfigError",
    "MissingInputError",
    "NegativeInputError",
    "NilOptionError",
    "OptionError",
]
