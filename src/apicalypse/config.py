"""Configuration management for the Apicalypse client."""

from __future__ import annotations

import os
import re
from copy import deepcopy
from pathlib import Path
from typing import Any, Iterable, Literal, Mapping

import yaml
from pydantic import BaseModel, ConfigDict, Field, HttpUrl, ValidationError, field_validator

from apicalypse.errors import ConfigError

ENV_PREFIX = "APICALYPSE"
ENV_SEPARATOR = "__"

_PLACEHOLDER = re.compile(r"\{([^}]+)\}")


def _deep_update(target: dict[str, Any], updates: Mapping[str, Any]) -> dict[str, Any]:
    for key, value in updates.items():
        if (
            isinstance(value, Mapping)
            and key in target
            and isinstance(target[key], Mapping)
        ):
            target[key] = _deep_update(dict(target[key]), value)
        else:
            target[key] = value
    return target


def _build_nested(path: Iterable[str], value: Any) -> dict[str, Any]:
    keys = list(path)
    if not keys:
        msg = "Override keys must not be empty"
        raise ValueError(msg)
    nested: dict[str, Any] = {}
    cursor = nested
    for key in keys[:-1]:
        cursor[key] = {}
        cursor = cursor[key]
    cursor[keys[-1]] = value
    return nested


def _coerce_value(raw: str) -> Any:
    try:
        loaded = yaml.safe_load(raw)
    except yaml.YAMLError:
        return raw
    return loaded


def expand_placeholders(headers: Mapping[str, Any], environ: Mapping[str, str] | None = None) -> dict[str, Any]:
    """Replace ``{NAME}`` in header values with the environment variable ``NAME``.

    Placeholders without a matching variable are left untouched. Numbers, as
    produced by YAML for ``Client-ID: 12345``, become strings; any other
    non-string value is passed through for validation to reject.
    """
    environ = os.environ if environ is None else environ

    def replace(match: re.Match[str]) -> str:
        value = environ.get(match.group(1).upper())
        return value if value is not None else match.group(0)

    expanded: dict[str, Any] = {}
    for key, value in headers.items():
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            value = str(value)
        expanded[key] = _PLACEHOLDER.sub(replace, value) if isinstance(value, str) else value
    return expanded


class RetrySettings(BaseModel):
    """Retry configuration for the HTTP client."""

    max_tries: int = Field(default=3, ge=1)
    backoff_multiplier: float = Field(default=1.0, gt=0)


class ClientConfig(BaseModel):
    """Configuration for a single Apicalypse API."""

    name: str = Field(default="igdb")
    base_url: HttpUrl = Field(default="https://api.igdb.com/v4", validate_default=True)
    method: str = Field(default="POST")
    body_mode: Literal["body", "url"] = Field(default="body")
    headers: dict[str, str] = Field(default_factory=dict)
    timeout: float = Field(default=30.0, gt=0)
    retries: RetrySettings = Field(default_factory=RetrySettings)
    page_size: int = Field(default=50, ge=1, le=500)

    model_config = ConfigDict(frozen=True)

    @field_validator("name", "method")
    @classmethod
    def validate_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("value must not be empty")
        return value.strip()

    @property
    def resolved_base_url(self) -> str:
        return str(self.base_url).rstrip("/")

    def url_for(self, endpoint: str) -> str:
        if not endpoint:
            return self.resolved_base_url
        if endpoint.startswith(("http://", "https://")):
            return endpoint
        return f"{self.resolved_base_url}/{endpoint.lstrip('/')}"


class LoggingSettings(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO")
    format: Literal["text", "json"] = Field(default="text")

    @field_validator("level")
    @classmethod
    def validate_level(cls, value: str) -> str:
        upper = value.upper()
        if upper not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown logging level: {value}")
        return upper


class Config(BaseModel):
    """Top-level configuration."""

    model_config = ConfigDict(extra="forbid")

    client: ClientConfig = Field(default_factory=ClientConfig)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @classmethod
    def load(
        cls,
        path: Path | str | None = None,
        *,
        environ: Mapping[str, str] | None = None,
        cli_overrides: Mapping[str, Any] | None = None,
    ) -> Config:
        """Load configuration from defaults, a YAML file, the environment and CLI overrides.

        Later sources win. Header placeholders are expanded from ``environ``.
        """
        environ = os.environ if environ is None else environ
        merged = deepcopy(cls().model_dump(mode="json"))

        if path is not None:
            config_path = Path(path)
            if not config_path.exists():
                msg = f"Config file not found: {config_path}"
                raise FileNotFoundError(msg)
            merged = _deep_update(merged, cls._load_yaml(config_path))

        merged = _deep_update(merged, cls._extract_env_overrides(environ, ENV_PREFIX))

        if cli_overrides:
            merged = _deep_update(merged, cls._normalise_cli_overrides(cli_overrides))

        client = merged.get("client")
        if isinstance(client, Mapping) and isinstance(client.get("headers"), Mapping):
            merged["client"] = {**client, "headers": expand_placeholders(client["headers"], environ)}

        try:
            return cls.model_validate(merged)
        except ValidationError as exc:
            msg = f"Invalid configuration: {exc}"
            raise ConfigError(msg) from exc

    @staticmethod
    def _load_yaml(path: Path) -> dict[str, Any]:
        try:
            with path.open("r", encoding="utf-8") as file:
                data = yaml.safe_load(file) or {}
        except yaml.YAMLError as exc:
            msg = f"Configuration file is not valid YAML: {path}"
            raise ConfigError(msg) from exc
        if not isinstance(data, Mapping):
            msg = "Configuration file must contain a mapping"
            raise ConfigError(msg)
        return dict(data)

    @classmethod
    def _extract_env_overrides(
        cls, environ: Mapping[str, str], prefix: str
    ) -> dict[str, Any]:
        overrides: dict[str, Any] = {}
        prefix_with_sep = f"{prefix}{ENV_SEPARATOR}"
        for key, value in environ.items():
            if not key.startswith(prefix_with_sep):
                continue
            path = key[len(prefix_with_sep) :].split(ENV_SEPARATOR)
            normalised_path = [part.lower() for part in path if part]
            if not normalised_path:
                continue
            overrides = _deep_update(
                overrides,
                _build_nested(normalised_path, _coerce_value(value)),
            )
        return overrides

    @staticmethod
    def _normalise_cli_overrides(overrides: Mapping[str, Any]) -> dict[str, Any]:
        normalised: dict[str, Any] = {}
        for key, value in overrides.items():
            path = [part.strip() for part in str(key).split(".") if part.strip()]
            coerced = _coerce_value(value) if isinstance(value, str) else value
            normalised = _deep_update(normalised, _build_nested(path, coerced))
        return normalised

    @staticmethod
    def parse_cli_overrides(pairs: Iterable[str]) -> dict[str, Any]:
        overrides: dict[str, Any] = {}
        for pair in pairs:
            if "=" not in pair:
                msg = "Overrides must use KEY=VALUE syntax"
                raise ValueError(msg)
            key, raw_value = pair.split("=", 1)
            path = [part.strip() for part in key.split(".") if part.strip()]
            if not path:
                msg = "Override keys must not be empty"
                raise ValueError(msg)
            overrides = _deep_update(
                overrides,
                _build_nested(path, _coerce_value(raw_value)),
            )
        return overrides


__all__ = [
    "ClientConfig",
    "Config",
    "ENV_PREFIX",
    "LoggingSettings",
    "RetrySettings",
    "expand_placeholders",
]
