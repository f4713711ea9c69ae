"""Configuration loading and validation for the Apex chat engine."""

from __future__ import annotations

from copy import deepcopy
import logging
import os
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)

from .exceptions import ConfigValidationError

import tomllib  # stdlib since Python 3.11 (project requires >=3.11)

LOGGER = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".config" / "apex-chat"
CONFIG_PATH = CONFIG_DIR / "config.toml"

DEFAULT_ENDPOINT = "https://api.deepseek.com/chat/completions"
DEFAULT_API_KEY_ENV = "DEEPSEEK_API_KEY"
VALID_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}
VALID_MODELS = ("deepseek-chat", "deepseek-reasoner")


class AppConfig(BaseModel):
    """Application metadata and terminal integration options."""

    model_config = ConfigDict(populate_by_name=True)
    title: str = "Apex DeepSeek"
    window_class: str = Field(default="apex-chat", alias="class")

    @field_validator("title", "window_class", mode="before")
    @classmethod
    def _validate_non_empty_string(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError("Expected a string value.")
        normalized = value.strip()
        if not normalized:
            raise ValueError("String value must not be empty.")
        return normalized


class ApiConfig(BaseModel):
    """Chat-completion endpoint and credential lookup."""

    endpoint: str = DEFAULT_ENDPOINT
    api_key_env: str = DEFAULT_API_KEY_ENV
    api_key: str = ""
    timeout_seconds: float | None = Field(default=None, gt=0, le=3600)

    @field_validator("endpoint", mode="before")
    @classmethod
    def _validate_endpoint(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError("endpoint must be a string.")
        normalized = value.strip()
        parsed = urlparse(normalized)
        if parsed.scheme.lower() not in {"http", "https"}:
            raise ValueError("endpoint must use http or https scheme.")
        if not parsed.hostname:
            raise ValueError("endpoint must include a hostname.")
        return normalized

    @field_validator("api_key_env", mode="before")
    @classmethod
    def _validate_env_name(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError("api_key_env must be a string.")
        normalized = value.strip()
        if not normalized:
            raise ValueError("api_key_env must not be empty.")
        return normalized

    @field_validator("api_key", mode="before")
    @classmethod
    def _normalize_api_key(cls, value: Any) -> str:
        if value is None:
            return ""
        if not isinstance(value, str):
            raise ValueError("api_key must be a string.")
        return value.strip()


class DefaultsConfig(BaseModel):
    """Initial toggle states and model for a new session."""

    model: str = "deepseek-chat"
    deep_search: bool = False
    web_search: bool = False
    markdown_output: bool = False

    @field_validator("model", mode="before")
    @classmethod
    def _validate_model(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError("model must be a string.")
        normalized = value.strip()
        if normalized not in VALID_MODELS:
            raise ValueError(f"model must be one of {', '.join(VALID_MODELS)}.")
        return normalized


class AttachmentsConfig(BaseModel):
    """Attachment read policy. ``max_bytes = 0`` leaves reads unbounded."""

    max_bytes: int = Field(default=0, ge=0)
    download_directory: str = ""

    @field_validator("download_directory", mode="before")
    @classmethod
    def _normalize_directory(cls, value: Any) -> str:
        if value is None:
            return ""
        if not isinstance(value, str):
            raise ValueError("download_directory must be a string.")
        return value.strip()


class LoggingConfig(BaseModel):
    """Logging behavior and output destinations."""

    level: str = "INFO"
    structured: bool = True
    log_to_file: bool = False
    log_file_path: str = "~/.local/state/apex-chat/app.log"

    @field_validator("level", mode="before")
    @classmethod
    def _validate_level(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError("Logging level must be a string.")
        normalized = value.strip().upper()
        if normalized not in VALID_LOG_LEVELS:
            raise ValueError(f"Unsupported log level {normalized!r}.")
        return normalized

    @field_validator("log_file_path", mode="before")
    @classmethod
    def _validate_log_file_path(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError("log_file_path must be a string.")
        normalized = value.strip()
        if not normalized:
            raise ValueError("log_file_path must not be empty.")
        return normalized


class Config(BaseModel):
    """Root configuration model for all sections."""

    model_config = ConfigDict(populate_by_name=True)
    app: AppConfig = AppConfig()
    api: ApiConfig = ApiConfig()
    defaults: DefaultsConfig = DefaultsConfig()
    attachments: AttachmentsConfig = AttachmentsConfig()
    logging: LoggingConfig = LoggingConfig()


DEFAULT_CONFIG: dict[str, dict[str, Any]] = Config().model_dump(by_alias=True)


def ensure_config_dir(config_dir: Path | None = None) -> Path:
    """Ensure that the config directory exists and return its path."""
    directory = config_dir or CONFIG_DIR
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        LOGGER.warning("Unable to create config directory %s: %s", directory, exc)
    return directory


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge override values onto base values."""
    merged: dict[str, Any] = deepcopy(base)
    for key, value in override.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _enforce_private_permissions(path: Path) -> None:
    """Best-effort enforcement of private file permissions on POSIX systems.

    The config file may hold an API key, so it is kept owner-readable only.
    """
    if os.name != "posix" or not path.exists():
        return
    try:
        path.chmod(0o600)
    except OSError as exc:
        LOGGER.warning("Unable to enforce 0600 permissions for %s: %s", path, exc)


def _safe_default_config() -> dict[str, dict[str, Any]]:
    """Return a deep copy of validated default config data."""
    return deepcopy(DEFAULT_CONFIG)


def _validate_config(raw: dict[str, Any]) -> dict[str, dict[str, Any]]:
    """Validate merged config and fallback to safe defaults when possible."""
    try:
        config = Config.model_validate(raw)
        return config.model_dump(by_alias=True)
    except ValidationError as exc:
        LOGGER.warning("Configuration validation failed, using safe defaults: %s", exc)
        return _safe_default_config()
    except Exception as exc:  # noqa: BLE001 - unexpected model construction failure.
        raise ConfigValidationError(f"Unable to validate configuration: {exc}") from exc


def load_config(config_path: Path | None = None) -> dict[str, dict[str, Any]]:
    """
    Load configuration from TOML, merge with defaults, and validate.

    The optional ``config_path`` argument is intended for tests and tooling.
    """
    target_path = config_path or CONFIG_PATH
    ensure_config_dir(target_path.parent)

    raw_data: dict[str, Any] = {}
    if target_path.exists():
        _enforce_private_permissions(target_path)
        try:
            raw_data = tomllib.loads(target_path.read_text(encoding="utf-8"))
        except (
            Exception
        ) as exc:  # noqa: BLE001 - we must not crash on invalid user config.
            LOGGER.warning("Failed to parse config at %s: %s", target_path, exc)
            raw_data = {}

    merged = (
        _deep_merge(DEFAULT_CONFIG, raw_data)
        if isinstance(raw_data, dict)
        else _safe_default_config()
    )
    return _validate_config(merged)


def resolve_api_key(
    api_config: dict[str, Any], environ: dict[str, str] | None = None
) -> str:
    """Return the configured credential, or an empty string when absent.

    An explicit ``api_key`` wins over the environment variable named by
    ``api_key_env``.
    """
    explicit = str(api_config.get("api_key") or "").strip()
    if explicit:
        return explicit
    env = os.environ if environ is None else environ
    env_name = str(api_config.get("api_key_env") or DEFAULT_API_KEY_ENV)
    return str(env.get(env_name, "")).strip()
