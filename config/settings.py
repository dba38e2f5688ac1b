"""Settings management utilities for Prompt Organizer configuration.

Updates:
  v0.3.1 - 2026-10-06 - Derive database and backup paths from data_dir when unset.
  v0.3.0 - 2026-10-03 - Add thumbnail width and script sample limit settings.
  v0.2.0 - 2026-09-30 - Accept GEMINI_API_KEY alongside LiteLLM provider aliases.
  v0.1.0 - 2026-09-19 - Load settings from kwargs, JSON config, env and .env files.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any, Literal, cast

from dotenv import dotenv_values
from pydantic import Field, ValidationError, field_validator, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

logger = logging.getLogger("prompt_organizer.settings")

_DOTENV_FALLBACK_PATH = ".env"
ENV_PREFIX = "PROMPT_ORGANIZER_"
CONFIG_JSON_ENV = "PROMPT_ORGANIZER_CONFIG_JSON"
ENV_FILE_ENV = "PROMPT_ORGANIZER_ENV_FILE"
DEFAULT_CONFIG_PATH = Path("config") / "config.json"

DEFAULT_DATA_DIR = Path("data")
DEFAULT_DB_FILENAME = "prompt_organizer.db"
DEFAULT_BACKUP_DIRNAME = "backups"
DEFAULT_THUMBNAIL_MAX_WIDTH = 400
DEFAULT_SCRIPT_SAMPLE_LIMIT = 2

StorageBackend = Literal["json", "sqlite", "memory"]
STORAGE_BACKENDS: tuple[str, ...] = ("json", "sqlite", "memory")

# Prefixed names come first; bare upper-case names are read without the prefix.
_ENV_KEYS: dict[str, tuple[str, ...]] = {
    "data_dir": ("DATA_DIR", "data_dir"),
    "storage_backend": ("STORAGE_BACKEND", "storage_backend"),
    "db_path": ("DB_PATH", "db_path"),
    "backup_dir": ("BACKUP_DIR", "backup_dir"),
    "thumbnail_max_width": ("THUMBNAIL_MAX_WIDTH", "thumbnail_max_width"),
    "litellm_model": ("LITELLM_MODEL", "litellm_model"),
    "litellm_api_key": ("LITELLM_API_KEY", "litellm_api_key", "GEMINI_API_KEY"),
    "litellm_api_base": ("LITELLM_API_BASE", "litellm_api_base"),
    "litellm_api_version": ("LITELLM_API_VERSION", "litellm_api_version"),
    "litellm_drop_params": ("LITELLM_DROP_PARAMS", "litellm_drop_params"),
    "litellm_timeout_seconds": ("LITELLM_TIMEOUT_SECONDS", "litellm_timeout_seconds"),
    "litellm_logging_enabled": ("LITELLM_LOGGING_ENABLED", "litellm_logging_enabled"),
    "script_sample_limit": ("SCRIPT_SAMPLE_LIMIT", "script_sample_limit"),
    "script_prompt_template": ("SCRIPT_PROMPT_TEMPLATE", "script_prompt_template"),
}
_UNPREFIXED_ALIASES = frozenset({"LITELLM_API_KEY", "LITELLM_MODEL", "GEMINI_API_KEY"})
_SECRET_CONFIG_KEYS = frozenset({"litellm_api_key", "LITELLM_API_KEY", "GEMINI_API_KEY"})


class SettingsError(Exception):
    """Raised when Prompt Organizer configuration cannot be loaded or validated."""


def _read_dotenv_values() -> dict[str, str]:
    """Load ``.env`` entries into a mapping without mutating ``os.environ``."""
    env_file_override = os.getenv(ENV_FILE_ENV)
    if env_file_override is not None:
        candidate = env_file_override.strip()
        if not candidate:
            return {}
        path = Path(candidate).expanduser()
    else:
        path = Path(_DOTENV_FALLBACK_PATH).expanduser()
    if not path.is_file():
        return {}
    raw_values = dotenv_values(str(path))
    return {str(key): str(value) for key, value in raw_values.items() if value is not None}


class OrganizerSettings(BaseSettings):
    """Application configuration sourced from keyword overrides, JSON files or the environment."""

    data_dir: Path = Field(
        default=DEFAULT_DATA_DIR,
        description="Directory holding the JSON key/value files.",
    )
    storage_backend: StorageBackend = Field(
        default="json",
        description="Persistence backend: json files, a SQLite database or in-memory only.",
    )
    db_path: Path = Field(
        default=DEFAULT_DATA_DIR / DEFAULT_DB_FILENAME,
        description="SQLite database path used when storage_backend is 'sqlite'.",
    )
    backup_dir: Path = Field(
        default=DEFAULT_DATA_DIR / DEFAULT_BACKUP_DIRNAME,
        description="Default directory for exported backup files.",
    )
    thumbnail_max_width: int = Field(
        default=DEFAULT_THUMBNAIL_MAX_WIDTH,
        description="Maximum pixel width of stored prompt thumbnails.",
    )
    litellm_model: str | None = Field(
        default=None,
        description="LiteLLM model used to generate the desktop application script.",
    )
    litellm_api_key: str | None = Field(
        default=None,
        description="LiteLLM API key.",
        repr=False,
    )
    litellm_api_base: str | None = Field(
        default=None,
        description="Optional LiteLLM API base URL override.",
    )
    litellm_api_version: str | None = Field(
        default=None,
        description="Optional LiteLLM API version (useful for Azure OpenAI).",
    )
    litellm_drop_params: list[str] | None = Field(
        default=None,
        description=(
            "Optional LiteLLM parameters to drop before forwarding requests (see "
            "https://docs.litellm.ai/docs/completion/drop_params)."
        ),
    )
    litellm_timeout_seconds: float | None = Field(
        default=None,
        description="Optional request timeout forwarded to LiteLLM.",
    )
    litellm_logging_enabled: bool = Field(
        default=False,
        description="Keep LiteLLM's own loggers enabled.",
    )
    script_sample_limit: int = Field(
        default=DEFAULT_SCRIPT_SAMPLE_LIMIT,
        description="Number of sample prompts embedded in the script generation request.",
    )
    script_prompt_template: str | None = Field(
        default=None,
        description="Override for the desktop script generation instructions.",
    )

    model_config = cast(
        "SettingsConfigDict",
        {
            "env_prefix": ENV_PREFIX,
            "case_sensitive": False,
            "populate_by_name": True,
        },
    )

    @field_validator("data_dir", "db_path", "backup_dir", mode="before")
    def _normalise_path(cls, value: Any) -> Path:
        """Expand user-relative paths and coerce values to Path instances."""
        if value is None or str(value).strip() == "":
            raise ValueError("a filesystem path is required")
        return Path(str(value).strip()).expanduser()

    @field_validator("storage_backend", mode="before")
    def _normalise_backend(cls, value: object) -> str:
        if value in (None, ""):
            return "json"
        backend = str(value).strip().lower()
        if backend not in STORAGE_BACKENDS:
            raise ValueError("storage_backend must be one of: json, sqlite, memory")
        return backend

    @field_validator("thumbnail_max_width")
    def _validate_thumbnail_width(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("thumbnail_max_width must be greater than zero")
        return value

    @field_validator("script_sample_limit")
    def _validate_sample_limit(cls, value: int) -> int:
        if value < 0:
            raise ValueError("script_sample_limit cannot be negative")
        return value

    @field_validator("litellm_timeout_seconds")
    def _validate_timeout(cls, value: float | None) -> float | None:
        if value is not None and value <= 0:
            raise ValueError("litellm_timeout_seconds must be greater than zero")
        return value

    @field_validator(
        "litellm_model",
        "litellm_api_key",
        "litellm_api_base",
        "litellm_api_version",
        "script_prompt_template",
        mode="before",
    )
    def _strip_strings(cls, value: str | None) -> str | None:
        if value is None:
            return None
        stripped = str(value).strip()
        return stripped or None

    @field_validator("litellm_drop_params", mode="before")
    def _normalise_drop_params(cls, value: object) -> list[str] | None:
        if value in (None, "", [], ()):  # type: ignore[comparison-overlap]
            return None
        if isinstance(value, str):
            stripped = value.strip()
            try:
                parsed = json.loads(stripped)
            except json.JSONDecodeError:
                items = [item.strip() for item in stripped.split(",") if item.strip()]
            else:
                if isinstance(parsed, list):
                    items = [str(item).strip() for item in parsed if str(item).strip()]
                else:
                    items = [str(parsed).strip()]
            return items or None
        if isinstance(value, Sequence) and not isinstance(value, (bytes, bytearray)):
            sequence_value = cast("Sequence[object]", value)
            items = [str(item).strip() for item in sequence_value if str(item).strip()]
            return items or None
        raise ValueError(
            "litellm_drop_params must be a list, comma-separated string, or JSON array"
        )

    @model_validator(mode="after")
    def _derive_storage_paths(self) -> OrganizerSettings:
        if "db_path" not in self.model_fields_set:
            object.__setattr__(self, "db_path", self.data_dir / DEFAULT_DB_FILENAME)
        if "backup_dir" not in self.model_fields_set:
            object.__setattr__(self, "backup_dir", self.data_dir / DEFAULT_BACKUP_DIRNAME)
        return self

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[
        PydanticBaseSettingsSource,
        PydanticBaseSettingsSource,
        PydanticBaseSettingsSource,
        PydanticBaseSettingsSource,
    ]:
        """Define configuration source precedence.

        Order (highest → lowest):
            1. Explicit keyword arguments (e.g. load_settings(storage_backend="memory")).
            2. JSON configuration file.
            3. Environment variables, aliases and ``.env`` entries.
            4. File secrets.
        """

        def env_with_aliases(_: BaseSettings | None = None) -> dict[str, Any]:
            data: dict[str, Any] = {}
            dotenv_data = _read_dotenv_values()

            def _lookup(candidate: str) -> str | None:
                value = os.getenv(candidate)
                if value is None:
                    value = dotenv_data.get(candidate)
                if value is None:
                    return None
                return str(value).strip() or None

            for field, keys in _ENV_KEYS.items():
                candidates: list[str] = []
                for key in keys:
                    candidates.extend((f"{ENV_PREFIX}{key}", f"{ENV_PREFIX}{key.upper()}"))
                candidates.extend(key for key in keys if key in _UNPREFIXED_ALIASES)
                for candidate in candidates:
                    value = _lookup(candidate)
                    if value is not None:
                        data[field] = value
                        break
            return data

        return (
            init_settings,
            cls._json_config_settings_source(settings_cls),
            cast("PydanticBaseSettingsSource", env_with_aliases),
            file_secret_settings,
        )

    @classmethod
    def _json_config_settings_source(
        cls,
        _: type[BaseSettings],
    ) -> PydanticBaseSettingsSource:
        """Return settings extracted from an optional JSON config file."""

        def _loader(_: BaseSettings | None = None) -> dict[str, Any]:
            explicit_path = os.getenv(CONFIG_JSON_ENV)
            if explicit_path:
                path = Path(explicit_path).expanduser()
                if not path.exists():
                    raise SettingsError(f"Configuration file not found: {path}")
            else:
                path = DEFAULT_CONFIG_PATH
                if not path.exists():
                    return {}
            try:
                raw_contents = path.read_text(encoding="utf-8")
            except OSError as exc:  # pragma: no cover - filesystem failure is env-specific
                raise SettingsError(f"Unable to read configuration file: {path}") from exc
            try:
                data = json.loads(raw_contents)
            except json.JSONDecodeError as exc:
                raise SettingsError(f"Invalid JSON in configuration file: {path}") from exc
            if not isinstance(data, dict):
                raise SettingsError(f"Configuration file {path} must contain a JSON object")
            mapping_data = cast("Mapping[object, Any]", data)
            data_dict = {str(key): value for key, value in mapping_data.items()}

            removed_secrets = sorted(key for key in _SECRET_CONFIG_KEYS if key in data_dict)
            if removed_secrets:
                logger.warning(
                    "Ignoring secret key(s) %s in configuration file %s; "
                    "set credentials via environment variables instead.",
                    ", ".join(removed_secrets),
                    path,
                )
            return {
                key: data_dict[key]
                for key in _ENV_KEYS
                if key in data_dict and key not in _SECRET_CONFIG_KEYS
            }

        return cast("PydanticBaseSettingsSource", _loader)


def load_settings(**overrides: Any) -> OrganizerSettings:
    """Return validated settings, raising SettingsError on failure."""
    try:
        return OrganizerSettings(**overrides)
    except SettingsError:
        raise
    except ValidationError as exc:
        raise SettingsError(f"Invalid Prompt Organizer configuration: {exc}") from exc


__all__ = [
    "CONFIG_JSON_ENV",
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_THUMBNAIL_MAX_WIDTH",
    "ENV_FILE_ENV",
    "STORAGE_BACKENDS",
    "OrganizerSettings",
    "SettingsError",
    "load_settings",
]
