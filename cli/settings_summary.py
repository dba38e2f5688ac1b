"""Printable summaries for Prompt Organizer configuration.

Updates:
  v0.1.1 - 2026-10-03 - Include thumbnail and script generation settings.
  v0.1.0 - 2026-09-22 - Render storage and LiteLLM configuration summary.
"""

from __future__ import annotations

from config import OrganizerSettings

from .utils import describe_path, mask_secret


def render_settings_summary(settings: OrganizerSettings) -> str:
    """Return a readable summary of storage and LiteLLM configuration."""
    backend = settings.storage_backend
    if backend == "sqlite":
        storage_desc = describe_path(settings.db_path, expect_directory=False, allow_missing=True)
    elif backend == "json":
        storage_desc = describe_path(settings.data_dir, expect_directory=True, allow_missing=True)
    else:
        storage_desc = "in-memory (not persisted)"
    drop_params = ", ".join(settings.litellm_drop_params or []) or "none"
    timeout = (
        f"{settings.litellm_timeout_seconds:g}s"
        if settings.litellm_timeout_seconds is not None
        else "provider default"
    )

    backup_desc = describe_path(settings.backup_dir, expect_directory=True, allow_missing=True)

    lines = [
        "Prompt Organizer configuration summary",
        "--------------------------------------",
        f"Storage backend: {backend}",
        f"Storage location: {storage_desc}",
        f"Backup directory: {backup_desc}",
        f"Thumbnail max width: {settings.thumbnail_max_width}px",
        "",
        "LiteLLM configuration",
        "---------------------",
        f"Model: {settings.litellm_model or 'not set'}",
        f"LiteLLM API key: {mask_secret(settings.litellm_api_key)}",
        f"LiteLLM API base: {settings.litellm_api_base or 'not set'}",
        f"LiteLLM API version: {settings.litellm_api_version or 'not set'}",
        f"Dropped parameters: {drop_params}",
        f"Request timeout: {timeout}",
        f"Library logging: {'yes' if settings.litellm_logging_enabled else 'no'}",
        "",
        "Script generation",
        "-----------------",
        f"Sample prompts: {settings.script_sample_limit}",
        f"Template override: {'yes' if settings.script_prompt_template else 'no'}",
    ]
    return "\n".join(lines)


def print_settings_summary(settings: OrganizerSettings) -> None:
    """Emit the configuration summary to stdout."""
    print(render_settings_summary(settings))
