"""Configuration helpers for Prompt Organizer.

Updates: v0.1.1 - 2026-10-03 - Export storage backend names and thumbnail default.
Updates: v0.1.0 - 2026-09-19 - Expose settings loader and configuration error types.
"""

from .settings import (
    DEFAULT_THUMBNAIL_MAX_WIDTH,
    STORAGE_BACKENDS,
    OrganizerSettings,
    SettingsError,
    load_settings,
)

__all__ = [
    "DEFAULT_THUMBNAIL_MAX_WIDTH",
    "OrganizerSettings",
    "STORAGE_BACKENDS",
    "SettingsError",
    "load_settings",
]
