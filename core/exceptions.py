"""Common exception classes for core package.

This module centralises shared exception definitions for the **core** package.
All exceptions ultimately inherit from :class:`PromptOrganizerError`, allowing
callers to catch a single base class for any organizer failure while still
distinguishing individual error categories when needed.

Updates:
  v0.4.0 - 2026-10-02 - Add thumbnail processing errors.
  v0.3.0 - 2026-09-28 - Add script generation errors.
  v0.2.0 - 2026-09-24 - Add backup format and storage errors.
  v0.1.0 - 2026-09-14 - Created module with category and prompt hierarchies.
"""

from __future__ import annotations


class PromptOrganizerError(Exception):
    """Base exception for Prompt Organizer failures."""


class CategoryError(PromptOrganizerError):
    """Base class for category tree failures."""


class CategoryNotFoundError(CategoryError):
    """Raised when a requested category does not exist."""


class LastCategoryError(CategoryError):
    """Raised when a deletion would leave the organizer without any category."""


class PromptError(PromptOrganizerError):
    """Base class for prompt lifecycle failures."""


class PromptNotFoundError(PromptError):
    """Raised when a prompt cannot be located in the store."""


class InvalidTargetError(PromptError):
    """Raised when a prompt is re-filed onto a pseudo-category that cannot hold it."""


class BackupFormatError(PromptOrganizerError):
    """Raised when a backup document cannot be parsed or lacks required fields."""


class StorageError(PromptOrganizerError):
    """Raised when interactions with the persistence backend fail."""


class ScriptGenerationError(PromptOrganizerError):
    """Raised when the desktop script cannot be generated via LiteLLM."""


class ImageProcessingError(PromptOrganizerError):
    """Raised when a thumbnail cannot be produced from the supplied image."""


__all__ = [
    "BackupFormatError",
    "CategoryError",
    "CategoryNotFoundError",
    "ImageProcessingError",
    "InvalidTargetError",
    "LastCategoryError",
    "PromptError",
    "PromptNotFoundError",
    "PromptOrganizerError",
    "ScriptGenerationError",
    "StorageError",
]
