"""Data models for Prompt Organizer.

Updates: v0.2.0 - 2026-09-24 - Export PromptEntry dataclass.
Updates: v0.1.0 - 2026-09-14 - Export Category dataclass and reserved identifiers.
"""

from .category_model import (
    ALL_CATEGORY_ID,
    TRASH_CATEGORY_ID,
    Category,
    default_categories,
)
from .prompt_model import PromptEntry

__all__ = [
    "ALL_CATEGORY_ID",
    "TRASH_CATEGORY_ID",
    "Category",
    "PromptEntry",
    "default_categories",
]
