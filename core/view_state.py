"""Selection, search, sort and expansion state for prompt list projections.

Updates: v0.1.0 - 2026-09-18 - Extract view selection state from the organizer facade.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from models.category_model import ALL_CATEGORY_ID


class SortOption(str, Enum):
    """Orderings offered for the visible prompt list."""

    NEWEST = "newest"
    OLDEST = "oldest"
    TITLE_ASC = "title-asc"
    TITLE_DESC = "title-desc"


def _default_expanded() -> set[str]:
    return {"1", "2", "3", "4"}


@dataclass(slots=True)
class ViewState:
    """Mutable view parameters; never persisted."""

    active_category_id: str = ALL_CATEGORY_ID
    search_query: str = ""
    sort_option: SortOption = SortOption.NEWEST
    expanded: set[str] = field(default_factory=_default_expanded)
    editing_category_id: str | None = None

    def select(self, category_id: str) -> None:
        """Point the active view at *category_id* (a real id, "all" or "trash")."""
        self.active_category_id = category_id

    def expand(self, category_id: str) -> None:
        self.expanded.add(category_id)

    def toggle_expanded(self, category_id: str) -> bool:
        """Flip the expansion flag for *category_id* and return the new state."""
        if category_id in self.expanded:
            self.expanded.discard(category_id)
            return False
        self.expanded.add(category_id)
        return True

    def is_expanded(self, category_id: str) -> bool:
        return category_id in self.expanded


__all__ = ["SortOption", "ViewState"]
