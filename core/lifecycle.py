"""Prompt lifecycle: creation, trash, restore, re-filing and list projection.

Updates:
  v0.3.1 - 2026-10-17 - Strip NUL characters before building title collation keys.
  v0.3.0 - 2026-10-01 - Keep creation timestamps strictly increasing within a session.
  v0.2.0 - 2026-09-23 - Add locale-aware title ordering for list projections.
  v0.1.0 - 2026-09-16 - Introduce PromptLifecycleManager with trash semantics.
"""

from __future__ import annotations

import locale
import logging
import unicodedata
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from models.category_model import ALL_CATEGORY_ID, TRASH_CATEGORY_ID
from models.prompt_model import PromptEntry, new_prompt_id, now_millis

from .confirm import (
    EMPTY_TRASH_MESSAGE,
    ERASE_PROMPT_MESSAGE,
    ConfirmCallback,
    always_confirm,
)
from .exceptions import InvalidTargetError, PromptNotFoundError
from .view_state import SortOption

if TYPE_CHECKING:
    from .store import EntityStore

logger = logging.getLogger("prompt_organizer.lifecycle")


class DeleteOutcome(str, Enum):
    """Result of a delete request on a single prompt."""

    TRASHED = "trashed"
    ERASED = "erased"
    DECLINED = "declined"


@dataclass(slots=True, frozen=True)
class PromptCounts:
    """Badge counters shown next to the virtual views."""

    active: int
    trashed: int


def _title_sort_key(title: str) -> str:
    """Return a collation key approximating locale-aware title comparison."""
    folded = unicodedata.normalize("NFKD", title).casefold().replace("\x00", "")
    return locale.strxfrm(folded)


def _matches_view(prompt: PromptEntry, view: str) -> bool:
    if view == ALL_CATEGORY_ID:
        return not prompt.is_trashed
    if view == TRASH_CATEGORY_ID:
        return prompt.is_trashed
    return prompt.category_id == view


def filter_and_sort_prompts(
    prompts: Iterable[PromptEntry],
    view: str = ALL_CATEGORY_ID,
    query: str = "",
    sort: SortOption = SortOption.NEWEST,
) -> list[PromptEntry]:
    """Return the visible, ordered prompts for a view selector, query and sort key.

    The projection is pure: it never mutates *prompts*. A concrete category view
    matches that exact category only, not its sub-folders.
    """
    result = [
        prompt
        for prompt in prompts
        if _matches_view(prompt, view) and (not query or prompt.matches(query))
    ]
    if sort is SortOption.NEWEST:
        result.sort(key=lambda prompt: prompt.created_at, reverse=True)
    elif sort is SortOption.OLDEST:
        result.sort(key=lambda prompt: prompt.created_at)
    elif sort is SortOption.TITLE_ASC:
        result.sort(key=lambda prompt: (_title_sort_key(prompt.title), prompt.title))
    elif sort is SortOption.TITLE_DESC:
        result.sort(
            key=lambda prompt: (_title_sort_key(prompt.title), prompt.title),
            reverse=True,
        )
    return result


class PromptLifecycleManager:
    """Create, trash, restore, erase and re-file prompts held by the store."""

    def __init__(self, store: EntityStore, confirm: ConfirmCallback = always_confirm) -> None:
        self._store = store
        self._confirm = confirm
        self._last_timestamp = max((prompt.created_at for prompt in store.prompts), default=0)

    def _next_timestamp(self) -> int:
        timestamp = max(now_millis(), self._last_timestamp + 1)
        self._last_timestamp = timestamp
        return timestamp

    def require(self, prompt_id: str) -> PromptEntry:
        """Return a prompt or raise if not found."""
        prompt = self._store.find_prompt(prompt_id)
        if prompt is None:
            raise PromptNotFoundError(f"Prompt '{prompt_id}' not found")
        return prompt

    def add_prompt(
        self,
        title: str,
        content: str,
        category_id: str,
        image: str | None = None,
    ) -> PromptEntry | None:
        """Create a prompt at the head of the collection; None when inputs are incomplete."""
        if not title or not content or not self._store.has_category(category_id):
            logger.debug(
                "Declining prompt creation with incomplete fields",
                extra={"category_id": category_id},
            )
            return None
        prompt = PromptEntry(
            id=new_prompt_id(),
            title=title,
            content=content,
            category_id=category_id,
            created_at=self._next_timestamp(),
            image=image or None,
        )
        self._store.prompts.insert(0, prompt)
        self._store.persist()
        logger.info("Prompt created", extra={"prompt_id": prompt.id})
        return prompt

    def soft_delete(self, prompt_id: str) -> DeleteOutcome:
        """Move a prompt to the trash, or erase it when it is already trashed."""
        prompt = self.require(prompt_id)
        if prompt.is_trashed:
            if not self._confirm(ERASE_PROMPT_MESSAGE):
                return DeleteOutcome.DECLINED
            self._store.prompts = [item for item in self._store.prompts if item.id != prompt_id]
            self._store.persist()
            logger.info("Prompt erased", extra={"prompt_id": prompt_id})
            return DeleteOutcome.ERASED
        prompt.category_id = TRASH_CATEGORY_ID
        self._store.persist()
        return DeleteOutcome.TRASHED

    def restore(self, prompt_id: str) -> PromptEntry | None:
        """Return a trashed prompt to the first category in collection order.

        The prompt's category before trashing is not remembered. Restoring
        declines (returns None) when no category exists.
        """
        prompt = self.require(prompt_id)
        if not prompt.is_trashed:
            return prompt
        if not self._store.categories:
            logger.warning("Cannot restore prompt %s without any category", prompt_id)
            return None
        prompt.category_id = self._store.categories[0].id
        self._store.persist()
        return prompt

    def empty_trash(self) -> int:
        """Erase every trashed prompt after confirmation; return the number removed."""
        trashed = sum(1 for prompt in self._store.prompts if prompt.is_trashed)
        if not trashed:
            return 0
        if not self._confirm(EMPTY_TRASH_MESSAGE):
            return 0
        self._store.prompts = [prompt for prompt in self._store.prompts if not prompt.is_trashed]
        self._store.persist()
        logger.info("Trash emptied", extra={"removed": trashed})
        return trashed

    def reassign_category(self, prompt_id: str, category_id: str) -> PromptEntry:
        """Re-file a prompt onto *category_id* (drag-and-drop target)."""
        if category_id == ALL_CATEGORY_ID:
            raise InvalidTargetError("Prompts cannot be dropped onto the 'all' view.")
        prompt = self.require(prompt_id)
        prompt.category_id = category_id
        self._store.persist()
        return prompt

    def default_category_for_new_prompt(self, view: str) -> str | None:
        """Return the category preselected when creating a prompt from *view*."""
        if view in (ALL_CATEGORY_ID, TRASH_CATEGORY_ID):
            return self._store.categories[0].id if self._store.categories else None
        return view

    def counts(self) -> PromptCounts:
        trashed = sum(1 for prompt in self._store.prompts if prompt.is_trashed)
        return PromptCounts(active=len(self._store.prompts) - trashed, trashed=trashed)

    def filtered_and_sorted(
        self,
        view: str = ALL_CATEGORY_ID,
        query: str = "",
        sort: SortOption = SortOption.NEWEST,
    ) -> list[PromptEntry]:
        """Project the store's prompts through :func:`filter_and_sort_prompts`."""
        return filter_and_sort_prompts(self._store.prompts, view, query, sort)


__all__ = [
    "DeleteOutcome",
    "PromptCounts",
    "PromptLifecycleManager",
    "filter_and_sort_prompts",
]
