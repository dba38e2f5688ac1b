"""Prompt Organizer façade composing the store, tree, lifecycle and backups.

Updates:
  v0.2.1 - 2026-10-05 - Attach Pillow thumbnails when prompts are created with images.
  v0.2.0 - 2026-10-04 - Substitute placeholder text when script generation fails.
  v0.1.0 - 2026-09-19 - Compose managers over a shared entity store and view state.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from models.category_model import ALL_CATEGORY_ID, TRASH_CATEGORY_ID

from .backup import BackupReconciler
from .category_tree import CategoryTreeManager
from .confirm import ConfirmCallback, always_confirm
from .exceptions import ScriptGenerationError
from .imaging import DEFAULT_THUMBNAIL_WIDTH, create_thumbnail
from .lifecycle import PromptLifecycleManager
from .litellm_adapter import LiteLLMNotInstalledError
from .view_state import SortOption, ViewState

if TYPE_CHECKING:
    from pathlib import Path

    from models.prompt_model import PromptEntry

    from .script_generation import LiteLLMScriptGenerator
    from .store import EntityStore

logger = logging.getLogger("prompt_organizer.organizer")

NO_CODE_PLACEHOLDER = "# No code generated"
GENERATION_FAILED_PLACEHOLDER = "# Failed to generate Python script. Check API Key."


class PromptOrganizer:
    """Entry point tying together the managers that share one :class:`EntityStore`."""

    def __init__(
        self,
        store: EntityStore,
        *,
        confirm: ConfirmCallback = always_confirm,
        script_generator: LiteLLMScriptGenerator | None = None,
        view: ViewState | None = None,
        thumbnail_max_width: int = DEFAULT_THUMBNAIL_WIDTH,
    ) -> None:
        self.store = store
        self.view = view or ViewState()
        self.categories = CategoryTreeManager(store, self.view, confirm)
        self.prompts = PromptLifecycleManager(store, confirm)
        self.backups = BackupReconciler(store)
        self.thumbnail_max_width = thumbnail_max_width
        self._script_generator = script_generator

    @property
    def script_generator(self) -> LiteLLMScriptGenerator | None:
        return self._script_generator

    def visible_prompts(self) -> list[PromptEntry]:
        """Return the prompt list for the current view, search and sort state."""
        return self.prompts.filtered_and_sorted(
            self.view.active_category_id,
            self.view.search_query,
            self.view.sort_option,
        )

    def set_search(self, query: str) -> None:
        self.view.search_query = query

    def set_sort(self, sort: SortOption | str) -> None:
        self.view.sort_option = SortOption(sort)

    def select_view(self, category_id: str) -> None:
        """Point the active view at "all", "trash" or an existing category."""
        if category_id not in (ALL_CATEGORY_ID, TRASH_CATEGORY_ID):
            self.categories.require(category_id)
        self.view.select(category_id)

    def add_prompt(
        self,
        title: str,
        content: str,
        category_id: str | None = None,
        *,
        image_source: Path | bytes | None = None,
    ) -> PromptEntry | None:
        """Create a prompt, defaulting its category from the active view.

        When *image_source* is given it is downscaled to a JPEG data URL first;
        an unreadable image raises :class:`ImageProcessingError` before anything
        is stored.
        """
        target = category_id or self.prompts.default_category_for_new_prompt(
            self.view.active_category_id
        )
        if target is None:
            return None
        image = None
        if image_source is not None:
            image = create_thumbnail(image_source, max_width=self.thumbnail_max_width)
        return self.prompts.add_prompt(title, content, target, image)

    def generate_desktop_script(self) -> str:
        """Return generated script text, or a placeholder comment when generation fails."""
        if self._script_generator is None:
            logger.warning("Script generation requested without a configured LiteLLM model")
            return GENERATION_FAILED_PLACEHOLDER
        names = [category.name for category in self.store.categories]
        active = [prompt for prompt in self.store.prompts if not prompt.is_trashed]
        try:
            code = self._script_generator.generate(names, active)
        except (ScriptGenerationError, LiteLLMNotInstalledError) as exc:
            logger.error("Error generating Python script: %s", exc)
            return GENERATION_FAILED_PLACEHOLDER
        return code.strip() or NO_CODE_PLACEHOLDER


__all__ = [
    "GENERATION_FAILED_PLACEHOLDER",
    "NO_CODE_PLACEHOLDER",
    "PromptOrganizer",
]
