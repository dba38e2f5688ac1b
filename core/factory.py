"""Factories for constructing PromptOrganizer instances from validated settings.

Updates:
  v0.2.0 - 2026-10-04 - Build the LiteLLM script generator when a model is configured.
  v0.1.1 - 2026-09-26 - Select JSON, SQLite or memory storage from settings.
  v0.1.0 - 2026-09-19 - Wire entity store and managers from settings.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from .confirm import ConfirmCallback, always_confirm
from .organizer import PromptOrganizer
from .script_generation import LiteLLMScriptGenerator
from .storage import JsonFileStorage, KeyValueStorage, MemoryStorage, SQLiteStorage
from .store import EntityStore

if TYPE_CHECKING:  # pragma: no cover - typing only
    from config import OrganizerSettings
else:  # pragma: no cover - typing only
    OrganizerSettings = Any

factory_logger = logging.getLogger("prompt_organizer.factory")


def build_storage(settings: OrganizerSettings) -> KeyValueStorage:
    """Return the key/value backend selected by ``settings.storage_backend``."""
    backend = settings.storage_backend
    if backend == "memory":
        return MemoryStorage()
    if backend == "sqlite":
        return SQLiteStorage(settings.db_path)
    return JsonFileStorage(settings.data_dir)


def build_script_generator(settings: OrganizerSettings) -> LiteLLMScriptGenerator | None:
    """Return a script generator, or None when no LiteLLM model is configured."""
    model = settings.litellm_model
    if not model:
        factory_logger.info(
            "LiteLLM model not configured (PROMPT_ORGANIZER_LITELLM_MODEL); "
            "script generation is offline."
        )
        return None
    if not settings.litellm_api_key:
        factory_logger.warning(
            "LiteLLM API key not configured; relying on provider environment credentials."
        )
    return LiteLLMScriptGenerator(
        model=model,
        api_key=settings.litellm_api_key,
        api_base=settings.litellm_api_base,
        api_version=settings.litellm_api_version,
        timeout_seconds=settings.litellm_timeout_seconds,
        drop_params=settings.litellm_drop_params,
        sample_limit=settings.script_sample_limit,
        template=settings.script_prompt_template,
    )


def build_organizer(
    settings: OrganizerSettings,
    *,
    confirm: ConfirmCallback = always_confirm,
    storage: KeyValueStorage | None = None,
    script_generator: LiteLLMScriptGenerator | None = None,
) -> PromptOrganizer:
    """Return a PromptOrganizer configured from validated settings."""
    resolved_storage = storage or build_storage(settings)
    store = EntityStore.load(resolved_storage)
    generator = script_generator or build_script_generator(settings)
    factory_logger.debug(
        "Organizer initialised",
        extra={
            "storage_backend": settings.storage_backend,
            "categories": len(store.categories),
            "prompts": len(store.prompts),
        },
    )
    return PromptOrganizer(
        store,
        confirm=confirm,
        script_generator=generator,
        thumbnail_max_width=settings.thumbnail_max_width,
    )


__all__ = ["build_organizer", "build_script_generator", "build_storage"]
