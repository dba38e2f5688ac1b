"""In-memory entity store mirrored to a key-value persistence port.

Updates:
  v0.2.0 - 2026-09-26 - Treat corrupt stored collections as absent and log the fallback.
  v0.1.0 - 2026-09-15 - Introduce EntityStore with read-at-init and write-after-mutation.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Sequence
from typing import Any, TypeVar, cast

from models.category_model import Category, default_categories
from models.prompt_model import PromptEntry

from .exceptions import StorageError
from .storage import CATEGORIES_KEY, PROMPTS_KEY, KeyValueStorage

logger = logging.getLogger("prompt_organizer.store")

_RecordT = TypeVar("_RecordT")


def _decode_collection(
    storage: KeyValueStorage,
    key: str,
    factory: Callable[[dict[str, Any]], _RecordT],
) -> list[_RecordT] | None:
    """Return the hydrated records stored under *key*, or None when unusable."""
    try:
        raw = storage.read(key)
    except StorageError as exc:
        logger.warning("Unable to read %s from storage: %s", key, exc)
        return None
    if raw is None:
        return None
    try:
        payload: object = json.loads(raw)
    except json.JSONDecodeError as exc:
        logger.warning("Ignoring invalid JSON stored under %s: %s", key, exc)
        return None
    if not isinstance(payload, list):
        logger.warning("Expected a list under %s; falling back to defaults", key)
        return None
    records: list[_RecordT] = []
    for entry in cast("list[object]", payload):
        if not isinstance(entry, dict):
            logger.warning("Ignoring non-object entry stored under %s", key)
            return None
        try:
            records.append(factory(cast("dict[str, Any]", entry)))
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("Ignoring malformed collection under %s: %s", key, exc)
            return None
    return records


class EntityStore:
    """Own the category and prompt collections and persist them on demand.

    The store is the single authority for both lists; managers mutate them in
    place and call :meth:`persist` afterwards. Storage holds a snapshot that is
    read once by :meth:`load` and overwritten wholesale on every persist.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        categories: Sequence[Category] | None = None,
        prompts: Sequence[PromptEntry] | None = None,
    ) -> None:
        self._storage = storage
        self.categories: list[Category] = list(categories or [])
        self.prompts: list[PromptEntry] = list(prompts or [])

    @classmethod
    def load(cls, storage: KeyValueStorage) -> EntityStore:
        """Read both collections from *storage*, applying defaults for absent keys."""
        categories = _decode_collection(storage, CATEGORIES_KEY, Category.from_record)
        prompts = _decode_collection(storage, PROMPTS_KEY, PromptEntry.from_record)
        if categories is None:
            logger.debug("No stored categories; seeding default collections")
            categories = default_categories()
        return cls(storage, categories=categories, prompts=prompts or [])

    @property
    def storage(self) -> KeyValueStorage:
        """Return the persistence port backing this store."""
        return self._storage

    def persist(self) -> None:
        """Serialize both collections to storage; failures are logged, not raised."""
        categories_payload = json.dumps(
            [category.to_record() for category in self.categories], ensure_ascii=False
        )
        prompts_payload = json.dumps(
            [prompt.to_record() for prompt in self.prompts], ensure_ascii=False
        )
        try:
            self._storage.write(CATEGORIES_KEY, categories_payload)
            self._storage.write(PROMPTS_KEY, prompts_payload)
        except StorageError as exc:
            logger.warning("Unable to persist organizer state: %s", exc)

    def replace(
        self,
        *,
        categories: Sequence[Category] | None = None,
        prompts: Sequence[PromptEntry] | None = None,
    ) -> None:
        """Swap in new collections wholesale and persist the result."""
        if categories is not None:
            self.categories = list(categories)
        if prompts is not None:
            self.prompts = list(prompts)
        self.persist()

    def find_category(self, category_id: str | None) -> Category | None:
        """Return the category with *category_id*, if present."""
        if not category_id:
            return None
        for category in self.categories:
            if category.id == category_id:
                return category
        return None

    def find_prompt(self, prompt_id: str | None) -> PromptEntry | None:
        """Return the prompt with *prompt_id*, if present."""
        if not prompt_id:
            return None
        for prompt in self.prompts:
            if prompt.id == prompt_id:
                return prompt
        return None

    def has_category(self, category_id: str | None) -> bool:
        """Return True when *category_id* names a stored category."""
        return self.find_category(category_id) is not None


__all__ = ["EntityStore"]
