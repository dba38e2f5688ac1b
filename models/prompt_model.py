"""Prompt entry data model definitions.

Updates: v0.2.0 - 2026-09-24 - Add optional thumbnail payloads and trash helpers.
Updates: v0.1.0 - 2026-09-14 - Initial PromptEntry schema with serialization helpers.
"""
from __future__ import annotations

import time
import uuid
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .category_model import TRASH_CATEGORY_ID


def now_millis() -> int:
    """Return the current wall-clock time as epoch milliseconds."""
    return time.time_ns() // 1_000_000


def new_prompt_id() -> str:
    """Return a fresh opaque prompt identifier."""
    return str(uuid.uuid4())


def _coerce_timestamp(value: Any) -> int:
    """Parse stored timestamps into epoch milliseconds."""
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return int(value)
    try:
        return int(float(str(value).strip()))
    except ValueError:
        return 0


@dataclass(slots=True)
class PromptEntry:
    """Saved text entry belonging to one category or the trash."""

    id: str
    title: str
    content: str
    category_id: str
    created_at: int
    image: str | None = None

    @property
    def is_trashed(self) -> bool:
        """Return True when the prompt sits in the trash pseudo-category."""
        return self.category_id == TRASH_CATEGORY_ID

    def matches(self, query: str) -> bool:
        """Return True when *query* appears in the title or content (case-insensitive)."""
        needle = query.lower()
        return needle in self.title.lower() or needle in self.content.lower()

    def to_record(self) -> dict[str, Any]:
        """Return a mapping suitable for storage and backups."""
        record: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "categoryId": self.category_id,
            "createdAt": self.created_at,
        }
        if self.image:
            record["image"] = self.image
        return record

    @classmethod
    def from_record(cls, data: Mapping[str, Any]) -> PromptEntry:
        """Hydrate a PromptEntry from a stored or imported mapping."""
        category = data.get("categoryId", data.get("category_id"))
        image = data.get("image")
        return cls(
            id=str(data["id"]),
            title=str(data.get("title") or ""),
            content=str(data.get("content") or ""),
            category_id=str(category) if category is not None else "",
            created_at=_coerce_timestamp(data.get("createdAt", data.get("created_at"))),
            image=str(image) if image else None,
        )


__all__ = ["PromptEntry", "new_prompt_id", "now_millis"]
