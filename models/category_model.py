"""Category folder models and helpers.

Updates: v0.2.0 - 2026-09-21 - Carry nested parent references and optional icons.
Updates: v0.1.0 - 2026-09-14 - Introduce Category dataclass and default collections.
"""

from __future__ import annotations

import uuid
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

ALL_CATEGORY_ID = "all"
TRASH_CATEGORY_ID = "trash"
RESERVED_CATEGORY_IDS = frozenset({ALL_CATEGORY_ID, TRASH_CATEGORY_ID})

DEFAULT_ROOT_NAME = "New Collection"
DEFAULT_CHILD_NAME = "New Sub-folder"


def new_category_id() -> str:
    """Return a fresh opaque category identifier."""
    return str(uuid.uuid4())


def _clean_optional_text(value: Any) -> str | None:
    """Strip whitespace from optional string inputs."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@dataclass(slots=True)
class Category:
    """User-defined folder, optionally nested under another category."""

    id: str
    name: str
    parent_id: str | None = None
    icon: str | None = None

    @property
    def is_root(self) -> bool:
        """Return True when the category has no parent."""
        return self.parent_id is None

    def to_record(self) -> dict[str, Any]:
        """Serialize the category into the storage/backup mapping."""
        record: dict[str, Any] = {"id": self.id, "name": self.name}
        if self.icon is not None:
            record["icon"] = self.icon
        if self.parent_id is not None:
            record["parentId"] = self.parent_id
        return record

    @classmethod
    def from_record(cls, data: Mapping[str, Any]) -> Category:
        """Hydrate a Category from a stored or imported mapping."""
        parent = data.get("parentId", data.get("parent_id"))
        return cls(
            id=str(data["id"]),
            name=str(data.get("name") or ""),
            parent_id=_clean_optional_text(parent),
            icon=_clean_optional_text(data.get("icon")),
        )

    @classmethod
    def create(cls, parent_id: str | None = None) -> Category:
        """Return a new category carrying the default name for its level."""
        name = DEFAULT_CHILD_NAME if parent_id else DEFAULT_ROOT_NAME
        return cls(id=new_category_id(), name=name, parent_id=parent_id or None)


def default_categories() -> list[Category]:
    """Return the built-in root collections used when storage is empty."""
    return [
        Category(id="1", name="Work"),
        Category(id="2", name="Art"),
        Category(id="3", name="Hebrew Project"),
        Category(id="4", name="Coding"),
    ]


__all__ = [
    "ALL_CATEGORY_ID",
    "Category",
    "DEFAULT_CHILD_NAME",
    "DEFAULT_ROOT_NAME",
    "RESERVED_CATEGORY_IDS",
    "TRASH_CATEGORY_ID",
    "default_categories",
    "new_category_id",
]
