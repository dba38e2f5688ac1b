"""Category tree maintenance and cascading deletion into the trash.

Updates:
  v0.3.1 - 2026-10-17 - Surface categories caught in parent cycles as roots.
  v0.3.0 - 2026-09-30 - Treat orphaned categories as roots when walking the tree.
  v0.2.0 - 2026-09-22 - Build a parent/child index instead of rescanning per level.
  v0.1.0 - 2026-09-16 - Introduce CategoryTreeManager with add/rename/delete.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterator
from typing import TYPE_CHECKING

from models.category_model import ALL_CATEGORY_ID, TRASH_CATEGORY_ID, Category

from .confirm import DELETE_CATEGORY_MESSAGE, ConfirmCallback, always_confirm
from .exceptions import CategoryNotFoundError, LastCategoryError

if TYPE_CHECKING:
    from .store import EntityStore
    from .view_state import ViewState

logger = logging.getLogger("prompt_organizer.categories")

ChildrenIndex = dict[str | None, list[Category]]


def build_children_index(categories: list[Category]) -> ChildrenIndex:
    """Return categories grouped by parent id, preserving collection order."""
    index: ChildrenIndex = {}
    for category in categories:
        index.setdefault(category.parent_id, []).append(category)
    return index


class CategoryTreeManager:
    """Maintain the nested folder hierarchy stored in an :class:`EntityStore`."""

    def __init__(
        self,
        store: EntityStore,
        view: ViewState,
        confirm: ConfirmCallback = always_confirm,
    ) -> None:
        self._store = store
        self._view = view
        self._confirm = confirm

    def require(self, category_id: str) -> Category:
        """Return a category or raise if not found."""
        category = self._store.find_category(category_id)
        if category is None:
            raise CategoryNotFoundError(f"Category '{category_id}' does not exist.")
        return category

    def children_index(self) -> ChildrenIndex:
        return build_children_index(self._store.categories)

    def children_of(self, category_id: str) -> list[Category]:
        """Return the direct children of *category_id* in collection order."""
        return list(self.children_index().get(category_id, []))

    def descendant_ids(self, category_id: str) -> list[str]:
        """Return every descendant id of *category_id*, breadth first."""
        index = self.children_index()
        visited: set[str] = {category_id}
        ordered: list[str] = []
        queue: deque[str] = deque([category_id])
        while queue:
            current = queue.popleft()
            for child in index.get(current, []):
                if child.id in visited:
                    continue
                visited.add(child.id)
                ordered.append(child.id)
                queue.append(child.id)
        return ordered

    def roots(self) -> list[Category]:
        """Return top-level categories for tree rendering.

        Orphans whose parent is missing count as roots, and so does the first
        member (in collection order) of any parent cycle not reachable otherwise.
        """
        known = {category.id for category in self._store.categories}
        roots = [
            category
            for category in self._store.categories
            if category.parent_id is None or category.parent_id not in known
        ]
        reached: set[str] = set()
        for root in roots:
            reached.add(root.id)
            reached.update(self.descendant_ids(root.id))
        for category in self._store.categories:
            if category.id in reached:
                continue
            roots.append(category)
            reached.add(category.id)
            reached.update(self.descendant_ids(category.id))
        return roots

    def iter_tree(self, *, expanded_only: bool = False) -> Iterator[tuple[Category, int]]:
        """Yield ``(category, depth)`` pairs in sidebar (pre-order) sequence."""
        index = self.children_index()
        seen: set[str] = set()

        def _walk(category: Category, depth: int) -> Iterator[tuple[Category, int]]:
            if category.id in seen:
                return
            seen.add(category.id)
            yield category, depth
            if expanded_only and not self._view.is_expanded(category.id):
                return
            for child in index.get(category.id, []):
                yield from _walk(child, depth + 1)

        for root in self.roots():
            yield from _walk(root, 0)

    def add_category(self, parent_id: str | None = None) -> Category:
        """Append a new category and place it into the editing selection."""
        if parent_id is not None:
            self.require(parent_id)
        category = Category.create(parent_id)
        self._store.categories.append(category)
        self._store.persist()
        self._view.editing_category_id = category.id
        self._view.select(category.id)
        if parent_id is not None:
            self._view.expand(parent_id)
        logger.info(
            "Category created",
            extra={"category_id": category.id, "parent_id": parent_id},
        )
        return category

    def rename_category(self, category_id: str, new_name: str) -> bool:
        """Rename a category; blank names leave it untouched and return False."""
        category = self.require(category_id)
        self._view.editing_category_id = None
        if not new_name.strip():
            logger.debug("Ignoring blank rename", extra={"category_id": category_id})
            return False
        category.name = new_name
        self._store.persist()
        return True

    def delete_category(self, category_id: str) -> list[str]:
        """Delete a category and its descendants, moving their prompts to the trash.

        Returns the removed ids (the target first), or an empty list when the
        confirmation callback declines. Raises :class:`LastCategoryError` when the
        organizer would be left without the category it requires.
        """
        self.require(category_id)
        if len(self._store.categories) <= 1:
            logger.warning("Refusing to delete the last category %s", category_id)
            raise LastCategoryError("You must have at least one category.")
        if not self._confirm(DELETE_CATEGORY_MESSAGE):
            return []

        removed = [category_id, *self.descendant_ids(category_id)]
        removed_set = set(removed)
        for prompt in self._store.prompts:
            if prompt.category_id in removed_set:
                prompt.category_id = TRASH_CATEGORY_ID
        self._store.categories = [
            category for category in self._store.categories if category.id not in removed_set
        ]
        self._store.persist()

        if self._view.active_category_id in removed_set:
            self._view.select(ALL_CATEGORY_ID)
        self._view.expanded.difference_update(removed_set)
        if self._view.editing_category_id in removed_set:
            self._view.editing_category_id = None
        logger.info(
            "Deleted category subtree",
            extra={"category_id": category_id, "removed": len(removed)},
        )
        return removed

    def toggle_expanded(self, category_id: str) -> bool:
        """Flip the sidebar expansion flag of an existing category."""
        self.require(category_id)
        return self._view.toggle_expanded(category_id)


__all__ = ["CategoryTreeManager", "build_children_index"]
