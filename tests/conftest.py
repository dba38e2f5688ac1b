"""Pytest configuration for shared test fixtures.

Updates:
  v0.2.0 - 2026-10-04 - Add organizer fixture with a recording confirmation callback.
  v0.1.0 - 2026-09-19 - Provide memory-backed store fixtures.
"""

from __future__ import annotations

import pytest

from core.organizer import PromptOrganizer
from core.storage import MemoryStorage
from core.store import EntityStore
from models.category_model import Category
from models.prompt_model import PromptEntry


class RecordingConfirm:
    """Confirmation callback that records messages and returns a fixed answer."""

    def __init__(self, answer: bool = True) -> None:
        self.answer = answer
        self.messages: list[str] = []

    def __call__(self, message: str) -> bool:
        self.messages.append(message)
        return self.answer


@pytest.fixture
def memory_storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def confirm() -> RecordingConfirm:
    return RecordingConfirm()


@pytest.fixture
def work_store(memory_storage: MemoryStorage) -> EntityStore:
    """Store with a single "Work" collection holding one prompt."""
    return EntityStore(
        memory_storage,
        categories=[Category(id="w1", name="Work")],
        prompts=[
            PromptEntry(id="p1", title="Test", content="Body", category_id="w1", created_at=1_000)
        ],
    )


@pytest.fixture
def organizer(memory_storage: MemoryStorage, confirm: RecordingConfirm) -> PromptOrganizer:
    """Organizer seeded with the default collections."""
    return PromptOrganizer(EntityStore.load(memory_storage), confirm=confirm)
