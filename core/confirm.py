"""Confirmation callbacks gating destructive organizer actions.

Updates: v0.1.0 - 2026-09-18 - Introduce confirmation callback type and defaults.
"""

from __future__ import annotations

from collections.abc import Callable

ConfirmCallback = Callable[[str], bool]

DELETE_CATEGORY_MESSAGE = "Delete this folder? Its prompts will be moved to Trash."
ERASE_PROMPT_MESSAGE = "Permanently delete this prompt? This action cannot be undone."
EMPTY_TRASH_MESSAGE = (
    "Are you sure you want to empty the trash? "
    "All prompts inside will be permanently deleted."
)


def always_confirm(_message: str) -> bool:
    """Approve every destructive action (non-interactive callers)."""
    return True


def never_confirm(_message: str) -> bool:
    """Decline every destructive action."""
    return False


__all__ = [
    "ConfirmCallback",
    "DELETE_CATEGORY_MESSAGE",
    "EMPTY_TRASH_MESSAGE",
    "ERASE_PROMPT_MESSAGE",
    "always_confirm",
    "never_confirm",
]
