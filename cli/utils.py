"""Shared CLI utility functions for Prompt Organizer commands.

Updates:
  v0.1.1 - 2026-10-02 - Add prompt preview and interactive confirmation helpers.
  v0.1.0 - 2026-09-22 - Stdout logging, masking and path description helpers.
"""

from __future__ import annotations

import sys
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:  # pragma: no cover - typing helpers
    from logging import Logger
else:  # pragma: no cover - runtime placeholders for type-only imports
    Logger = Any


def print_and_log(logger: Logger, level: int, message: str) -> None:
    """Log *message* at *level* and mirror it to stdout."""
    logger.log(level, message)
    print(message)


def mask_secret(value: str | None) -> str:
    """Return an obfuscated representation of secret configuration values."""
    if not value:
        return "not set"
    secret = value.strip()
    if len(secret) <= 6:
        return "set (****)"
    return f"set ({secret[:4]}...{secret[-4:]})"


def describe_path(
    path_value: object,
    *,
    expect_directory: bool,
    allow_missing: bool = False,
) -> str:
    """Return a human-friendly description of *path_value* suitability."""
    if path_value is None:
        return "not set"
    resolved = Path(str(path_value)).expanduser()
    if resolved.exists():
        if expect_directory and not resolved.is_dir():
            return f"{resolved} (exists but is not a directory)"
        if not expect_directory and resolved.is_dir():
            return f"{resolved} (exists but is a directory)"
        return f"{resolved} (exists)"
    message = f"{resolved} (missing)"
    if allow_missing:
        message = f"{resolved} (missing - created on demand)"
    return message


def preview_text(text: str, width: int = 60) -> str:
    """Collapse whitespace in *text* and truncate it to *width* characters."""
    flattened = " ".join(text.split())
    if len(flattened) <= width:
        return flattened
    return flattened[: max(0, width - 3)].rstrip() + "..."


def make_interactive_confirm(
    *,
    assume_yes: bool,
    input_fn: Callable[[str], str] = input,
    is_interactive: Callable[[], bool] | None = None,
) -> Callable[[str], bool]:
    """Return a confirmation callback for destructive CLI actions.

    ``--yes`` confirms everything; otherwise the user is asked ``[y/N]`` and a
    non-interactive stdin declines.
    """
    interactive = is_interactive or sys.stdin.isatty

    def _confirm(message: str) -> bool:
        if assume_yes:
            return True
        if not interactive():
            return False
        try:
            response = input_fn(f"{message} [y/N]: ")
        except EOFError:
            return False
        return response.strip().lower() in {"y", "yes"}

    return _confirm


__all__ = [
    "describe_path",
    "make_interactive_confirm",
    "mask_secret",
    "preview_text",
    "print_and_log",
]
