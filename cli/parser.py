"""Argument parser for Prompt Organizer CLI.

Updates:
  v0.2.0 - 2026-10-04 - Add backup import/export and script generation commands.
  v0.1.0 - 2026-09-22 - Category and prompt management sub-commands.
"""

from __future__ import annotations

import argparse
from collections.abc import Sequence
from pathlib import Path

from core.backup import ImportMode
from core.view_state import SortOption


def build_parser() -> argparse.ArgumentParser:
    """Return the argument parser for the Prompt Organizer launcher."""
    parser = argparse.ArgumentParser(
        prog="prompt-organizer",
        description="Prompt Organizer command line",
    )
    parser.add_argument(
        "--logging-config",
        type=Path,
        default=None,
        help="Path to logging configuration file (INI format)",
    )
    parser.add_argument(
        "--print-settings",
        action="store_true",
        help="Print resolved settings and exit",
    )
    parser.add_argument(
        "--yes",
        "-y",
        dest="assume_yes",
        action="store_true",
        help="Confirm destructive actions without prompting.",
    )

    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("categories", help="Show the category tree.")

    category_add_parser = subparsers.add_parser(
        "category-add",
        help="Create a root collection or a sub-folder.",
    )
    category_add_parser.add_argument(
        "--parent",
        dest="parent_id",
        default=None,
        help="Parent category id (omit to create a root collection).",
    )
    category_add_parser.add_argument(
        "--name",
        default=None,
        help="Name to apply instead of the default placeholder.",
    )

    rename_parser = subparsers.add_parser("category-rename", help="Rename a category.")
    rename_parser.add_argument("category_id", help="Category id.")
    rename_parser.add_argument("name", help="New category name.")

    category_delete_parser = subparsers.add_parser(
        "category-delete",
        help="Delete a category and its sub-folders, moving their prompts to Trash.",
    )
    category_delete_parser.add_argument("category_id", help="Category id.")

    prompts_parser = subparsers.add_parser("prompts", help="List prompts in a view.")
    prompts_parser.add_argument(
        "--view",
        default="all",
        help="'all', 'trash' or a category id (default: all).",
    )
    prompts_parser.add_argument(
        "--search",
        default="",
        help="Case-insensitive text matched against titles and content.",
    )
    prompts_parser.add_argument(
        "--sort",
        choices=[option.value for option in SortOption],
        default=SortOption.NEWEST.value,
        help="Sort order (default: newest).",
    )
    prompts_parser.add_argument(
        "--json",
        dest="as_json",
        action="store_true",
        help="Emit the listing as JSON records.",
    )

    show_parser = subparsers.add_parser("prompt-show", help="Display a prompt.")
    show_parser.add_argument("prompt_id", help="Prompt id.")

    add_parser = subparsers.add_parser("prompt-add", help="Create a prompt.")
    add_parser.add_argument("--title", required=True, help="Prompt title.")
    content_group = add_parser.add_mutually_exclusive_group(required=True)
    content_group.add_argument("--content", default=None, help="Inline prompt text.")
    content_group.add_argument(
        "--content-file",
        type=Path,
        default=None,
        help="Path to a UTF-8 text file holding the prompt text.",
    )
    add_parser.add_argument(
        "--category",
        dest="category_id",
        default=None,
        help="Target category id (defaults to the first category).",
    )
    add_parser.add_argument(
        "--image",
        type=Path,
        default=None,
        help="Optional image stored as a downscaled thumbnail.",
    )

    delete_parser = subparsers.add_parser(
        "prompt-delete",
        help="Move a prompt to Trash, or erase it when it is already trashed.",
    )
    delete_parser.add_argument("prompt_id", help="Prompt id.")

    restore_parser = subparsers.add_parser(
        "prompt-restore",
        help="Restore a trashed prompt into the first category.",
    )
    restore_parser.add_argument("prompt_id", help="Prompt id.")

    move_parser = subparsers.add_parser("prompt-move", help="Reassign a prompt's category.")
    move_parser.add_argument("prompt_id", help="Prompt id.")
    move_parser.add_argument("category_id", help="Target category id or 'trash'.")

    subparsers.add_parser("trash-empty", help="Permanently erase every trashed prompt.")

    export_parser = subparsers.add_parser(
        "backup-export",
        help="Write a dated JSON backup of all categories and prompts.",
    )
    export_parser.add_argument(
        "path",
        nargs="?",
        type=Path,
        default=None,
        help="Destination file or directory (defaults to the configured backup_dir).",
    )

    import_parser = subparsers.add_parser(
        "backup-import",
        help="Load a backup file and merge or overwrite the current data.",
    )
    import_parser.add_argument("path", type=Path, help="Backup JSON file.")
    import_parser.add_argument(
        "--mode",
        choices=[mode.value for mode in ImportMode],
        required=True,
        help="'merge' keeps existing items; 'overwrite' replaces everything.",
    )

    generate_parser = subparsers.add_parser(
        "generate-script",
        help="Ask the configured LiteLLM model for a desktop application script.",
    )
    generate_parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write the generated script to this file instead of stdout.",
    )

    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Return parsed CLI arguments for the Prompt Organizer launcher."""
    return build_parser().parse_args(argv)


__all__ = ["build_parser", "parse_args"]
