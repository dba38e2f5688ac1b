"""CLI command handlers for Prompt Organizer.

Updates:
  v0.3.1 - 2026-10-17 - Every command runs against a built organizer.
  v0.3.0 - 2026-10-04 - Add generate-script command writing LiteLLM output.
  v0.2.0 - 2026-09-27 - Add backup export and merge/overwrite import commands.
  v0.1.0 - 2026-09-22 - Category tree and prompt lifecycle commands.
"""

from __future__ import annotations

import argparse
import json
import logging
from collections import Counter
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any

from core import (
    BackupFormatError,
    CategoryNotFoundError,
    DeleteOutcome,
    ImageProcessingError,
    ImportMode,
    InvalidTargetError,
    LastCategoryError,
    PromptNotFoundError,
)
from core.organizer import GENERATION_FAILED_PLACEHOLDER
from models.category_model import TRASH_CATEGORY_ID

from .utils import preview_text, print_and_log

if TYPE_CHECKING:  # pragma: no cover - typing helpers
    from config import OrganizerSettings
    from core.organizer import PromptOrganizer
    from models.prompt_model import PromptEntry
else:  # pragma: no cover - runtime placeholders for type-only imports
    PromptOrganizer = object
    OrganizerSettings = Any

CommandHandler = Callable[
    [PromptOrganizer, OrganizerSettings, argparse.Namespace, logging.Logger], int
]

EXIT_OK = 0
EXIT_INVALID = 4
EXIT_IMPORT_FAILED = 5
EXIT_FILE_FAILED = 6


@dataclass(frozen=True)
class CommandSpec:
    """Metadata for dispatching CLI command handlers."""

    handler: CommandHandler


def _format_timestamp(created_at: int) -> str:
    return datetime.fromtimestamp(created_at / 1000).strftime("%Y-%m-%d %H:%M")


def _category_label(organizer: PromptOrganizer, prompt: PromptEntry) -> str:
    if prompt.is_trashed:
        return "Trash"
    category = organizer.store.find_category(prompt.category_id)
    return category.name if category is not None else f"unknown:{prompt.category_id}"


def run_status(
    organizer: PromptOrganizer,
    settings: OrganizerSettings,
    args: argparse.Namespace,
    logger: logging.Logger,
) -> int:
    """Report where data lives and how much of it there is."""
    del args
    counts = organizer.prompts.counts()
    location = settings.db_path if settings.storage_backend == "sqlite" else settings.data_dir
    print_and_log(
        logger,
        logging.INFO,
        f"Prompt Organizer ready ({settings.storage_backend} storage at {location}).",
    )
    print_and_log(
        logger,
        logging.INFO,
        f"{len(organizer.store.categories)} categories, {counts.active} prompts, "
        f"{counts.trashed} in Trash.",
    )
    return EXIT_OK


def run_categories(
    organizer: PromptOrganizer,
    settings: OrganizerSettings,
    args: argparse.Namespace,
    logger: logging.Logger,
) -> int:
    del settings, args, logger
    per_category = Counter(
        prompt.category_id for prompt in organizer.store.prompts if not prompt.is_trashed
    )
    counts = organizer.prompts.counts()
    lines = [f"All Prompts ({counts.active})"]
    for category, depth in organizer.categories.iter_tree():
        indent = "  " * (depth + 1)
        lines.append(f"{indent}{category.name} [{category.id}] ({per_category[category.id]})")
    lines.append(f"Trash ({counts.trashed})")
    print("\n".join(lines))
    return EXIT_OK


def run_category_add(
    organizer: PromptOrganizer,
    settings: OrganizerSettings,
    args: argparse.Namespace,
    logger: logging.Logger,
) -> int:
    del settings
    try:
        category = organizer.categories.add_category(getattr(args, "parent_id", None))
    except CategoryNotFoundError as exc:
        print_and_log(logger, logging.ERROR, str(exc))
        return EXIT_INVALID
    name = getattr(args, "name", None)
    if name and name.strip():
        organizer.categories.rename_category(category.id, name)
    print_and_log(logger, logging.INFO, f"Created category '{category.name}' [{category.id}]")
    return EXIT_OK


def run_category_rename(
    organizer: PromptOrganizer,
    settings: OrganizerSettings,
    args: argparse.Namespace,
    logger: logging.Logger,
) -> int:
    del settings
    try:
        renamed = organizer.categories.rename_category(args.category_id, args.name)
    except CategoryNotFoundError as exc:
        print_and_log(logger, logging.ERROR, str(exc))
        return EXIT_INVALID
    if not renamed:
        print_and_log(logger, logging.ERROR, "Category name cannot be blank.")
        return EXIT_INVALID
    print_and_log(logger, logging.INFO, f"Renamed category {args.category_id} to '{args.name}'")
    return EXIT_OK


def run_category_delete(
    organizer: PromptOrganizer,
    settings: OrganizerSettings,
    args: argparse.Namespace,
    logger: logging.Logger,
) -> int:
    del settings
    try:
        removed = organizer.categories.delete_category(args.category_id)
    except (CategoryNotFoundError, LastCategoryError) as exc:
        print_and_log(logger, logging.ERROR, str(exc))
        return EXIT_INVALID
    if not removed:
        print_and_log(logger, logging.INFO, "Category deletion cancelled.")
        return EXIT_OK
    print_and_log(
        logger,
        logging.INFO,
        f"Deleted {len(removed)} category(ies); their prompts were moved to Trash.",
    )
    return EXIT_OK


def run_prompts(
    organizer: PromptOrganizer,
    settings: OrganizerSettings,
    args: argparse.Namespace,
    logger: logging.Logger,
) -> int:
    del settings
    try:
        organizer.select_view(getattr(args, "view", "all") or "all")
    except CategoryNotFoundError as exc:
        print_and_log(logger, logging.ERROR, str(exc))
        return EXIT_INVALID
    organizer.set_search(getattr(args, "search", "") or "")
    organizer.set_sort(getattr(args, "sort", "newest") or "newest")
    prompts = organizer.visible_prompts()

    if getattr(args, "as_json", False):
        print(json.dumps([prompt.to_record() for prompt in prompts], ensure_ascii=False, indent=2))
        return EXIT_OK
    if not prompts:
        print("No prompts found.")
        return EXIT_OK
    for prompt in prompts:
        image_marker = " [image]" if prompt.image else ""
        print(
            f"{prompt.id}  {_format_timestamp(prompt.created_at)}  "
            f"[{_category_label(organizer, prompt)}]  {prompt.title}{image_marker}"
        )
        print(f"    {preview_text(prompt.content)}")
    return EXIT_OK


def run_prompt_show(
    organizer: PromptOrganizer,
    settings: OrganizerSettings,
    args: argparse.Namespace,
    logger: logging.Logger,
) -> int:
    del settings
    try:
        prompt = organizer.prompts.require(args.prompt_id)
    except PromptNotFoundError as exc:
        print_and_log(logger, logging.ERROR, str(exc))
        return EXIT_INVALID
    lines = [
        prompt.title,
        "-" * max(len(prompt.title), 3),
        f"ID: {prompt.id}",
        f"Category: {_category_label(organizer, prompt)}",
        f"Created: {_format_timestamp(prompt.created_at)}",
        f"Image: {'yes' if prompt.image else 'no'}",
        "",
        prompt.content,
    ]
    print("\n".join(lines))
    return EXIT_OK


def run_prompt_add(
    organizer: PromptOrganizer,
    settings: OrganizerSettings,
    args: argparse.Namespace,
    logger: logging.Logger,
) -> int:
    del settings
    content = getattr(args, "content", None)
    content_file: Path | None = getattr(args, "content_file", None)
    if content_file is not None:
        try:
            content = content_file.expanduser().read_text(encoding="utf-8")
        except OSError as exc:
            print_and_log(logger, logging.ERROR, f"Unable to read {content_file}: {exc}")
            return EXIT_INVALID
    try:
        prompt = organizer.add_prompt(
            args.title,
            content or "",
            getattr(args, "category_id", None),
            image_source=getattr(args, "image", None),
        )
    except ImageProcessingError as exc:
        print_and_log(logger, logging.ERROR, str(exc))
        return EXIT_INVALID
    if prompt is None:
        print_and_log(
            logger,
            logging.ERROR,
            "A title, prompt text and an existing category are required.",
        )
        return EXIT_INVALID
    print_and_log(logger, logging.INFO, f"Created prompt '{prompt.title}' [{prompt.id}]")
    return EXIT_OK


def run_prompt_delete(
    organizer: PromptOrganizer,
    settings: OrganizerSettings,
    args: argparse.Namespace,
    logger: logging.Logger,
) -> int:
    del settings
    try:
        outcome = organizer.prompts.soft_delete(args.prompt_id)
    except PromptNotFoundError as exc:
        print_and_log(logger, logging.ERROR, str(exc))
        return EXIT_INVALID
    messages = {
        DeleteOutcome.TRASHED: f"Moved prompt {args.prompt_id} to Trash.",
        DeleteOutcome.ERASED: f"Permanently deleted prompt {args.prompt_id}.",
        DeleteOutcome.DECLINED: "Deletion cancelled.",
    }
    print_and_log(logger, logging.INFO, messages[outcome])
    return EXIT_OK


def run_prompt_restore(
    organizer: PromptOrganizer,
    settings: OrganizerSettings,
    args: argparse.Namespace,
    logger: logging.Logger,
) -> int:
    del settings
    try:
        prompt = organizer.prompts.restore(args.prompt_id)
    except PromptNotFoundError as exc:
        print_and_log(logger, logging.ERROR, str(exc))
        return EXIT_INVALID
    if prompt is None:
        print_and_log(logger, logging.ERROR, "No category available to restore into.")
        return EXIT_INVALID
    label = _category_label(organizer, prompt)
    print_and_log(logger, logging.INFO, f"Prompt {prompt.id} is in '{label}'.")
    return EXIT_OK


def run_prompt_move(
    organizer: PromptOrganizer,
    settings: OrganizerSettings,
    args: argparse.Namespace,
    logger: logging.Logger,
) -> int:
    del settings
    target = args.category_id
    try:
        if target != TRASH_CATEGORY_ID:
            organizer.categories.require(target)
        prompt = organizer.prompts.reassign_category(args.prompt_id, target)
    except (CategoryNotFoundError, PromptNotFoundError, InvalidTargetError) as exc:
        print_and_log(logger, logging.ERROR, str(exc))
        return EXIT_INVALID
    label = _category_label(organizer, prompt)
    print_and_log(logger, logging.INFO, f"Moved prompt {prompt.id} to '{label}'.")
    return EXIT_OK


def run_trash_empty(
    organizer: PromptOrganizer,
    settings: OrganizerSettings,
    args: argparse.Namespace,
    logger: logging.Logger,
) -> int:
    del settings, args
    if organizer.prompts.counts().trashed == 0:
        print_and_log(logger, logging.INFO, "Trash is already empty.")
        return EXIT_OK
    removed = organizer.prompts.empty_trash()
    if not removed:
        print_and_log(logger, logging.INFO, "Emptying trash cancelled.")
        return EXIT_OK
    print_and_log(logger, logging.INFO, f"Permanently deleted {removed} prompt(s).")
    return EXIT_OK


def run_backup_export(
    organizer: PromptOrganizer,
    settings: OrganizerSettings,
    args: argparse.Namespace,
    logger: logging.Logger,
) -> int:
    destination: Path = getattr(args, "path", None) or settings.backup_dir
    try:
        written = organizer.backups.export_to_file(Path(destination))
    except OSError as exc:
        print_and_log(logger, logging.ERROR, f"Failed to export backup: {exc}")
        return EXIT_FILE_FAILED
    print_and_log(logger, logging.INFO, f"Backup exported to {written}")
    return EXIT_OK


def run_backup_import(
    organizer: PromptOrganizer,
    settings: OrganizerSettings,
    args: argparse.Namespace,
    logger: logging.Logger,
) -> int:
    del settings
    try:
        candidate = organizer.backups.load_import_file(Path(args.path))
    except BackupFormatError as exc:
        print_and_log(logger, logging.ERROR, str(exc))
        return EXIT_IMPORT_FAILED
    logger.info(
        "Loaded backup candidate",
        extra={
            "version": candidate.version,
            "categories": len(candidate.categories),
            "prompts": len(candidate.prompts),
        },
    )
    result = organizer.backups.finalize_import(ImportMode(args.mode))
    if result is None:  # pragma: no cover - candidate was just loaded
        print_and_log(logger, logging.ERROR, "No backup pending import.")
        return EXIT_IMPORT_FAILED
    summary = result.summary()
    details = ", ".join(f"{key.replace('_', ' ')}: {value}" for key, value in summary.items())
    print_and_log(
        logger,
        logging.INFO,
        f"Import successful ({result.mode.value}). {details}".rstrip(),
    )
    return EXIT_OK


def run_generate_script(
    organizer: PromptOrganizer,
    settings: OrganizerSettings,
    args: argparse.Namespace,
    logger: logging.Logger,
) -> int:
    del settings
    code = organizer.generate_desktop_script()
    output: Path | None = getattr(args, "output", None)
    if output is None:
        print(code)
    else:
        target = output.expanduser()
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(code + "\n", encoding="utf-8")
        except OSError as exc:
            print_and_log(logger, logging.ERROR, f"Failed to write script: {exc}")
            return EXIT_FILE_FAILED
        print_and_log(logger, logging.INFO, f"Script written to {target}")
    if code == GENERATION_FAILED_PLACEHOLDER:
        return EXIT_FILE_FAILED
    return EXIT_OK


COMMAND_SPECS: dict[str | None, CommandSpec] = {
    None: CommandSpec(run_status),
    "categories": CommandSpec(run_categories),
    "category-add": CommandSpec(run_category_add),
    "category-rename": CommandSpec(run_category_rename),
    "category-delete": CommandSpec(run_category_delete),
    "prompts": CommandSpec(run_prompts),
    "prompt-show": CommandSpec(run_prompt_show),
    "prompt-add": CommandSpec(run_prompt_add),
    "prompt-delete": CommandSpec(run_prompt_delete),
    "prompt-restore": CommandSpec(run_prompt_restore),
    "prompt-move": CommandSpec(run_prompt_move),
    "trash-empty": CommandSpec(run_trash_empty),
    "backup-export": CommandSpec(run_backup_export),
    "backup-import": CommandSpec(run_backup_import),
    "generate-script": CommandSpec(run_generate_script),
}


__all__ = ["COMMAND_SPECS", "CommandSpec"]
