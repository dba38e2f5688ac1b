"""Export, parse, and reconcile organizer backup documents.

Updates:
  v0.3.0 - 2026-10-03 - Report per-record merge outcomes instead of silently filtering.
  v0.2.0 - 2026-09-27 - Write dated backup files and read import candidates from disk.
  v0.1.0 - 2026-09-17 - Introduce snapshot export and merge/overwrite import.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any, cast

from models.category_model import Category
from models.prompt_model import PromptEntry

from .exceptions import BackupFormatError

if TYPE_CHECKING:
    from .store import EntityStore

logger = logging.getLogger("prompt_organizer.backup")

BACKUP_FORMAT_VERSION = "1.1"
BACKUP_FILENAME_PREFIX = "prompt-manager-backup-"


def _now_iso() -> str:
    """Return the current UTC timestamp in ISO-8601 format."""
    return datetime.now(UTC).isoformat().replace("+00:00", "Z")


def backup_filename(moment: datetime | None = None) -> str:
    """Return the dated file name used for downloaded backups."""
    stamp = (moment or datetime.now(UTC)).date().isoformat()
    return f"{BACKUP_FILENAME_PREFIX}{stamp}.json"


class ImportMode(str, Enum):
    """Reconciliation strategies for applying an imported backup."""

    MERGE = "merge"
    OVERWRITE = "overwrite"


class ImportStatus(str, Enum):
    """Per-record outcome of an import."""

    ADDED = "added"
    SKIPPED = "skipped"
    REPLACED = "replaced"


@dataclass(slots=True, frozen=True)
class ImportOutcome:
    """Decision taken for a single imported record."""

    kind: str
    record_id: str
    status: ImportStatus


def _outcome_list_factory() -> list[ImportOutcome]:
    return []


@dataclass(slots=True)
class ImportResult:
    """Aggregate statistics and per-record outcomes from an import."""

    mode: ImportMode
    outcomes: list[ImportOutcome] = field(default_factory=_outcome_list_factory)

    def _count(self, kind: str, status: ImportStatus) -> int:
        return sum(
            1 for outcome in self.outcomes if outcome.kind == kind and outcome.status is status
        )

    @property
    def skipped(self) -> list[ImportOutcome]:
        """Return the records dropped because their id already existed."""
        return [outcome for outcome in self.outcomes if outcome.status is ImportStatus.SKIPPED]

    def summary(self) -> dict[str, int]:
        """Return counters keyed by ``<kind>_<status>`` for reporting."""
        counters: dict[str, int] = {}
        for kind in ("category", "prompt"):
            for status in ImportStatus:
                counters[f"{kind}_{status.value}"] = self._count(kind, status)
        return counters


@dataclass(slots=True)
class ImportCandidate:
    """Parsed backup contents awaiting a reconciliation-mode decision."""

    categories: list[Category]
    prompts: list[PromptEntry]
    version: str | None = None
    exported_at: str | None = None


def _records(payload: Mapping[str, Any], key: str) -> list[dict[str, Any]]:
    value = payload.get(key)
    if not isinstance(value, list):
        raise BackupFormatError(f"Invalid backup file format: '{key}' must be a list.")
    records: list[dict[str, Any]] = []
    for raw_entry in cast("list[object]", value):
        if not isinstance(raw_entry, dict):
            raise BackupFormatError(f"Invalid backup file format: '{key}' entries must be objects.")
        entry = cast("dict[str, Any]", raw_entry)
        if entry.get("id") in (None, ""):
            raise BackupFormatError(f"Invalid backup file format: '{key}' entry without an id.")
        records.append(entry)
    return records


def parse_backup_document(raw: str | bytes | Mapping[str, Any]) -> ImportCandidate:
    """Return an :class:`ImportCandidate` parsed from *raw* backup contents."""
    if isinstance(raw, Mapping):
        payload: object = raw
    else:
        try:
            text = raw.decode("utf-8") if isinstance(raw, bytes) else raw
            payload = json.loads(text)
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise BackupFormatError("Error parsing backup file.") from exc
    if not isinstance(payload, Mapping):
        raise BackupFormatError("Invalid backup file format.")
    document = cast("Mapping[str, Any]", payload)
    if document.get("categories") is None or document.get("prompts") is None:
        raise BackupFormatError("Invalid backup file format.")
    try:
        categories = [Category.from_record(entry) for entry in _records(document, "categories")]
        prompts = [PromptEntry.from_record(entry) for entry in _records(document, "prompts")]
    except (KeyError, TypeError, ValueError) as exc:
        raise BackupFormatError(f"Invalid backup file format: {exc}") from exc
    version = document.get("version")
    exported_at = document.get("exportedAt")
    return ImportCandidate(
        categories=categories,
        prompts=prompts,
        version=str(version) if version is not None else None,
        exported_at=str(exported_at) if exported_at is not None else None,
    )


def _merge_records(
    existing: Sequence[Any],
    incoming: Sequence[Any],
    kind: str,
    outcomes: list[ImportOutcome],
) -> list[Any]:
    """Append incoming records whose id is not yet known; existing records win.

    Ids repeated inside *incoming* are also skipped after their first occurrence,
    so a merge never introduces duplicate ids.
    """
    known = {record.id for record in existing}
    merged = list(existing)
    for record in incoming:
        if record.id in known:
            outcomes.append(ImportOutcome(kind, record.id, ImportStatus.SKIPPED))
            continue
        known.add(record.id)
        merged.append(record)
        outcomes.append(ImportOutcome(kind, record.id, ImportStatus.ADDED))
    return merged


class BackupReconciler:
    """Serialize the store to backups and apply imported backups to it."""

    def __init__(self, store: EntityStore) -> None:
        self._store = store
        self._pending: ImportCandidate | None = None

    @property
    def pending(self) -> ImportCandidate | None:
        """Return the candidate awaiting :meth:`finalize_import`, if any."""
        return self._pending

    def export_snapshot(self) -> dict[str, Any]:
        """Return the full data set, trashed prompts included."""
        return {
            "version": BACKUP_FORMAT_VERSION,
            "categories": [category.to_record() for category in self._store.categories],
            "prompts": [prompt.to_record() for prompt in self._store.prompts],
            "exportedAt": _now_iso(),
        }

    def export_to_file(self, destination: Path) -> Path:
        """Write the snapshot to *destination* (a file, or a directory for a dated name)."""
        target = destination.expanduser()
        if target.is_dir() or not target.suffix:
            target = target / backup_filename()
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(
            json.dumps(self.export_snapshot(), ensure_ascii=False, indent=2),
            encoding="utf-8",
        )
        logger.info(
            "Backup exported",
            extra={
                "path": str(target),
                "categories": len(self._store.categories),
                "prompts": len(self._store.prompts),
            },
        )
        return target

    def parse_import_candidate(self, raw: str | bytes | Mapping[str, Any]) -> ImportCandidate:
        """Validate *raw* and hold it as the pending import candidate."""
        candidate = parse_backup_document(raw)
        self._pending = candidate
        return candidate

    def load_import_file(self, path: Path) -> ImportCandidate:
        """Read a backup file from disk and hold it as the pending candidate."""
        try:
            raw = path.expanduser().read_bytes()
        except OSError as exc:
            raise BackupFormatError(f"Cannot read backup file: {path}") from exc
        return self.parse_import_candidate(raw)

    def cancel_import(self) -> None:
        """Discard the pending candidate without touching the store."""
        self._pending = None

    def finalize_import(self, mode: ImportMode | str) -> ImportResult | None:
        """Apply the pending candidate using *mode*; None when nothing is pending."""
        candidate = self._pending
        if candidate is None:
            return None
        resolved = ImportMode(mode)
        result = ImportResult(mode=resolved)
        if resolved is ImportMode.OVERWRITE:
            result.outcomes.extend(
                ImportOutcome("category", category.id, ImportStatus.REPLACED)
                for category in candidate.categories
            )
            result.outcomes.extend(
                ImportOutcome("prompt", prompt.id, ImportStatus.REPLACED)
                for prompt in candidate.prompts
            )
            self._store.replace(categories=candidate.categories, prompts=candidate.prompts)
        else:
            categories = _merge_records(
                self._store.categories, candidate.categories, "category", result.outcomes
            )
            prompts = _merge_records(
                self._store.prompts, candidate.prompts, "prompt", result.outcomes
            )
            self._store.replace(categories=categories, prompts=prompts)
        self._pending = None
        logger.info("Import successful (%s mode)", resolved.value, extra=result.summary())
        return result


__all__ = [
    "BACKUP_FORMAT_VERSION",
    "BackupReconciler",
    "ImportCandidate",
    "ImportMode",
    "ImportOutcome",
    "ImportResult",
    "ImportStatus",
    "backup_filename",
    "parse_backup_document",
]
