"""Tests for backup export and merge/overwrite import reconciliation.

Updates:
  v0.1.1 - 2026-09-30 - Cover malformed documents and duplicate ids inside imports.
  v0.1.0 - 2026-09-26 - Cover export snapshots and both import modes.
"""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path

import pytest

from core.backup import (
    BACKUP_FORMAT_VERSION,
    BackupReconciler,
    ImportMode,
    ImportStatus,
    backup_filename,
    parse_backup_document,
)
from core.exceptions import BackupFormatError
from core.storage import MemoryStorage
from core.store import EntityStore
from models.category_model import Category
from models.prompt_model import PromptEntry


def _store() -> EntityStore:
    return EntityStore(
        MemoryStorage(),
        categories=[
            Category(id="c1", name="Work"),
            Category(id="c2", name="Drafts", parent_id="c1"),
        ],
        prompts=[
            PromptEntry(id="p1", title="Live", content="x", category_id="c1", created_at=10),
            PromptEntry(
                id="p2",
                title="Binned",
                content="y",
                category_id="trash",
                created_at=20,
                image="data:image/jpeg;base64,AAAA",
            ),
        ],
    )


def _document(**overrides: object) -> dict[str, object]:
    document: dict[str, object] = {
        "version": "1.1",
        "categories": [{"id": "c1", "name": "Imported Work"}, {"id": "c9", "name": "New"}],
        "prompts": [
            {"id": "p1", "title": "Changed", "content": "z", "categoryId": "c1", "createdAt": 5},
            {"id": "p9", "title": "Fresh", "content": "w", "categoryId": "c9", "createdAt": 30},
        ],
        "exportedAt": "2026-10-01T10:00:00.000Z",
    }
    document.update(overrides)
    return document


def test_backup_filename_uses_calendar_date() -> None:
    assert backup_filename(datetime(2026, 3, 7, 23, 59)) == "prompt-manager-backup-2026-03-07.json"


def test_export_snapshot_includes_trash_and_metadata() -> None:
    snapshot = BackupReconciler(_store()).export_snapshot()

    assert snapshot["version"] == BACKUP_FORMAT_VERSION
    assert [record["id"] for record in snapshot["categories"]] == ["c1", "c2"]
    assert snapshot["categories"][1]["parentId"] == "c1"
    assert [record["id"] for record in snapshot["prompts"]] == ["p1", "p2"]
    assert snapshot["prompts"][1]["categoryId"] == "trash"
    assert snapshot["prompts"][1]["image"].startswith("data:image/jpeg")
    assert str(snapshot["exportedAt"]).endswith("Z")


def test_export_to_directory_writes_dated_file(tmp_path: Path) -> None:
    written = BackupReconciler(_store()).export_to_file(tmp_path)

    assert written.parent == tmp_path
    assert written.name.startswith("prompt-manager-backup-")
    payload = json.loads(written.read_text(encoding="utf-8"))
    assert len(payload["prompts"]) == 2


def test_export_to_explicit_file(tmp_path: Path) -> None:
    target = tmp_path / "nested" / "snapshot.json"

    written = BackupReconciler(_store()).export_to_file(target)

    assert written == target
    assert target.exists()


def test_overwrite_round_trip_reproduces_store() -> None:
    """Exporting then importing in overwrite mode yields identical collections."""
    source = _store()
    snapshot = BackupReconciler(source).export_snapshot()

    target = EntityStore(MemoryStorage(), categories=[Category(id="zz", name="Other")])
    reconciler = BackupReconciler(target)
    reconciler.parse_import_candidate(json.dumps(snapshot))
    result = reconciler.finalize_import(ImportMode.OVERWRITE)

    assert result is not None
    assert target.categories == source.categories
    assert target.prompts == source.prompts
    assert reconciler.pending is None


def test_merge_keeps_existing_records_and_appends_new_ones() -> None:
    store = _store()
    reconciler = BackupReconciler(store)
    reconciler.parse_import_candidate(_document())

    result = reconciler.finalize_import("merge")

    assert result is not None
    assert [category.id for category in store.categories] == ["c1", "c2", "c9"]
    assert store.find_category("c1").name == "Work"
    assert [prompt.id for prompt in store.prompts] == ["p1", "p2", "p9"]
    assert store.find_prompt("p1").title == "Live"
    summary = result.summary()
    assert summary["category_added"] == 1
    assert summary["category_skipped"] == 1
    assert summary["prompt_added"] == 1
    assert summary["prompt_skipped"] == 1
    assert {outcome.record_id for outcome in result.skipped} == {"c1", "p1"}


def test_merge_deduplicates_ids_within_the_import() -> None:
    store = EntityStore(MemoryStorage())
    reconciler = BackupReconciler(store)
    reconciler.parse_import_candidate(
        _document(categories=[{"id": "d", "name": "First"}, {"id": "d", "name": "Second"}])
    )

    result = reconciler.finalize_import(ImportMode.MERGE)

    assert [category.name for category in store.categories] == ["First"]
    statuses = [o.status for o in result.outcomes if o.kind == "category"]
    assert statuses == [ImportStatus.ADDED, ImportStatus.SKIPPED]


def test_merge_is_idempotent() -> None:
    store = _store()
    reconciler = BackupReconciler(store)
    for _ in range(2):
        reconciler.parse_import_candidate(_document())
        reconciler.finalize_import(ImportMode.MERGE)

    assert [prompt.id for prompt in store.prompts] == ["p1", "p2", "p9"]


def test_cancel_import_discards_candidate() -> None:
    store = _store()
    reconciler = BackupReconciler(store)
    reconciler.parse_import_candidate(_document())

    reconciler.cancel_import()

    assert reconciler.pending is None
    assert reconciler.finalize_import(ImportMode.OVERWRITE) is None
    assert len(store.categories) == 2


def test_invalid_json_raises_parse_error() -> None:
    with pytest.raises(BackupFormatError, match="Error parsing backup file."):
        parse_backup_document("{not json")


@pytest.mark.parametrize(
    "document",
    [
        {"prompts": []},
        {"categories": []},
        {"categories": "nope", "prompts": []},
        {"categories": [1, 2], "prompts": []},
        {"categories": [{"name": "no id"}], "prompts": []},
        ["not", "an", "object"],
    ],
)
def test_malformed_documents_are_rejected(document: object) -> None:
    with pytest.raises(BackupFormatError, match="Invalid backup file format"):
        parse_backup_document(json.dumps(document))


def test_rejected_import_leaves_store_untouched() -> None:
    store = _store()
    reconciler = BackupReconciler(store)

    with pytest.raises(BackupFormatError):
        reconciler.parse_import_candidate(json.dumps({"categories": []}))

    assert reconciler.pending is None
    assert [prompt.id for prompt in store.prompts] == ["p1", "p2"]


def test_load_import_file_reports_missing_file(tmp_path: Path) -> None:
    with pytest.raises(BackupFormatError):
        BackupReconciler(_store()).load_import_file(tmp_path / "absent.json")


def test_legacy_document_without_version_is_accepted() -> None:
    candidate = parse_backup_document({"categories": [], "prompts": []})

    assert candidate.version is None
    assert candidate.categories == []
