"""Lightweight integration checks for the main module and CLI commands.

Updates:
  v0.2.1 - 2026-10-17 - Check that the dispatch table matches the parser sub-commands.
  v0.2.0 - 2026-10-04 - Cover backup import/export and generate-script commands.
  v0.1.1 - 2026-09-30 - Cover --print-settings summary with masked API keys.
  v0.1.0 - 2026-09-22 - Cover category and prompt commands against JSON storage.
"""

from __future__ import annotations

import argparse
import dataclasses
import io
import json
from pathlib import Path

import pytest

import main
from cli.commands import COMMAND_SPECS, CommandSpec
from cli.parser import build_parser
from cli.utils import make_interactive_confirm, mask_secret, preview_text
from config.settings import _ENV_KEYS, ENV_PREFIX


@pytest.fixture(autouse=True)
def _cli_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    for keys in _ENV_KEYS.values():
        for key in keys:
            monkeypatch.delenv(f"{ENV_PREFIX}{key.upper()}", raising=False)
            monkeypatch.delenv(key, raising=False)
    monkeypatch.delenv("PROMPT_ORGANIZER_CONFIG_JSON", raising=False)
    monkeypatch.setenv("PROMPT_ORGANIZER_ENV_FILE", "")
    monkeypatch.chdir(tmp_path)
    data_dir = tmp_path / "data"
    monkeypatch.setenv("PROMPT_ORGANIZER_DATA_DIR", str(data_dir))
    return data_dir


def _stored_prompts(data_dir: Path) -> list[dict[str, object]]:
    return json.loads((data_dir / "pa_prompts.json").read_text(encoding="utf-8"))


def test_print_settings_masks_api_key(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    monkeypatch.setenv("PROMPT_ORGANIZER_LITELLM_API_KEY", "sk-test-1234567890")

    assert main.main(["--print-settings"]) == 0

    output = capsys.readouterr().out
    assert "Prompt Organizer configuration summary" in output
    assert "sk-test-1234567890" not in output
    assert "set (sk-t...7890)" in output


def test_invalid_settings_exit_code(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PROMPT_ORGANIZER_STORAGE_BACKEND", "postgres")

    assert main.main(["categories"]) == 2


def test_default_command_reports_status(capsys: pytest.CaptureFixture[str]) -> None:
    assert main.main([]) == 0

    assert "4 categories, 0 prompts, 0 in Trash." in capsys.readouterr().out


def test_categories_lists_default_tree(capsys: pytest.CaptureFixture[str]) -> None:
    assert main.main(["categories"]) == 0

    output = capsys.readouterr().out
    assert "All Prompts (0)" in output
    assert "  Work [1] (0)" in output
    assert "Trash (0)" in output


def test_category_add_with_parent_and_name(capsys: pytest.CaptureFixture[str]) -> None:
    assert main.main(["category-add", "--parent", "1", "--name", "Clients"]) == 0
    assert main.main(["categories"]) == 0

    output = capsys.readouterr().out
    assert "    Clients [" in output


def test_category_add_unknown_parent_fails() -> None:
    assert main.main(["category-add", "--parent", "nope"]) == 4


def test_prompt_workflow_through_trash(
    _cli_environment: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    assert main.main(["prompt-add", "--title", "Greeting", "--content", "Say hello"]) == 0
    prompt_id = str(_stored_prompts(_cli_environment)[0]["id"])
    assert _stored_prompts(_cli_environment)[0]["categoryId"] == "1"

    assert main.main(["prompt-delete", prompt_id]) == 0
    assert _stored_prompts(_cli_environment)[0]["categoryId"] == "trash"

    assert main.main(["prompt-restore", prompt_id]) == 0
    assert _stored_prompts(_cli_environment)[0]["categoryId"] == "1"

    assert main.main(["prompt-move", prompt_id, "2"]) == 0
    assert _stored_prompts(_cli_environment)[0]["categoryId"] == "2"

    capsys.readouterr()
    assert main.main(["prompts", "--view", "2", "--json"]) == 0
    listed = json.loads(capsys.readouterr().out)
    assert [record["title"] for record in listed] == ["Greeting"]


def test_prompt_add_from_file_and_search(
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    content_file = tmp_path / "prompt.txt"
    content_file.write_text("Summarise the quarterly report", encoding="utf-8")
    assert main.main(["prompt-add", "--title", "Report", "--content-file", str(content_file)]) == 0
    assert main.main(["prompt-add", "--title", "Other", "--content", "unrelated"]) == 0
    capsys.readouterr()

    assert main.main(["prompts", "--search", "QUARTERLY"]) == 0

    output = capsys.readouterr().out
    assert "Report" in output
    assert "Other" not in output


def test_prompt_add_rejects_unknown_category() -> None:
    assert main.main(["prompt-add", "--title", "T", "--content", "C", "--category", "zz"]) == 4


def test_prompt_move_to_all_is_rejected(_cli_environment: Path) -> None:
    main.main(["prompt-add", "--title", "T", "--content", "C"])
    prompt_id = str(_stored_prompts(_cli_environment)[0]["id"])

    assert main.main(["prompt-move", prompt_id, "all"]) == 4


def test_destructive_commands_decline_without_tty(
    _cli_environment: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO(""))
    main.main(["prompt-add", "--title", "T", "--content", "C"])
    prompt_id = str(_stored_prompts(_cli_environment)[0]["id"])
    main.main(["prompt-delete", prompt_id])

    assert main.main(["trash-empty"]) == 0
    assert len(_stored_prompts(_cli_environment)) == 1

    assert main.main(["--yes", "trash-empty"]) == 0
    assert _stored_prompts(_cli_environment) == []


def test_category_delete_moves_prompts_to_trash(_cli_environment: Path) -> None:
    main.main(["prompt-add", "--title", "T", "--content", "C", "--category", "3"])

    assert main.main(["--yes", "category-delete", "3"]) == 0

    assert _stored_prompts(_cli_environment)[0]["categoryId"] == "trash"
    categories = json.loads((_cli_environment / "pa_categories.json").read_text())
    assert [category["id"] for category in categories] == ["1", "2", "4"]


def test_backup_export_and_overwrite_import(_cli_environment: Path, tmp_path: Path) -> None:
    main.main(["prompt-add", "--title", "Keep me", "--content", "C"])
    backup_path = tmp_path / "backup.json"
    assert main.main(["backup-export", str(backup_path)]) == 0

    main.main(["--yes", "category-rename", "1", "Renamed"])
    main.main(["prompt-add", "--title", "Later", "--content", "D"])

    assert main.main(["backup-import", str(backup_path), "--mode", "overwrite"]) == 0

    titles = [record["title"] for record in _stored_prompts(_cli_environment)]
    assert titles == ["Keep me"]
    categories = json.loads((_cli_environment / "pa_categories.json").read_text())
    assert categories[0]["name"] == "Work"


def test_backup_export_defaults_to_backup_dir(_cli_environment: Path) -> None:
    assert main.main(["backup-export"]) == 0

    written = list((_cli_environment / "backups").glob("prompt-manager-backup-*.json"))
    assert len(written) == 1


def test_backup_import_rejects_invalid_file(tmp_path: Path) -> None:
    broken = tmp_path / "broken.json"
    broken.write_text(json.dumps({"categories": []}), encoding="utf-8")

    assert main.main(["backup-import", str(broken), "--mode", "merge"]) == 5


def test_generate_script_without_model_writes_placeholder(tmp_path: Path) -> None:
    output = tmp_path / "app.py"

    assert main.main(["generate-script", "--output", str(output)]) == 6

    assert output.read_text(encoding="utf-8").startswith("# Failed to generate Python script.")


def test_make_interactive_confirm_parses_answers() -> None:
    answers = iter(["y", "", "YES"])
    confirm = make_interactive_confirm(
        assume_yes=False,
        input_fn=lambda _prompt: next(answers),
        is_interactive=lambda: True,
    )

    assert [confirm("Delete?") for _ in range(3)] == [True, False, True]
    assert make_interactive_confirm(assume_yes=True, is_interactive=lambda: False)("x")


def test_cli_text_helpers() -> None:
    assert mask_secret(None) == "not set"
    assert mask_secret("abc") == "set (****)"
    assert preview_text("a  b\n c") == "a b c"
    assert preview_text("x" * 80, width=10) == "xxxxxxx..."


def test_every_subcommand_has_a_handler() -> None:
    parser = build_parser()
    subparsers = next(
        action for action in parser._actions if isinstance(action, argparse._SubParsersAction)
    )

    assert set(subparsers.choices) | {None} == set(COMMAND_SPECS)
    assert [field.name for field in dataclasses.fields(CommandSpec)] == ["handler"]
