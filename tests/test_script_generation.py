"""Tests for LiteLLM-backed desktop script generation.

Updates:
  v0.1.2 - 2026-10-17 - Cover LiteLLM installs without a completion API.
  v0.1.1 - 2026-10-04 - Cover placeholder output when generation fails.
  v0.1.0 - 2026-09-28 - Cover request construction and response parsing.
"""

from __future__ import annotations

import json
import types
from typing import TYPE_CHECKING, Any

import pytest

from core.exceptions import ScriptGenerationError
from core.litellm_adapter import (
    LiteLLMNotInstalledError,
    apply_configured_drop_params,
    call_completion_with_fallback,
    extract_message_content,
    get_completion,
    summarise_litellm_error,
)
from core.organizer import GENERATION_FAILED_PLACEHOLDER, NO_CODE_PLACEHOLDER, PromptOrganizer
from core.script_generation import LiteLLMScriptGenerator, build_script_request_text
from models.prompt_model import PromptEntry

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence


def _prompts() -> list[PromptEntry]:
    return [
        PromptEntry(
            id=f"p{index}",
            title=f"Prompt {index}",
            content=f"Content {index}",
            category_id="1",
            created_at=index,
            image="data:image/jpeg;base64,AAAA",
        )
        for index in range(3)
    ]


def _patch_completion(
    monkeypatch: pytest.MonkeyPatch,
    captured: dict[str, Any],
    response: object,
) -> None:
    def fake_get_completion() -> tuple[Callable[..., Any], type[Exception]]:
        def _completion(**_: Any) -> object:
            return response

        return _completion, RuntimeError

    def fake_call_completion(
        request: dict[str, Any],
        completion: Callable[..., Any],
        lite_llm_exception: type[Exception],  # noqa: ARG001
        *,
        drop_candidates: Sequence[str],
        pre_dropped: Sequence[str],
    ) -> object:
        captured["request"] = dict(request)
        captured["drop_candidates"] = set(drop_candidates)
        captured["pre_dropped"] = tuple(pre_dropped)
        return completion(**request)

    monkeypatch.setattr("core.script_generation.get_completion", fake_get_completion)
    monkeypatch.setattr(
        "core.script_generation.call_completion_with_fallback",
        fake_call_completion,
    )


def test_request_text_embeds_categories_and_two_samples_without_images() -> None:
    text = build_script_request_text(["Work", "Art"], _prompts())

    assert "Sidebar categories: Work, Art." in text
    assert "PyQt6" in text and "Pillow" in text
    samples_json = text.split("Sample prompt data for context: ", 1)[1].split("\n", 1)[0]
    samples = json.loads(samples_json)
    assert [sample["id"] for sample in samples] == ["p0", "p1"]
    assert all("image" not in sample for sample in samples)


def test_request_text_honours_template_override() -> None:
    text = build_script_request_text(
        ["Only"],
        [],
        template="  Build for {categories} using {samples}  ",
        sample_limit=0,
    )

    assert text == "Build for Only using []"


def test_generate_sends_single_user_message(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, Any] = {}
    _patch_completion(
        monkeypatch,
        captured,
        {"choices": [{"message": {"content": "```python\nprint('hi')\n```"}}]},
    )
    generator = LiteLLMScriptGenerator(
        model="gemini/gemini-2.5-flash",
        api_key="secret",
        timeout_seconds=12.0,
        drop_params=("api_base",),
    )

    result = generator.generate(["Work"], _prompts())

    assert result.startswith("```python")
    request = captured["request"]
    assert request["model"] == "gemini/gemini-2.5-flash"
    assert request["api_key"] == "secret"
    assert request["timeout"] == 12.0
    assert [message["role"] for message in request["messages"]] == ["user"]
    assert captured["drop_candidates"] == {"timeout"}


def test_generate_accepts_model_response(monkeypatch: pytest.MonkeyPatch) -> None:
    class _ModelResponse:
        def model_dump(self) -> dict[str, Any]:
            return {"choices": [{"message": {"content": "code"}}]}

    _patch_completion(monkeypatch, {}, _ModelResponse())

    assert LiteLLMScriptGenerator(model="m").generate([], []) == "code"


def test_generate_raises_when_content_missing(monkeypatch: pytest.MonkeyPatch) -> None:
    _patch_completion(monkeypatch, {}, {"choices": []})

    with pytest.raises(ScriptGenerationError):
        LiteLLMScriptGenerator(model="m").generate([], [])


def test_generate_wraps_provider_errors(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_get_completion() -> tuple[Callable[..., Any], type[Exception]]:
        def _completion(**_: Any) -> object:
            raise RuntimeError("Invalid API key provided")

        return _completion, RuntimeError

    monkeypatch.setattr("core.script_generation.get_completion", fake_get_completion)

    with pytest.raises(ScriptGenerationError, match="credentials"):
        LiteLLMScriptGenerator(model="m", api_key="bad").generate(["Work"], [])


def test_call_completion_retries_without_rejected_parameters() -> None:
    calls: list[dict[str, Any]] = []

    def completion(**kwargs: Any) -> str:
        calls.append(kwargs)
        if "timeout" in kwargs:
            raise ValueError("Parameter timeout is not supported by this model")
        return "ok"

    result = call_completion_with_fallback(
        {"model": "m", "timeout": 5},
        completion,
        ValueError,
        drop_candidates={"timeout"},
    )

    assert result == "ok"
    assert calls[-1] == {"model": "m"}


def test_apply_configured_drop_params_removes_known_keys() -> None:
    request: dict[str, object] = {"model": "m", "api_base": "x", "timeout": 1}

    dropped = apply_configured_drop_params(request, [" api_base ", "missing", "api_base"])

    assert dropped == ("api_base",)
    assert request == {"model": "m", "timeout": 1}


def test_extract_message_content_handles_unexpected_shapes() -> None:
    assert extract_message_content({"choices": "nope"}) is None
    assert extract_message_content({"choices": [{"message": None}]}) is None
    assert extract_message_content({"choices": [{"message": {"content": 5}}]}) == "5"


def test_summarise_litellm_error_messages() -> None:
    assert summarise_litellm_error(RuntimeError("")) == "LiteLLM request failed."
    assert "timed out" in summarise_litellm_error(RuntimeError("Request timeout"))
    assert summarise_litellm_error(RuntimeError("boom")) == "LiteLLM request failed: boom"


class _StubGenerator:
    def __init__(self, result: str | Exception) -> None:
        self.result = result
        self.calls: list[tuple[list[str], list[str]]] = []

    def generate(self, category_names: Sequence[str], prompts: Sequence[PromptEntry]) -> str:
        self.calls.append((list(category_names), [prompt.id for prompt in prompts]))
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


def test_organizer_sends_category_names_and_active_prompts(organizer: PromptOrganizer) -> None:
    stub = _StubGenerator("print('app')")
    organizer._script_generator = stub  # type: ignore[assignment]
    kept = organizer.add_prompt("Keep", "text", "1")
    binned = organizer.add_prompt("Bin", "text", "1")
    organizer.prompts.soft_delete(binned.id)

    assert organizer.generate_desktop_script() == "print('app')"
    names, prompt_ids = stub.calls[0]
    assert names == ["Work", "Art", "Hebrew Project", "Coding"]
    assert prompt_ids == [kept.id]


@pytest.mark.parametrize(
    ("result", "expected"),
    [
        (ScriptGenerationError("no key"), GENERATION_FAILED_PLACEHOLDER),
        ("   ", NO_CODE_PLACEHOLDER),
    ],
)
def test_organizer_substitutes_placeholders(
    organizer: PromptOrganizer,
    result: str | Exception,
    expected: str,
) -> None:
    organizer._script_generator = _StubGenerator(result)  # type: ignore[assignment]

    assert organizer.generate_desktop_script() == expected


def test_organizer_without_generator_returns_failure_placeholder(
    organizer: PromptOrganizer,
) -> None:
    assert organizer.generate_desktop_script() == GENERATION_FAILED_PLACEHOLDER


def test_missing_completion_api_falls_back_to_placeholder(
    monkeypatch: pytest.MonkeyPatch,
    organizer: PromptOrganizer,
) -> None:
    monkeypatch.setattr("core.litellm_adapter._completion", None)
    monkeypatch.setattr(
        "core.litellm_adapter.importlib.import_module",
        lambda _name: types.SimpleNamespace(),
    )

    with pytest.raises(LiteLLMNotInstalledError, match="completion API"):
        get_completion()

    organizer._script_generator = LiteLLMScriptGenerator(model="m")  # type: ignore[assignment]
    assert organizer.generate_desktop_script() == GENERATION_FAILED_PLACEHOLDER
