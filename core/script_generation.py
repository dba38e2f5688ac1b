"""LiteLLM-backed desktop script generation from the organizer snapshot.

Updates:
  v0.1.2 - 2026-10-04 - Strip thumbnails from sample prompts before sending them.
  v0.1.1 - 2026-09-30 - Accept LiteLLM ModelResponse payloads.
  v0.1.0 - 2026-09-28 - Introduce script generator for the desktop export.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from prompt_templates import DESKTOP_SCRIPT_PROMPT

from .exceptions import ScriptGenerationError
from .litellm_adapter import (
    apply_configured_drop_params,
    call_completion_with_fallback,
    extract_message_content,
    get_completion,
    serialise_litellm_response,
    summarise_litellm_error,
)

if TYPE_CHECKING:
    from models.prompt_model import PromptEntry

logger = logging.getLogger("prompt_organizer.script_generation")


def _sample_payload(prompts: Sequence[PromptEntry], limit: int) -> str:
    """Return a JSON array describing the first *limit* prompts, without images."""
    samples = []
    for prompt in prompts[: max(0, limit)]:
        record = prompt.to_record()
        record.pop("image", None)
        samples.append(record)
    return json.dumps(samples, ensure_ascii=False)


def build_script_request_text(
    category_names: Sequence[str],
    prompts: Sequence[PromptEntry],
    *,
    template: str | None = None,
    sample_limit: int = 2,
) -> str:
    """Render the generation instructions for the supplied snapshot."""
    text = (template or DESKTOP_SCRIPT_PROMPT).strip()
    text = text.replace("{categories}", ", ".join(category_names))
    return text.replace("{samples}", _sample_payload(prompts, sample_limit))


@dataclass(slots=True)
class LiteLLMScriptGenerator:
    """Generate a desktop application script via LiteLLM chat completions."""

    model: str
    api_key: str | None = None
    api_base: str | None = None
    api_version: str | None = None
    timeout_seconds: float | None = None
    drop_params: Sequence[str] | None = None
    sample_limit: int = 2
    template: str | None = None

    def generate(self, category_names: Sequence[str], prompts: Sequence[PromptEntry]) -> str:
        """Return the generated script text for the categories and active prompts."""
        completion, LiteLLMException = get_completion()

        request: dict[str, object] = {
            "model": self.model,
            "messages": [
                {
                    "role": "user",
                    "content": build_script_request_text(
                        category_names,
                        prompts,
                        template=self.template,
                        sample_limit=self.sample_limit,
                    ),
                },
            ],
        }
        if self.timeout_seconds is not None:
            request["timeout"] = self.timeout_seconds
        if self.api_key:
            request["api_key"] = self.api_key
        if self.api_base:
            request["api_base"] = self.api_base
        if self.api_version:
            request["api_version"] = self.api_version

        dropped_params = apply_configured_drop_params(request, self.drop_params)
        if dropped_params:
            logger.debug(
                "Dropping LiteLLM parameters for script generation",
                extra={"dropped_params": list(dropped_params)},
            )

        try:
            response = call_completion_with_fallback(
                request,
                completion,
                LiteLLMException,
                drop_candidates={"timeout"},
                pre_dropped=dropped_params,
            )
        except LiteLLMException as exc:
            raise ScriptGenerationError(summarise_litellm_error(exc)) from exc

        payload = serialise_litellm_response(response)
        if payload is None:
            raise ScriptGenerationError("LiteLLM returned an unexpected payload")
        content = extract_message_content(payload)
        if content is None:
            raise ScriptGenerationError("LiteLLM response is missing content")
        return content


__all__ = ["LiteLLMScriptGenerator", "build_script_request_text"]
