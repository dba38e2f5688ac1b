"""LiteLLM completion helpers shared by generation workflows.

Updates:
  v0.2.1 - 2026-10-17 - Report a missing completion API as LiteLLMNotInstalledError.
  v0.2.0 - 2026-09-29 - Normalise ModelResponse payloads and summarise provider errors.
  v0.1.0 - 2026-09-28 - Lazy completion import with unsupported-parameter retries.
"""

from __future__ import annotations

import importlib
import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, cast

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence

logger = logging.getLogger("prompt_organizer.litellm")

_DEFAULT_DROP_CANDIDATES = frozenset({"max_tokens", "max_output_tokens", "temperature", "timeout"})
_UNSUPPORTED_INDICATORS = (
    "not support",
    "unsupported",
    "not allowed",
    "additional property",
    "unexpected",
    "unknown",
)


class LiteLLMNotInstalledError(RuntimeError):
    """Raised when LiteLLM cannot be imported in the current environment."""


_completion: Callable[..., object] | None = None
_LiteLLMException: type[Exception] = Exception


def _ensure_loaded() -> None:
    """Import LiteLLM lazily so start-up stays fast for offline commands."""
    global _completion, _LiteLLMException
    if _completion is not None:
        return
    try:  # pragma: no cover - runtime import path
        litellm = importlib.import_module("litellm")
    except ImportError as exc:
        raise LiteLLMNotInstalledError(
            "Script generation requires 'litellm'. Install it with `pip install litellm`."
        ) from exc

    completion = getattr(litellm, "completion", None)
    if completion is None:
        raise LiteLLMNotInstalledError(
            "litellm completion API is unavailable in the installed version."
        )
    # litellm maps provider failures onto several unrelated exception bases.
    _LiteLLMException = Exception
    _completion = completion


def get_completion() -> tuple[Callable[..., object], type[Exception]]:
    """Return the LiteLLM completion callable and its base exception type."""
    _ensure_loaded()
    assert _completion is not None  # pragma: no cover - set by _ensure_loaded
    return _completion, _LiteLLMException


def apply_configured_drop_params(
    request: dict[str, object],
    drop_params: Sequence[str] | None,
) -> tuple[str, ...]:
    """Remove configured parameters from *request* and return the dropped keys."""
    if not drop_params:
        return ()
    dropped: list[str] = []
    for raw_key in drop_params:
        key = str(raw_key).strip()
        if key and key in request and key not in dropped:
            request.pop(key, None)
            dropped.append(key)
    return tuple(dropped)


def _detect_unsupported_parameters(
    message: str,
    parameters: Iterable[str],
    drop_candidates: Iterable[str] | None = None,
) -> set[str]:
    lowered = message.lower()
    if not any(token in lowered for token in _UNSUPPORTED_INDICATORS):
        return set()
    candidates = set(drop_candidates or _DEFAULT_DROP_CANDIDATES)
    unsupported: set[str] = set()
    for key in parameters:
        if key not in candidates:
            continue
        if any(form in lowered for form in (key, key.replace("_", " "), key.replace("_", "-"))):
            unsupported.add(key)
    return unsupported


def call_completion_with_fallback(
    request: dict[str, object],
    completion: Callable[..., object],
    lite_llm_exception: type[Exception],
    *,
    drop_candidates: Iterable[str] | None = None,
    pre_dropped: Iterable[str] | None = None,
) -> object:
    """Invoke *completion*, retrying once without parameters the model rejected."""
    try:
        return completion(**request)
    except lite_llm_exception as exc:
        unsupported = _detect_unsupported_parameters(str(exc), request.keys(), drop_candidates)
        if not unsupported:
            raise
        trimmed = {key: value for key, value in request.items() if key not in unsupported}
        already = {str(item).strip() for item in pre_dropped or () if str(item).strip()}
        logger.info(
            "LiteLLM model rejected parameters %s; retrying request without them.",
            ", ".join(sorted(already | unsupported)),
        )
        return completion(**trimmed)


def serialise_litellm_response(response: Any) -> Mapping[str, Any] | None:
    """Return a mapping view for dict or ModelResponse payloads when possible."""
    if isinstance(response, Mapping):
        return cast("Mapping[str, Any]", response)
    for attr in ("model_dump", "dict"):
        candidate = getattr(response, attr, None)
        if not callable(candidate):
            continue
        try:
            result = candidate()
        except Exception:  # noqa: BLE001 - try the next serialiser
            logger.debug("LiteLLM response %s() failed", attr, exc_info=True)
            continue
        if isinstance(result, Mapping):
            return cast("Mapping[str, Any]", result)
    return None


def extract_message_content(payload: Mapping[str, Any]) -> str | None:
    """Return the first choice's message content from a completion payload."""
    choices = payload.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = cast("list[Any]", choices)[0]
    if not isinstance(first, Mapping):
        return None
    message = cast("Mapping[str, Any]", first).get("message")
    if not isinstance(message, Mapping):
        return None
    content = cast("Mapping[str, Any]", message).get("content")
    return None if content is None else str(content)


def summarise_litellm_error(exc: Exception) -> str:
    """Return a concise, user-friendly message for LiteLLM failures."""
    text = str(exc).strip()
    if not text:
        return "LiteLLM request failed."
    lowered = text.lower()
    if "api key" in lowered or "authentication" in lowered:
        return "LiteLLM rejected the credentials. Check the configured API key."
    if "timeout" in lowered or "timed out" in lowered:
        return "LiteLLM request timed out. Please retry or check network connectivity."
    return text if text.startswith("LiteLLM") else f"LiteLLM request failed: {text}"


__all__ = [
    "LiteLLMNotInstalledError",
    "apply_configured_drop_params",
    "call_completion_with_fallback",
    "extract_message_content",
    "get_completion",
    "serialise_litellm_response",
    "summarise_litellm_error",
]
