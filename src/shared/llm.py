"""Shared LLM calling utilities.

Centralizes Claude invocations through the Anthropic Messages API
(``ANTHROPIC_API_KEY``), including server-side tools such as web search,
plus helpers for pulling JSON out of model output.
"""

from __future__ import annotations

import logging
import os
import re
from typing import Any

import anthropic

logger = logging.getLogger(__name__)


class LLMError(Exception):
    """Base error for LLM calls."""


# ---------------------------------------------------------------------------
# Model name mapping
# ---------------------------------------------------------------------------

_MODEL_MAP: dict[str, str] = {
    "sonnet": "claude-sonnet-4-5-20250929",
    "haiku": "claude-haiku-4-5-20251001",
    "opus": "claude-opus-4-1-20250805",
}

_DEFAULT_MODEL = "claude-sonnet-4-5-20250929"

WEB_SEARCH_TOOL: dict[str, str] = {"type": "web_search_20250305", "name": "web_search"}


def _resolve_model(model: str | None) -> str:
    """Resolve a short model name to an API model ID."""
    if model is None:
        return _DEFAULT_MODEL
    return _MODEL_MAP.get(model, model)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def call_claude(
    system_prompt: str,
    user_prompt: str,
    *,
    model: str | None = None,
    max_tokens: int = 4096,
    timeout: int = 120,
    tools: list[dict[str, Any]] | None = None,
    label: str = "synthesis",
) -> str:
    """Call Claude and return the joined text blocks of the response.

    Tool-use and tool-result blocks (e.g. web search) are skipped; only
    ``text`` blocks contribute to the result.

    Args:
        system_prompt: System prompt for the LLM.
        user_prompt: User/content prompt.
        model: Optional model override (e.g. "sonnet", "haiku", or a full ID).
        max_tokens: Response token budget.
        timeout: Timeout in seconds.
        tools: Optional server tool definitions.
        label: Label for logging.

    Returns:
        The LLM response text (stripped).

    Raises:
        LLMError: On any failure, including an empty response.
    """
    api_key = os.environ.get("ANTHROPIC_API_KEY", "").strip()
    if not api_key:
        raise LLMError("ANTHROPIC_API_KEY not set")

    resolved_model = _resolve_model(model)
    logger.debug("Calling Anthropic API model=%s (%s)", resolved_model, label)

    kwargs: dict[str, Any] = {
        "model": resolved_model,
        "max_tokens": max_tokens,
        "messages": [{"role": "user", "content": user_prompt}],
    }
    if system_prompt.strip():
        kwargs["system"] = system_prompt
    if tools:
        kwargs["tools"] = tools

    try:
        client = anthropic.Anthropic(api_key=api_key, timeout=timeout)
        response = client.messages.create(**kwargs)
    except anthropic.APIStatusError as exc:
        raise LLMError(
            f"Anthropic API error {exc.status_code} (label={label}): {exc.message}"
        ) from exc
    except anthropic.APIError as exc:
        raise LLMError(f"Anthropic API failed (label={label}): {exc}") from exc

    text_parts = [block.text for block in response.content if block.type == "text"]
    result = "".join(text_parts).strip()
    if not result:
        raise LLMError(f"Anthropic API returned no text content (label={label})")
    return result


# ---------------------------------------------------------------------------
# JSON output helpers
# ---------------------------------------------------------------------------

_JSON_FENCE_RE = re.compile(r"^```(?:json)?\s*\n?(.*?)\n?```$", re.DOTALL)
_JSON_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)


def strip_json_fences(text: str) -> str:
    """Strip a markdown code fence wrapping LLM JSON output.

    Handles Claude's tendency to wrap JSON in ```json ... ``` blocks.
    Text that is not fenced is returned stripped but otherwise unchanged.
    """
    text = text.strip()
    match = _JSON_FENCE_RE.match(text)
    if match:
        return match.group(1).strip()
    return text


def extract_json_object(text: str) -> str | None:
    """Return the outermost ``{...}`` span in ``text``, or None."""
    match = _JSON_OBJECT_RE.search(text)
    return match.group(0) if match else None
