"""Daily entry generation: call Claude, validate, sanitize, write.

Runs offline (by hand or on a schedule). If today's entry file already
exists the job does nothing. Failures raise and are never retried.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Callable
from datetime import date
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from meridian.config import MeridianConfig
from meridian.entries.models import Entry
from meridian.generate.prompts import get_system_prompt, get_user_prompt
from meridian.shared.llm import (
    WEB_SEARCH_TOOL,
    call_claude,
    extract_json_object,
    strip_json_fences,
)

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("date", "title", "body")

# Provider markup left behind by web-search citations.
_ARTIFACT_RES = [
    re.compile(r"</?(?:\w+:)?cite[^>]*>", re.IGNORECASE),
    re.compile(r"</?source[^>]*>", re.IGNORECASE),
    re.compile(r"</?search_result[^>]*>", re.IGNORECASE),
]
_MULTI_SPACE_RE = re.compile(r"\s{2,}")


class GenerationError(Exception):
    """Raised when an entry cannot be generated."""


def entry_path(entries_dir: Path, day: date) -> Path:
    """Path of the entry file for ``day``."""
    return entries_dir / f"{day.isoformat()}.json"


def sanitize_text(text: str) -> str:
    """Remove citation/source tags and collapse the whitespace they leave.

    Note that any run of two or more whitespace characters, newlines
    included, becomes a single space.
    """
    for pattern in _ARTIFACT_RES:
        text = pattern.sub("", text)
    return _MULTI_SPACE_RE.sub(" ", text).strip()


def parse_entry_json(raw: str) -> dict[str, Any]:
    """Parse the model's JSON reply.

    Code fences are stripped first. If the reply still does not parse,
    the outermost ``{...}`` span gets one more attempt.

    Raises:
        GenerationError: If no JSON object can be recovered.
    """
    cleaned = strip_json_fences(raw)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError:
        candidate = extract_json_object(cleaned)
        if candidate is None:
            raise GenerationError(
                f"Could not parse JSON from response: {cleaned[:200]}"
            ) from None
        try:
            data = json.loads(candidate)
        except json.JSONDecodeError as exc:
            raise GenerationError(f"Could not parse JSON from response: {exc}") from exc

    if not isinstance(data, dict):
        raise GenerationError("Response JSON is not an object")
    return data


def build_entry(data: dict[str, Any], day: date) -> Entry:
    """Validate raw model output and turn it into an Entry for ``day``.

    Raises:
        GenerationError: If a required field is missing or the shape is wrong.
    """
    for field in REQUIRED_FIELDS:
        if not data.get(field):
            raise GenerationError(f"Missing required field: {field}")

    data = dict(data)
    data["date"] = day.isoformat()
    for field in ("title", "body", "subtitle"):
        value = data.get(field)
        if isinstance(value, str) and value:
            data[field] = sanitize_text(value)

    try:
        return Entry.model_validate(data)
    except ValidationError as exc:
        raise GenerationError(f"Generated entry is invalid: {exc}") from exc


def write_entry(entry: Entry, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = entry.model_dump(mode="json")
    path.write_text(json.dumps(payload, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")


def generate_entry(
    config: MeridianConfig,
    today: date | None = None,
    *,
    call: Callable[..., str] = call_claude,
) -> Path | None:
    """Generate and write today's entry unless it already exists.

    Args:
        config: Merged configuration.
        today: Date to write for; defaults to the current date.
        call: LLM call function, injectable for tests.

    Returns:
        Path of the written entry, or None if it already existed.

    Raises:
        GenerationError: On unparseable or invalid model output.
        LLMError: If the API call fails.
    """
    day = today or date.today()
    path = entry_path(config.entries_path, day)
    if path.exists():
        logger.info("Entry for %s already exists. Skipping.", day.isoformat())
        return None

    logger.info("Generating Meridian entry for %s...", day.isoformat())
    raw = call(
        get_system_prompt(day.isoformat()),
        get_user_prompt(day.isoformat()),
        model=config.generate.model,
        max_tokens=config.generate.max_tokens,
        timeout=config.generate.timeout,
        tools=[WEB_SEARCH_TOOL],
        label=f"entry {day.isoformat()}",
    )

    entry = build_entry(parse_entry_json(raw), day)
    write_entry(entry, path)

    logger.info("Entry written: %s", path)
    logger.info("  Title: %s", entry.title)
    logger.info("  Mood: %s", entry.mood or "unset")
    logger.info("  Words: ~%d", entry.word_count)
    return path
