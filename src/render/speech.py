"""Plain-text reduction of entry bodies for speech synthesis.

This is its own substitution pass over the raw body, independent of
the block segmenter.
"""

from __future__ import annotations

import re

from meridian.entries.models import Entry

SIGN_OFF = "This has been Meridian."

_BOLD_RE = re.compile(r"\*\*(.+?)\*\*")
_ITALIC_RE = re.compile(r"\*(.+?)\*")
_QUOTE_RE = re.compile(r"^> ", re.MULTILINE)
_RULE_RE = re.compile(r"---")


def reduce_to_plain_text(text: str) -> str:
    """Strip emphasis and structural markers, keeping the prose.

    Only leading and trailing whitespace is trimmed; line breaks left
    behind by removed markers stay in place.
    """
    text = _BOLD_RE.sub(r"\1", text)
    text = _ITALIC_RE.sub(r"\1", text)
    text = _QUOTE_RE.sub("", text)
    text = _RULE_RE.sub("", text)
    return text.strip()


def compose_speech_text(entry: Entry | None) -> str:
    """Build the spoken script: title, subtitle, body, sign-off.

    Returns an empty string when there is no entry, which the playback
    controller treats as nothing to play.
    """
    if entry is None:
        return ""
    subtitle = f"{entry.subtitle}. " if entry.subtitle else ""
    body = reduce_to_plain_text(entry.body)
    return f"{entry.title}. {subtitle}{body} ... {SIGN_OFF}"
