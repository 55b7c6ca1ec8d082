"""Inline emphasis formatting: ``**bold**`` and ``*italic*`` spans.

Bold is searched first at every step, anywhere in the remainder. Only
when no bold span remains is italic considered. A later bold span
therefore wins over an earlier italic one::

    >>> [s.text for s in format_inline("*a* and **b**")]
    ['*a* and ', 'b']

This ordering is a known quirk of the renderer and is kept on purpose;
do not replace the ordered check with a single alternation pattern.
"""

from __future__ import annotations

import html
import re

from meridian.render.models import Segment, SegmentKind

BOLD_RE = re.compile(r"\*\*(.+?)\*\*")
ITALIC_RE = re.compile(r"\*(.+?)\*")

# Checked in order; the first pattern with any match wins.
_EMPHASIS_PATTERNS: tuple[tuple[re.Pattern[str], SegmentKind], ...] = (
    (BOLD_RE, SegmentKind.BOLD),
    (ITALIC_RE, SegmentKind.ITALIC),
)


def format_inline(text: str) -> list[Segment]:
    """Split a text fragment into plain and emphasised segments.

    Span content is taken verbatim; emphasis does not nest.

    Args:
        text: A block's text content.

    Returns:
        Ordered segments. Empty input yields an empty list.
    """
    segments: list[Segment] = []
    remainder = text

    while remainder:
        for pattern, kind in _EMPHASIS_PATTERNS:
            match = pattern.search(remainder)
            if match is None:
                continue
            if match.start() > 0:
                segments.append(Segment.plain(remainder[: match.start()]))
            segments.append(Segment(kind=kind, text=match.group(1)))
            remainder = remainder[match.end() :]
            break
        else:
            segments.append(Segment.plain(remainder))
            break

    return segments


_TAGS: dict[SegmentKind, str] = {
    SegmentKind.BOLD: "strong",
    SegmentKind.ITALIC: "em",
}


def render_inline_html(text: str) -> str:
    """Render a fragment as escaped HTML with ``<strong>``/``<em>`` spans."""
    parts: list[str] = []
    for segment in format_inline(text):
        escaped = html.escape(segment.text)
        tag = _TAGS.get(segment.kind)
        parts.append(f"<{tag}>{escaped}</{tag}>" if tag else escaped)
    return "".join(parts)
