"""Split an entry body into paragraphs, rules and blockquotes."""

from __future__ import annotations

from meridian.render.models import Block

RULE_MARKER = "---"
QUOTE_PREFIX = "> "


def segment_body(text: str) -> list[Block]:
    """Turn raw entry text into an ordered list of block elements.

    Consecutive non-blank lines are joined with single spaces into one
    paragraph. A blank line, a ``---`` line or a ``> `` line closes the
    current paragraph. Blockquotes cover only their own line.

    Args:
        text: Raw entry body.

    Returns:
        Block elements in document order; empty for blank input.
    """
    blocks: list[Block] = []
    current: list[str] = []

    def flush() -> None:
        if current:
            blocks.append(Block.paragraph(" ".join(current)))
            current.clear()

    for line in text.split("\n"):
        stripped = line.strip()
        if not stripped:
            flush()
        elif stripped == RULE_MARKER:
            flush()
            blocks.append(Block.rule())
        elif stripped.startswith(QUOTE_PREFIX):
            flush()
            blocks.append(Block.blockquote(stripped[len(QUOTE_PREFIX) :]))
        else:
            current.append(stripped)

    flush()
    return blocks
