"""Derived render types: block elements and inline segments.

Both are produced fresh per render from an entry body and never persisted.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class BlockKind(StrEnum):
    """Structural unit of an entry body."""

    PARAGRAPH = "paragraph"
    RULE = "rule"
    BLOCKQUOTE = "blockquote"


class SegmentKind(StrEnum):
    """Styling of an inline run of text."""

    PLAIN = "plain"
    BOLD = "bold"
    ITALIC = "italic"


class Block(BaseModel):
    """A paragraph, horizontal rule, or single-line blockquote.

    ``text`` is empty for rules.
    """

    model_config = ConfigDict(frozen=True)

    kind: BlockKind
    text: str = ""

    @classmethod
    def paragraph(cls, text: str) -> Block:
        return cls(kind=BlockKind.PARAGRAPH, text=text)

    @classmethod
    def rule(cls) -> Block:
        return cls(kind=BlockKind.RULE)

    @classmethod
    def blockquote(cls, text: str) -> Block:
        return cls(kind=BlockKind.BLOCKQUOTE, text=text)


class Segment(BaseModel):
    """A plain or styled run of text inside a block."""

    model_config = ConfigDict(frozen=True)

    kind: SegmentKind
    text: str

    @classmethod
    def plain(cls, text: str) -> Segment:
        return cls(kind=SegmentKind.PLAIN, text=text)

    @classmethod
    def bold(cls, text: str) -> Segment:
        return cls(kind=SegmentKind.BOLD, text=text)

    @classmethod
    def italic(cls, text: str) -> Segment:
        return cls(kind=SegmentKind.ITALIC, text=text)
