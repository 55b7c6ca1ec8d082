"""Body rendering — inline emphasis, block splitting, speech reduction."""

from meridian.render.blocks import segment_body
from meridian.render.inline import format_inline, render_inline_html
from meridian.render.models import Block, BlockKind, Segment, SegmentKind
from meridian.render.speech import SIGN_OFF, compose_speech_text, reduce_to_plain_text

__all__ = [
    "SIGN_OFF",
    "Block",
    "BlockKind",
    "Segment",
    "SegmentKind",
    "compose_speech_text",
    "format_inline",
    "reduce_to_plain_text",
    "render_inline_html",
    "segment_body",
]
