"""HTML pages for the static diary site.

Pages are assembled from escaped fragments; entry bodies go through
the block segmenter and inline formatter.
"""

from __future__ import annotations

import html

from meridian.config import SiteConfig
from meridian.entries.dates import format_date, format_date_short, group_by_month
from meridian.entries.models import Entry
from meridian.entries.store import EntryStore
from meridian.playback.controller import PlaybackState
from meridian.playback.presentation import (
    BUTTON_SIZE,
    ICONS,
    LABELS,
    RING_CIRCUMFERENCE,
    RING_RADIUS,
)
from meridian.render.blocks import segment_body
from meridian.render.inline import render_inline_html
from meridian.render.models import Block, BlockKind
from meridian.render.speech import compose_speech_text
from meridian.site.assets import SCRIPT_NAME, STYLESHEET_NAME

MISSING_ENTRY_MESSAGE = "This day has not been written yet"
EMPTY_SITE_MESSAGE = "Meridian is listening..."
SIGNATURE = "— Meridian"


def entry_href(date: str) -> str:
    return f"/entry/{date}/"


def _document(title: str, content: str, head: str = "") -> str:
    return "\n".join([
        "<!DOCTYPE html>",
        '<html lang="en">',
        "<head>",
        '<meta charset="utf-8">',
        '<meta name="viewport" content="width=device-width, initial-scale=1">',
        f"<title>{html.escape(title)}</title>",
        f'<link rel="stylesheet" href="/{STYLESHEET_NAME}">',
        f'<script src="/{SCRIPT_NAME}" defer></script>',
        *([head] if head else []),
        "</head>",
        "<body>",
        content,
        "</body>",
        "</html>",
        "",
    ])


def render_placeholder(message: str, site: SiteConfig | None = None) -> str:
    """A centered one-line page, used for missing entries and empty sites."""
    site = site or SiteConfig()
    return _document(site.name, f'<div class="placeholder">{html.escape(message)}</div>')


def render_block(block: Block) -> str:
    if block.kind == BlockKind.RULE:
        return "<hr>"
    if block.kind == BlockKind.BLOCKQUOTE:
        return f"<blockquote>{render_inline_html(block.text)}</blockquote>"
    return f"<p>{render_inline_html(block.text)}</p>"


def render_body(body: str) -> str:
    return "\n".join(render_block(b) for b in segment_body(body))


def render_sidebar(store: EntryStore, current_date: str | None, site: SiteConfig) -> str:
    """Archive navigation: site name, tagline, dates grouped by month.

    On narrow screens the navigation is off-canvas behind an Archive toggle.
    """
    lines = [
        '<button class="archive-toggle" type="button" aria-expanded="false">Archive</button>',
        '<nav class="sidebar">',
        f'<a class="site-name" href="/">{html.escape(site.name)}</a>',
        f'<div class="tagline">{html.escape(site.tagline)}</div>',
    ]
    for month, dates in group_by_month(store.all_dates()):
        lines.append('<div class="month">')
        lines.append(f'<div class="month-label">{html.escape(month)}</div>')
        for d in dates:
            css = "date current" if d == current_date else "date"
            lines.append(f'<a class="{css}" href="{entry_href(d)}">{html.escape(format_date_short(d))}</a>')
        lines.append("</div>")
    lines.append("</nav>")
    return "\n".join(lines)


# Stroke-only glyphs on a 24x24 grid.
ICON_SHAPES: dict[str, str] = {
    "headphones": (
        '<path d="M3 18v-6a9 9 0 0 1 18 0v6"/>'
        '<path d="M21 19a2 2 0 0 1-2 2h-1v-6h3zM3 19a2 2 0 0 0 2 2h1v-6H3z"/>'
    ),
    "spinner": '<path d="M12 2a10 10 0 0 1 10 10"/>',
    "pause": '<rect x="6" y="4" width="4" height="16"/><rect x="14" y="4" width="4" height="16"/>',
    "play": '<polygon points="5 3 19 12 5 21 5 3"/>',
}


def render_icon(name: str) -> str:
    return (
        f'<svg class="icon" data-icon="{name}" viewBox="0 0 24 24" aria-hidden="true">'
        f"{ICON_SHAPES[name]}</svg>"
    )


def _render_ring() -> str:
    center = BUTTON_SIZE / 2
    circumference = f"{RING_CIRCUMFERENCE:.3f}"
    return (
        f'<svg class="ring" viewBox="0 0 {BUTTON_SIZE} {BUTTON_SIZE}" aria-hidden="true">'
        f'<circle cx="{center:g}" cy="{center:g}" r="{RING_RADIUS:g}" '
        f'stroke-dasharray="{circumference}" stroke-dashoffset="{circumference}"/></svg>'
    )


def render_listen_button(entry: Entry) -> str:
    """Listen control carrying the spoken script for the client player.

    Every state's icon is emitted; the stylesheet shows the one matching
    ``data-state``, which the client script updates.
    """
    script = html.escape(compose_speech_text(entry), quote=True)
    label = html.escape(LABELS[PlaybackState.IDLE])
    icons = "".join(render_icon(name) for name in ICONS.values())
    return (
        f'<button class="listen" type="button" data-state="{PlaybackState.IDLE}" '
        f'aria-label="{label}" data-speech-text="{script}">{_render_ring()}{icons}</button>\n'
        '<audio class="listen-audio" preload="none"></audio>'
    )


def render_entry(entry: Entry, store: EntryStore, site: SiteConfig) -> str:
    """Full page for one entry."""
    parts = [
        render_sidebar(store, entry.date, site),
        render_listen_button(entry),
        '<main class="main-content">',
        "<article>",
        f'<div class="date">{html.escape(format_date(entry.date))}</div>',
        f"<h1>{html.escape(entry.title)}</h1>",
    ]
    if entry.subtitle:
        parts.append(f'<p class="subtitle">{html.escape(entry.subtitle)}</p>')
    parts.extend([
        '<div class="divider"></div>',
        f'<div class="body">\n{render_body(entry.body)}\n</div>',
        f'<div class="signature">{html.escape(SIGNATURE)}</div>',
    ])
    if entry.mood or entry.tags:
        meta = " · ".join([entry.mood, *entry.tags] if entry.mood else entry.tags)
        parts.append(f'<div class="meta">{html.escape(meta)}</div>')
    parts.extend(["</article>", "</main>"])
    return _document(f"{entry.title} — {site.name}", "\n".join(parts))


def render_entry_page(store: EntryStore, date: str, site: SiteConfig | None = None) -> str:
    """Page for ``date``, or the placeholder when nothing was written."""
    site = site or SiteConfig()
    entry = store.get_entry(date)
    if entry is None:
        return render_placeholder(MISSING_ENTRY_MESSAGE, site)
    return render_entry(entry, store, site)


def render_index(store: EntryStore, site: SiteConfig | None = None) -> str:
    """Root page: redirect to the latest entry, or a waiting message."""
    site = site or SiteConfig()
    latest = store.latest_date()
    if latest is None:
        return render_placeholder(EMPTY_SITE_MESSAGE, site)
    target = html.escape(entry_href(latest), quote=True)
    return _document(
        site.name,
        f'<a href="{target}">{html.escape(site.name)}</a>',
        head=f'<meta http-equiv="refresh" content="0; url={target}">',
    )
