"""Write the static diary site to an output directory."""

from __future__ import annotations

import logging
from pathlib import Path

from meridian.config import SiteConfig
from meridian.entries.store import EntryStore
from meridian.site.assets import SCRIPT_NAME, STYLESHEET_NAME, render_script, render_stylesheet
from meridian.site.pages import (
    MISSING_ENTRY_MESSAGE,
    render_entry,
    render_index,
    render_placeholder,
)

logger = logging.getLogger(__name__)

class SiteBuilder:
    """Renders every entry page plus the index, 404 page, stylesheet and script."""

    def __init__(self, store: EntryStore, site: SiteConfig | None = None) -> None:
        self._store = store
        self._site = site or SiteConfig()

    def entry_output_path(self, output_dir: Path, date: str) -> Path:
        return output_dir / "entry" / date / "index.html"

    def build(self, output_dir: Path) -> list[Path]:
        """Write the site and return the paths written."""
        output_dir.mkdir(parents=True, exist_ok=True)
        written: list[Path] = []

        def write(path: Path, content: str) -> None:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
            written.append(path)

        write(output_dir / "index.html", render_index(self._store, self._site))
        write(output_dir / "404.html", render_placeholder(MISSING_ENTRY_MESSAGE, self._site))
        write(output_dir / STYLESHEET_NAME, render_stylesheet())
        write(output_dir / SCRIPT_NAME, render_script())

        for entry in self._store.entries():
            write(
                self.entry_output_path(output_dir, entry.date),
                render_entry(entry, self._store, self._site),
            )

        logger.info("Built %d entry pages into %s", len(self._store), output_dir)
        return written
