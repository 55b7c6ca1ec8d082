"""Read-only store over the dated entry files.

Entries are validated and sorted newest-first once, at construction,
and the sorted tuple is reused for every lookup.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from pathlib import Path

from pydantic import ValidationError

from meridian.entries.models import Entry

logger = logging.getLogger(__name__)

ENTRY_GLOB = "*.json"


class EntryStore:
    """Lookup by date, latest date, and chronological listing."""

    def __init__(self, entries: Iterable[Entry] = ()) -> None:
        unique: dict[str, Entry] = {}
        for entry in entries:
            if entry.date in unique:
                logger.warning("Duplicate entry for %s, keeping the first one", entry.date)
                continue
            unique[entry.date] = entry
        self._entries: tuple[Entry, ...] = tuple(
            sorted(unique.values(), key=lambda e: e.day, reverse=True)
        )
        self._by_date = {e.date: e for e in self._entries}

    @classmethod
    def load(cls, directory: Path) -> EntryStore:
        """Load every ``*.json`` entry file in a directory.

        Files that are not valid JSON or do not match the entry shape are
        logged and skipped. A missing directory yields an empty store.
        """
        if not directory.is_dir():
            logger.warning("Entries directory not found: %s", directory)
            return cls()

        entries: list[Entry] = []
        for path in sorted(directory.glob(ENTRY_GLOB)):
            try:
                raw = json.loads(path.read_text(encoding="utf-8"))
                entries.append(Entry.model_validate(raw))
            except (json.JSONDecodeError, ValidationError, OSError) as exc:
                logger.warning("Skipping unreadable entry %s: %s", path.name, exc)

        logger.debug("Loaded %d entries from %s", len(entries), directory)
        return cls(entries)

    # ── Read operations ──────────────────────────────────────────

    def all_dates(self) -> list[str]:
        """Return every entry date, most recent first."""
        return [e.date for e in self._entries]

    def latest_date(self) -> str | None:
        """Return the most recent entry date, or None for an empty store."""
        return self._entries[0].date if self._entries else None

    def get_entry(self, date: str) -> Entry | None:
        """Return the entry for a date, or None if nothing was written."""
        return self._by_date.get(date)

    def entries(self) -> list[Entry]:
        """Return all entries, most recent first."""
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
