"""Offline generation of the daily Meridian entry.

Calls Claude with web search, recovers the JSON entry from its reply,
and writes it as ``<entries_dir>/<YYYY-MM-DD>.json``.
"""

from meridian.generate.services import (
    GenerationError,
    build_entry,
    entry_path,
    generate_entry,
    parse_entry_json,
    sanitize_text,
    write_entry,
)

__all__ = [
    "GenerationError",
    "build_entry",
    "entry_path",
    "generate_entry",
    "parse_entry_json",
    "sanitize_text",
    "write_entry",
]
