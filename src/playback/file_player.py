"""Audio player that saves fetched speech to disk.

Lets the playback controller run outside a browser: "playing" an entry
means its synthesized audio has been written to a file.
"""

from __future__ import annotations

import logging
import math
from pathlib import Path

logger = logging.getLogger(__name__)


class FileAudioPlayer:
    """:class:`~meridian.playback.controller.AudioPlayer` backed by a file."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self.current_time = 0.0
        self.source: Path | None = None
        self.playing = False

    @property
    def duration(self) -> float:
        # Length is unknown without decoding the MP3.
        return math.nan

    def open(self, data: bytes) -> Path:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_bytes(data)
        logger.debug("Wrote %d bytes of audio to %s", len(data), self.path)
        return self.path

    def release(self, handle: Path) -> None:
        if self.source == handle:
            self.source = None

    def set_source(self, handle: Path) -> None:
        self.source = handle

    async def play(self) -> None:
        if self.source is None:
            raise RuntimeError("No audio source set")
        self.playing = True

    def pause(self) -> None:
        self.playing = False
