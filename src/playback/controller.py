"""Listen-button playback state machine.

States cycle ``idle → loading → playing ⇄ paused → idle`` with no
terminal state. The controller owns its audio resource handle and
releases it when a new fetch supersedes it or on :meth:`close`.

All collaborators are injected so the machine runs without any UI
framework: a text source, an async speech fetcher, and an
:class:`AudioPlayer`.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Awaitable, Callable
from enum import StrEnum
from typing import Any, Protocol

logger = logging.getLogger(__name__)


class PlaybackState(StrEnum):
    """Playback session state."""

    IDLE = "idle"
    LOADING = "loading"
    PLAYING = "playing"
    PAUSED = "paused"


class AudioPlayer(Protocol):
    """Audio output port (an ``<audio>`` element in the browser)."""

    current_time: float

    @property
    def duration(self) -> float: ...

    def open(self, data: bytes) -> Any:
        """Create a local resource for fetched audio and return its handle."""

    def release(self, handle: Any) -> None:
        """Release a handle returned by :meth:`open`."""

    def set_source(self, handle: Any) -> None: ...

    async def play(self) -> None: ...

    def pause(self) -> None: ...


TextSource = Callable[[], str]
SpeechFetcher = Callable[[str], Awaitable[bytes]]
Listener = Callable[["PlaybackController"], None]


class PlaybackController:
    """Fetch-then-play controller behind the listen button."""

    def __init__(self, get_text: TextSource, fetch_speech: SpeechFetcher, player: AudioPlayer) -> None:
        self._get_text = get_text
        self._fetch_speech = fetch_speech
        self._player = player
        self._state = PlaybackState.IDLE
        self._progress = 0.0
        self._handle: Any = None
        self._session = 0
        self._closed = False
        self._listeners: list[Listener] = []

    # ── Observation ──────────────────────────────────────────────

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def progress(self) -> float:
        """Fraction of the audio played, in [0, 1]."""
        return self._progress

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def resource(self) -> Any:
        """Handle of the audio resource currently held, if any."""
        return self._handle

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener(controller)`` after every state or progress change.

        Returns:
            A function that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    def _set(self, state: PlaybackState, progress: float | None = None) -> None:
        changed = state != self._state or (progress is not None and progress != self._progress)
        self._state = state
        if progress is not None:
            self._progress = progress
        if changed:
            logger.debug("Playback state -> %s (progress=%.3f)", state, self._progress)
            self._notify()

    # ── User actions ─────────────────────────────────────────────

    async def activate(self) -> None:
        """Primary click: start, pause, or resume depending on state."""
        if self._closed:
            return

        if self._state == PlaybackState.PLAYING:
            self._player.pause()
            self._set(PlaybackState.PAUSED)
            return

        if self._state == PlaybackState.PAUSED:
            await self._resume()
            return

        if self._state == PlaybackState.LOADING:
            logger.debug("Activation ignored while audio is loading")
            return

        await self._start()

    def stop(self) -> None:
        """Secondary action: rewind to the start and return to idle.

        A stop while loading discards the in-flight fetch when it lands.
        """
        if self._closed or self._state == PlaybackState.IDLE:
            return
        self._session += 1
        self._player.pause()
        self._player.current_time = 0
        self._set(PlaybackState.IDLE, progress=0.0)

    def close(self) -> None:
        """Tear down: release the held resource and ignore later events."""
        if self._closed:
            return
        self._closed = True
        self._session += 1
        self._release()
        self._listeners.clear()

    # ── Media events ─────────────────────────────────────────────

    def on_time_update(self) -> None:
        """Recompute progress from the player's position."""
        if self._closed:
            return
        duration = self._player.duration
        if not duration or not math.isfinite(duration):
            return
        progress = min(max(self._player.current_time / duration, 0.0), 1.0)
        self._set(self._state, progress=progress)

    def on_ended(self) -> None:
        """Natural end of audio."""
        if self._closed:
            return
        self._set(PlaybackState.IDLE, progress=0.0)

    # ── Internals ────────────────────────────────────────────────

    async def _start(self) -> None:
        self._session += 1
        session = self._session
        self._set(PlaybackState.LOADING)

        try:
            text = self._get_text()
            if not text:
                self._set(PlaybackState.IDLE)
                return

            data = await self._fetch_speech(text)
            if session != self._session:
                logger.debug("Discarding speech fetched for a stopped session")
                return

            self._release()
            self._handle = self._player.open(data)
            self._player.set_source(self._handle)
            await self._player.play()
            if session != self._session:
                return
            self._set(PlaybackState.PLAYING)
        except Exception as exc:
            logger.error("Listen error: %s", exc)
            if session == self._session:
                self._set(PlaybackState.IDLE, progress=0.0)

    async def _resume(self) -> None:
        session = self._session
        try:
            await self._player.play()
        except Exception as exc:
            logger.error("Listen error: %s", exc)
            if session == self._session:
                self._set(PlaybackState.IDLE, progress=0.0)
            return
        if session == self._session:
            self._set(PlaybackState.PLAYING)

    def _release(self) -> None:
        if self._handle is not None:
            self._player.release(self._handle)
            self._handle = None
