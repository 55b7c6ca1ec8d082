"""Listen-button presentation layered over the playback controller.

Scroll visibility and the progress ring are UI concerns; they observe
the controller rather than living inside it.
"""

from __future__ import annotations

import math
from collections.abc import Callable
from typing import Protocol

from meridian.playback.controller import PlaybackController, PlaybackState

SCROLL_THRESHOLD = 80
IDLE_REVEAL_DELAY = 1.5

BUTTON_SIZE = 44
RING_STROKE = 2
RING_RADIUS = (BUTTON_SIZE - RING_STROKE) / 2
RING_CIRCUMFERENCE = 2 * math.pi * RING_RADIUS

LABELS: dict[PlaybackState, str] = {
    PlaybackState.IDLE: "Listen to this entry",
    PlaybackState.LOADING: "Loading audio...",
    PlaybackState.PLAYING: "Pause",
    PlaybackState.PAUSED: "Resume",
}

ICONS: dict[PlaybackState, str] = {
    PlaybackState.IDLE: "headphones",
    PlaybackState.LOADING: "spinner",
    PlaybackState.PLAYING: "pause",
    PlaybackState.PAUSED: "play",
}


class Cancellable(Protocol):
    def cancel(self) -> None: ...


# Same shape as ``asyncio.AbstractEventLoop.call_later``.
Scheduler = Callable[[float, Callable[[], None]], Cancellable]


def ring_offset(progress: float) -> float:
    """Stroke dash offset of the progress ring for a progress fraction."""
    return RING_CIRCUMFERENCE * (1 - progress)


class ScrollVisibility:
    """Hide the control while scrolling down, reveal it otherwise.

    The control reappears when scrolling up, near the top of the page,
    or once scrolling has been idle for :data:`IDLE_REVEAL_DELAY` seconds.
    """

    def __init__(self, schedule: Scheduler, threshold: int = SCROLL_THRESHOLD,
                 reveal_delay: float = IDLE_REVEAL_DELAY) -> None:
        self._schedule = schedule
        self._threshold = threshold
        self._reveal_delay = reveal_delay
        self._last_y = 0.0
        self._timer: Cancellable | None = None
        self.visible = True

    def on_scroll(self, y: float) -> None:
        if y > self._threshold and y > self._last_y:
            self.visible = False
        if y < self._last_y or y < self._threshold:
            self.visible = True
        self._last_y = y

        self._cancel_timer()
        self._timer = self._schedule(self._reveal_delay, self._reveal)

    def close(self) -> None:
        self._cancel_timer()

    def _reveal(self) -> None:
        self._timer = None
        self.visible = True

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None


class ListenButtonView:
    """Observer exposing what the listen button should draw."""

    def __init__(self, controller: PlaybackController, visibility: ScrollVisibility) -> None:
        self._controller = controller
        self._visibility = visibility
        self.label = ""
        self.icon = ""
        self.show_ring = False
        self.ring_offset = RING_CIRCUMFERENCE
        self._unsubscribe = controller.subscribe(self._update)
        self._update(controller)

    @property
    def visible(self) -> bool:
        return self._visibility.visible

    def _update(self, controller: PlaybackController) -> None:
        state = controller.state
        self.label = LABELS[state]
        self.icon = ICONS[state]
        self.show_ring = state in (PlaybackState.PLAYING, PlaybackState.PAUSED)
        self.ring_offset = ring_offset(controller.progress)

    async def click(self) -> None:
        await self._controller.activate()

    def double_click(self) -> None:
        if self._controller.state != PlaybackState.IDLE:
            self._controller.stop()

    def close(self) -> None:
        self._unsubscribe()
        self._visibility.close()
        self._controller.close()
