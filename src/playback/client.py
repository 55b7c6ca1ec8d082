"""HTTP client for the ``/api/tts`` speech endpoint."""

from __future__ import annotations

import asyncio
import json
import logging
import urllib.error
import urllib.request

logger = logging.getLogger(__name__)


class SpeechRequestError(Exception):
    """Raised when the speech endpoint cannot produce audio."""


class SpeechClient:
    """Fetches synthesized audio for a text from the speech proxy.

    Usable directly as the controller's speech fetcher::

        controller = PlaybackController(get_text, SpeechClient(url).fetch, player)
    """

    def __init__(self, url: str, timeout: int = 60) -> None:
        self.url = url
        self.timeout = timeout

    def _post(self, text: str) -> bytes:
        body = json.dumps({"text": text}).encode("utf-8")
        req = urllib.request.Request(
            self.url,
            data=body,
            method="POST",
            headers={"Content-Type": "application/json"},
        )
        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as resp:
                return resp.read()
        except urllib.error.HTTPError as exc:
            raise SpeechRequestError(f"TTS failed: {exc.code}") from exc
        except (urllib.error.URLError, TimeoutError) as exc:
            raise SpeechRequestError(f"TTS request failed: {exc}") from exc

    async def fetch(self, text: str) -> bytes:
        """POST ``{"text": text}`` and return the audio bytes.

        Raises:
            SpeechRequestError: On a non-2xx status or transport failure.
        """
        logger.debug("Fetching speech from %s (%d chars)", self.url, len(text))
        return await asyncio.to_thread(self._post, text)
