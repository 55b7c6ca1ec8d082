"""ElevenLabs text-to-speech client.

Opens a streaming synthesis request via urllib and hands the raw
response back so the proxy can relay it chunk by chunk.
"""

from __future__ import annotations

import json
import logging
import urllib.error
import urllib.request
from collections.abc import Iterator
from http.client import HTTPResponse

from meridian.config import SpeechConfig

logger = logging.getLogger(__name__)

CHUNK_SIZE = 8192


class SpeechProviderError(Exception):
    """Non-success response from the speech provider."""

    def __init__(self, status: int, detail: str = "") -> None:
        super().__init__(f"ElevenLabs API error: {status}")
        self.status = status
        self.detail = detail


class ElevenLabsClient:
    """Client for the ElevenLabs streaming text-to-speech endpoint."""

    def __init__(self, config: SpeechConfig) -> None:
        self.config = config
        self.base_url = config.api_url.rstrip("/")

    @property
    def is_configured(self) -> bool:
        return self.config.is_configured

    def truncate(self, text: str) -> str:
        """Cap text at the configured character limit."""
        return text[: self.config.max_chars]

    def build_payload(self, text: str) -> dict:
        """Request body: the text plus the fixed voice settings."""
        return {
            "text": text,
            "model_id": self.config.model_id,
            "voice_settings": {
                "stability": self.config.stability,
                "similarity_boost": self.config.similarity_boost,
                "style": self.config.style,
                "use_speaker_boost": self.config.use_speaker_boost,
            },
        }

    def open_stream(self, text: str) -> HTTPResponse:
        """Start synthesis and return the open audio response.

        The caller owns the response and must close it; :func:`iter_chunks`
        does so once the body is exhausted.

        Raises:
            SpeechProviderError: If the provider answers with an error status.
        """
        url = f"{self.base_url}/text-to-speech/{self.config.voice_id}/stream"
        body = json.dumps(self.build_payload(self.truncate(text))).encode("utf-8")
        req = urllib.request.Request(
            url,
            data=body,
            method="POST",
            headers={
                "Content-Type": "application/json",
                "xi-api-key": self.config.api_key,
            },
        )

        logger.debug("Requesting speech for %d chars (voice=%s)", len(text), self.config.voice_id)
        try:
            return urllib.request.urlopen(req, timeout=self.config.timeout)
        except urllib.error.HTTPError as exc:
            detail = exc.read().decode("utf-8", errors="replace")
            raise SpeechProviderError(exc.code, detail) from exc


def iter_chunks(response: HTTPResponse, chunk_size: int = CHUNK_SIZE) -> Iterator[bytes]:
    """Yield the response body in chunks, closing the response at the end."""
    try:
        while True:
            chunk = response.read(chunk_size)
            if not chunk:
                break
            yield chunk
    finally:
        response.close()
