"""Tests for the ElevenLabs streaming client."""

from __future__ import annotations

import io
import json
import urllib.error
from unittest.mock import MagicMock, patch

import pytest

from meridian.config import SpeechConfig
from meridian.tts.client import ElevenLabsClient, SpeechProviderError, iter_chunks


def _client(**overrides) -> ElevenLabsClient:
    return ElevenLabsClient(SpeechConfig(api_key="xi-test", **overrides))


class TestPayload:
    def test_voice_settings(self):
        payload = _client().build_payload("Hello.")
        assert payload == {
            "text": "Hello.",
            "model_id": "eleven_multilingual_v2",
            "voice_settings": {
                "stability": 0.6,
                "similarity_boost": 0.8,
                "style": 0.15,
                "use_speaker_boost": True,
            },
        }

    def test_truncate_caps_length(self):
        client = _client()
        assert len(client.truncate("a" * 20000)) == 15000
        assert client.truncate("short") == "short"

    def test_is_configured(self):
        assert _client().is_configured
        assert not ElevenLabsClient(SpeechConfig()).is_configured


class TestOpenStream:
    @patch("meridian.tts.client.urllib.request.urlopen")
    def test_request_shape(self, mock_urlopen: MagicMock):
        response = MagicMock()
        mock_urlopen.return_value = response

        result = _client(api_url="https://api.example.test/v1/").open_stream("x" * 16000)

        assert result is response
        req = mock_urlopen.call_args[0][0]
        assert req.full_url == "https://api.example.test/v1/text-to-speech/RTFg9niKcgGLDwa3RFlz/stream"
        assert req.get_method() == "POST"
        assert req.get_header("Xi-api-key") == "xi-test"
        assert req.get_header("Content-type") == "application/json"
        body = json.loads(req.data)
        assert len(body["text"]) == 15000
        assert mock_urlopen.call_args[1]["timeout"] == 60

    @patch("meridian.tts.client.urllib.request.urlopen")
    def test_custom_voice(self, mock_urlopen: MagicMock):
        _client(voice_id="voice-42").open_stream("hi")
        req = mock_urlopen.call_args[0][0]
        assert "/text-to-speech/voice-42/stream" in req.full_url

    @patch("meridian.tts.client.urllib.request.urlopen")
    def test_http_error_raises_provider_error(self, mock_urlopen: MagicMock):
        mock_urlopen.side_effect = urllib.error.HTTPError(
            "https://api.example.test", 401, "Unauthorized", {}, io.BytesIO(b'{"detail":"bad key"}')
        )

        with pytest.raises(SpeechProviderError) as exc_info:
            _client().open_stream("hi")

        assert exc_info.value.status == 401
        assert "bad key" in exc_info.value.detail
        assert str(exc_info.value) == "ElevenLabs API error: 401"


class TestIterChunks:
    def test_yields_until_exhausted_and_closes(self):
        response = MagicMock()
        response.read.side_effect = [b"abc", b"def", b""]

        assert list(iter_chunks(response, chunk_size=3)) == [b"abc", b"def"]
        response.close.assert_called_once()

    def test_closes_when_abandoned(self):
        response = MagicMock()
        response.read.side_effect = [b"abc", b"def", b""]

        chunks = iter_chunks(response)
        next(chunks)
        chunks.close()
        response.close.assert_called_once()
