"""``/api/tts`` — speech synthesis proxy.

Keeps the ElevenLabs key on the server: clients POST ``{"text": ...}``
and receive an ``audio/mpeg`` stream. Every error is a JSON body with an
``error`` field.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, StreamingResponse
from starlette.concurrency import run_in_threadpool

from meridian.config import SPEECH_PATH
from meridian.tts.client import ElevenLabsClient, SpeechProviderError, iter_chunks

logger = logging.getLogger(__name__)

AUDIO_MEDIA_TYPE = "audio/mpeg"
CACHE_CONTROL = "public, max-age=86400"

router = APIRouter()


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


async def _read_text(request: Request) -> str | None:
    try:
        body = await request.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    text = body.get("text")
    if not text or not isinstance(text, str):
        return None
    return text


@router.api_route(SPEECH_PATH, methods=["GET", "POST", "PUT", "PATCH", "DELETE"])
async def synthesize(request: Request):
    """Proxy text to ElevenLabs and stream the audio back."""
    if request.method != "POST":
        return _error("Method not allowed", 405)

    text = await _read_text(request)
    if text is None:
        return _error('Missing "text" in request body', 400)

    client: ElevenLabsClient = request.app.state.speech_client
    if not client.is_configured:
        return _error("ElevenLabs API key not configured", 500)

    try:
        upstream = await run_in_threadpool(client.open_stream, text)
    except SpeechProviderError as exc:
        logger.error("ElevenLabs error: %s %s", exc.status, exc.detail)
        return _error(f"ElevenLabs API error: {exc.status}", exc.status)
    except Exception:
        logger.exception("TTS proxy error")
        return _error("Internal server error", 500)

    return StreamingResponse(
        iter_chunks(upstream),
        media_type=AUDIO_MEDIA_TYPE,
        headers={"Cache-Control": CACHE_CONTROL},
    )
