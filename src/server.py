"""FastAPI app — serves the built site and the speech proxy."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from meridian.config import MeridianConfig
from meridian.tts.client import ElevenLabsClient
from meridian.tts.proxy import router as tts_router

logger = logging.getLogger(__name__)


def create_app(config: MeridianConfig | None = None) -> FastAPI:
    """Build the app.

    The speech proxy is always mounted. The static site is mounted at
    ``/`` only when the output directory has been built.
    """
    config = config or MeridianConfig()

    app = FastAPI(title=config.site.name, description=config.site.tagline)
    app.state.speech_client = ElevenLabsClient(config.speech)
    app.include_router(tts_router)

    if not config.speech.is_configured:
        logger.warning("ELEVENLABS_API_KEY not set; /api/tts will answer 500")

    site_dir = config.output_path
    if site_dir.is_dir():
        app.mount("/", StaticFiles(directory=site_dir, html=True), name="site")
    else:
        logger.warning("Site directory %s not found; run `meridian build` first", site_dir)

    return app
