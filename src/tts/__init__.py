"""Speech synthesis proxy in front of ElevenLabs."""

from meridian.tts.client import ElevenLabsClient, SpeechProviderError, iter_chunks
from meridian.tts.proxy import router

__all__ = [
    "ElevenLabsClient",
    "SpeechProviderError",
    "iter_chunks",
    "router",
]
