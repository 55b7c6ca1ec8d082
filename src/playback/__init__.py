"""Listen-button playback: state machine, speech client, presentation."""

from meridian.playback.client import SpeechClient, SpeechRequestError
from meridian.playback.controller import AudioPlayer, PlaybackController, PlaybackState
from meridian.playback.file_player import FileAudioPlayer
from meridian.playback.presentation import ListenButtonView, ScrollVisibility, ring_offset

__all__ = [
    "AudioPlayer",
    "FileAudioPlayer",
    "ListenButtonView",
    "PlaybackController",
    "PlaybackState",
    "ScrollVisibility",
    "SpeechClient",
    "SpeechRequestError",
    "ring_offset",
]
