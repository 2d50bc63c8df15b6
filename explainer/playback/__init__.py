"""
Playback Module

Narrated, word-by-word playback of an explanation's key points.
"""

from explainer.playback.controller import Phase, PlaybackController, PlaybackState
from explainer.playback.narration import NarrationEngine, choose_voice
from explainer.playback.speech import (
    Pyttsx3SpeechBackend,
    ScriptedSpeechBackend,
    SpeechBackend,
    SpeechBackendError,
    Utterance,
    Voice,
    create_speech_backend,
)
from explainer.playback.ticker import RevealHandle, TextRevealTicker

__all__ = [
    "Phase",
    "PlaybackController",
    "PlaybackState",
    "NarrationEngine",
    "choose_voice",
    "Pyttsx3SpeechBackend",
    "ScriptedSpeechBackend",
    "SpeechBackend",
    "SpeechBackendError",
    "Utterance",
    "Voice",
    "create_speech_backend",
    "RevealHandle",
    "TextRevealTicker",
]
