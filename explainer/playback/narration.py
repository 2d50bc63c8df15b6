"""
Narration Engine

Speaks text through a speech backend and reports completion as a future.
When no backend is available, or voice output is switched off, narration
is silent and completes after the configured animation duration so that
playback keeps its pace.
"""

import asyncio
from typing import Callable, List, Optional

from explainer.playback.gate import PauseGate
from explainer.playback.speech import SpeechBackend, Utterance, Voice
from explainer.utils.config import config
from explainer.utils import logger


def choose_voice(voices: List[Voice]) -> Optional[Voice]:
    """
    Pick a narration voice.

    Preference: English female voice, then any English voice, then the
    first voice. Returns None for an empty list.
    """
    english = [v for v in voices if v.lang.lower().startswith("en")]

    for voice in english:
        if "female" in voice.name.lower() or voice.gender.lower() == "female":
            return voice

    if english:
        return english[0]

    return voices[0] if voices else None


class _Narration:
    """Bookkeeping for the narration in flight."""

    def __init__(self, future: "asyncio.Future", utterance: Optional[Utterance] = None):
        self.future = future
        self.utterance = utterance
        self.timer: Optional[asyncio.Task] = None
        self.voices_listener: Optional[Callable[[], None]] = None


class NarrationEngine:
    """
    Speak-and-wait wrapper around a single shared speech backend.

    Only one narration is active at a time: starting a new one cancels
    the previous one. Every future returned by ``speak`` resolves exactly
    once, whether the utterance ends, errors or is cancelled.
    """

    def __init__(
        self,
        backend: Optional[SpeechBackend] = None,
        animation_duration: Optional[float] = None,
        rate: Optional[float] = None,
        pitch: Optional[float] = None,
        enabled: Optional[bool] = None,
    ):
        """
        Initialize the narration engine.

        Args:
            backend: Speech backend, or None for silent narration
            animation_duration: Seconds a silent narration lasts
            rate: Speech rate multiplier
            pitch: Speech pitch multiplier
            enabled: Whether voice output is on
        """
        self.backend = backend
        self.animation_duration = (
            config.animation_duration if animation_duration is None else animation_duration
        )
        self.rate = rate or config.voice_rate
        self.pitch = pitch or config.voice_pitch
        self._enabled = config.voice_enabled if enabled is None else enabled

        self.is_narrating = False
        self._current: Optional[_Narration] = None
        self._gate = PauseGate()

    @property
    def available(self) -> bool:
        """True when a speech backend is present."""
        return self.backend is not None

    @property
    def enabled(self) -> bool:
        return self._enabled

    @enabled.setter
    def enabled(self, value: bool) -> None:
        if self._enabled and not value:
            # The narration in flight completes now; later ones are silent
            self.cancel()
        self._enabled = value

    @property
    def is_paused(self) -> bool:
        return self._gate.is_paused

    def speak(self, text: str) -> "asyncio.Future":
        """
        Narrate text.

        Args:
            text: Text to narrate

        Returns:
            Future resolved with None once narration completes
        """
        loop = asyncio.get_running_loop()
        self.cancel()

        future = loop.create_future()

        if not self.available or not self._enabled:
            narration = _Narration(future)
            narration.timer = loop.create_task(self._complete_after_delay(narration))
            self._current = narration
            return future

        utterance = Utterance(text=text, rate=self.rate, pitch=self.pitch)
        narration = _Narration(future, utterance)
        utterance.on_start = lambda: self._on_start(narration)
        utterance.on_end = lambda: self._on_done(narration)
        utterance.on_error = lambda reason: self._on_error(narration, reason)

        self._select_voice(narration)
        self._current = narration
        self.backend.speak(utterance)
        return future

    def pause(self) -> None:
        """Suspend the active narration. No-op when nothing is active."""
        if self._current is None:
            return
        self._gate.pause()
        if self._current.utterance is not None:
            self.backend.pause()

    def resume(self) -> None:
        """Continue a suspended narration. No-op when nothing is active."""
        if self._current is None:
            return
        self._gate.resume()
        if self._current.utterance is not None:
            self.backend.resume()

    def cancel(self) -> None:
        """Stop the active narration and resolve its future. Idempotent."""
        narration = self._current
        self._current = None
        self._gate.resume()
        self.is_narrating = False

        if narration is None:
            return

        if narration.timer is not None and not narration.timer.done():
            narration.timer.cancel()
        if narration.utterance is not None:
            self._release_voices_listener(narration)
            self.backend.cancel()
        _settle(narration.future)

    def _select_voice(self, narration: _Narration) -> None:
        utterance = narration.utterance
        voices = self.backend.voices()
        if voices:
            utterance.voice = choose_voice(voices)
            return

        # Voice list still loading: pick one as soon as it arrives
        def on_voices_changed() -> None:
            self._release_voices_listener(narration)
            if utterance.voice is None:
                utterance.voice = choose_voice(self.backend.voices())

        narration.voices_listener = on_voices_changed
        self.backend.add_voices_listener(on_voices_changed)

    def _release_voices_listener(self, narration: _Narration) -> None:
        if narration.voices_listener is not None:
            self.backend.remove_voices_listener(narration.voices_listener)
            narration.voices_listener = None

    async def _complete_after_delay(self, narration: _Narration) -> None:
        await self._gate.sleep(self.animation_duration)
        self._finish(narration)

    def _on_start(self, narration: _Narration) -> None:
        if narration is self._current:
            self.is_narrating = True

    def _on_done(self, narration: _Narration) -> None:
        self._finish(narration)

    def _on_error(self, narration: _Narration, reason: str) -> None:
        if reason != "interrupted":
            logger.warning(f"Narration failed: {reason}")
        self._finish(narration)

    def _finish(self, narration: _Narration) -> None:
        if narration.utterance is not None:
            self._release_voices_listener(narration)
        if narration is self._current:
            self._current = None
            self.is_narrating = False
        _settle(narration.future)


def _settle(future: "asyncio.Future") -> None:
    if not future.done():
        future.set_result(None)
