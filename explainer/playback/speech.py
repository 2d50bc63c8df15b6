"""
Speech Backends

The text-to-speech boundary used by the narration engine. A backend speaks
one utterance at a time and reports progress through the utterance's
callbacks. Its voice list may be empty at first and fill in later, in which
case voices listeners are notified.

Backends:
- Pyttsx3SpeechBackend: system voices via pyttsx3
- ScriptedSpeechBackend: in-memory backend with simulated speaking time
"""

import asyncio
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, List, Optional

from explainer.playback.gate import PauseGate
from explainer.utils import logger


class SpeechBackendError(RuntimeError):
    """Raised when a speech backend cannot be initialised."""
    pass


@dataclass(frozen=True)
class Voice:
    """A voice offered by a speech backend."""

    id: str
    name: str
    lang: str = ""
    gender: str = ""


@dataclass(eq=False)
class Utterance:
    """One piece of text to speak, with completion callbacks."""

    text: str
    rate: float = 1.0
    pitch: float = 1.0
    voice: Optional[Voice] = None
    on_start: Optional[Callable[[], None]] = None
    on_end: Optional[Callable[[], None]] = None
    on_error: Optional[Callable[[str], None]] = None
    cancelled: bool = False

    def started(self) -> None:
        if self.on_start is not None:
            self.on_start()

    def ended(self) -> None:
        if self.on_end is not None:
            self.on_end()

    def failed(self, reason: str) -> None:
        if self.on_error is not None:
            self.on_error(reason)


class SpeechBackend(ABC):
    """Interface for text-to-speech services."""

    def __init__(self) -> None:
        self._voices_listeners: List[Callable[[], None]] = []

    @abstractmethod
    def voices(self) -> List[Voice]:
        """Currently known voices. May be empty until loaded."""

    @abstractmethod
    def speak(self, utterance: Utterance) -> None:
        """Start speaking. Progress is reported through the utterance."""

    @abstractmethod
    def cancel(self) -> None:
        """Stop the active utterance, if any."""

    @abstractmethod
    def pause(self) -> None:
        """Suspend the active utterance."""

    @abstractmethod
    def resume(self) -> None:
        """Continue a suspended utterance."""

    def add_voices_listener(self, listener: Callable[[], None]) -> None:
        self._voices_listeners.append(listener)

    def remove_voices_listener(self, listener: Callable[[], None]) -> None:
        if listener in self._voices_listeners:
            self._voices_listeners.remove(listener)

    def _notify_voices_changed(self) -> None:
        for listener in list(self._voices_listeners):
            listener()

    def close(self) -> None:
        """Release backend resources."""


class ScriptedSpeechBackend(SpeechBackend):
    """
    In-memory speech backend.

    Each utterance "speaks" for ``speech_duration`` seconds of unpaused time.
    With ``speech_duration=None`` utterances stay active until ``finish()``
    or ``fail()`` is called, which lets callers drive completion by hand.
    Cancelling reports an "interrupted" error, like browser speech engines.
    """

    def __init__(
        self,
        voices: Optional[List[Voice]] = None,
        speech_duration: Optional[float] = 0.0,
    ):
        super().__init__()
        self._voices = list(voices or [])
        self.speech_duration = speech_duration
        self.spoken: List[Utterance] = []
        self.cancel_count = 0
        self.current: Optional[Utterance] = None
        self._gate = PauseGate()
        self._timer: Optional[asyncio.Task] = None

    @property
    def is_paused(self) -> bool:
        return self._gate.is_paused

    def voices(self) -> List[Voice]:
        return list(self._voices)

    def load_voices(self, voices: List[Voice]) -> None:
        """Populate the voice list and notify listeners."""
        self._voices = list(voices)
        self._notify_voices_changed()

    def speak(self, utterance: Utterance) -> None:
        loop = asyncio.get_running_loop()
        self.cancel()
        self.spoken.append(utterance)
        self.current = utterance
        self._gate.resume()
        loop.call_soon(self._start, utterance)

        if self.speech_duration is not None:
            self._timer = loop.create_task(self._finish_later(utterance))

    def _start(self, utterance: Utterance) -> None:
        if utterance is self.current:
            utterance.started()

    async def _finish_later(self, utterance: Utterance) -> None:
        # Let the start callback run first
        await asyncio.sleep(0)
        await self._gate.sleep(self.speech_duration)
        self.finish(utterance)

    def finish(self, utterance: Optional[Utterance] = None) -> None:
        """Complete the active utterance normally."""
        utterance = utterance or self.current
        if utterance is None or utterance is not self.current:
            return
        self.current = None
        utterance.ended()

    def fail(self, reason: str = "synthesis-failed") -> None:
        """Complete the active utterance with an error."""
        utterance = self.current
        if utterance is None:
            return
        self._stop_timer()
        self.current = None
        utterance.failed(reason)

    def cancel(self) -> None:
        self._stop_timer()
        utterance = self.current
        if utterance is None:
            return
        self.cancel_count += 1
        self.current = None
        utterance.cancelled = True
        utterance.failed("interrupted")

    def pause(self) -> None:
        if self.current is not None:
            self._gate.pause()

    def resume(self) -> None:
        self._gate.resume()

    def _stop_timer(self) -> None:
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()
        self._timer = None


class Pyttsx3SpeechBackend(SpeechBackend):
    """
    System text-to-speech through pyttsx3.

    pyttsx3 blocks while speaking, so the engine lives on one dedicated
    worker thread. Callbacks are delivered back on the event loop.

    On Windows: Uses SAPI5 voices
    On macOS: Uses NSSpeechSynthesizer
    On Linux: Uses espeak
    """

    BASE_RATE = 200  # pyttsx3 default words per minute

    def __init__(self) -> None:
        super().__init__()
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="pyttsx3")
        self._engine = None
        self._voices: Optional[List[Voice]] = None
        self._loading = False
        self._current: Optional[Utterance] = None
        self._warned_pause = False

    def _get_engine(self):
        """Lazy load pyttsx3 engine. Runs on the worker thread."""
        if self._engine is None:
            try:
                import pyttsx3

                self._engine = pyttsx3.init()
            except ImportError as e:
                raise SpeechBackendError(
                    "pyttsx3 not found. Install with: pip install pyttsx3"
                ) from e
            except Exception as e:
                raise SpeechBackendError(f"Could not start system TTS: {e}") from e

        return self._engine

    def probe(self) -> None:
        """
        Start the engine now rather than on first use.

        Raises:
            SpeechBackendError: If the system TTS cannot be initialised
        """
        self._executor.submit(self._get_engine).result()

    def voices(self) -> List[Voice]:
        if self._voices is not None:
            return list(self._voices)

        # First query starts loading; listeners hear when it is done
        if not self._loading:
            self._loading = True
            loop = asyncio.get_running_loop()
            future = loop.run_in_executor(self._executor, self._load_voices)
            future.add_done_callback(self._voices_loaded)

        return []

    def _load_voices(self) -> List[Voice]:
        engine = self._get_engine()
        return [
            Voice(
                id=v.id,
                name=v.name or v.id,
                lang=_voice_lang(getattr(v, "languages", None)),
                gender=getattr(v, "gender", None) or "",
            )
            for v in engine.getProperty("voices")
        ]

    def _voices_loaded(self, future: "asyncio.Future") -> None:
        self._loading = False
        if future.exception() is not None:
            logger.warning(f"Could not list system voices: {future.exception()}")
            self._voices = []
            self._notify_voices_changed()
            return

        self._voices = future.result()
        self._notify_voices_changed()

    def speak(self, utterance: Utterance) -> None:
        loop = asyncio.get_running_loop()
        self.cancel()
        self._current = utterance
        self._executor.submit(self._say, loop, utterance)

    def _say(self, loop: asyncio.AbstractEventLoop, utterance: Utterance) -> None:
        """Speak on the worker thread and report back to the loop."""
        if utterance.cancelled:
            return

        try:
            engine = self._get_engine()
            engine.setProperty("rate", int(self.BASE_RATE * utterance.rate))
            if utterance.voice is not None:
                engine.setProperty("voice", utterance.voice.id)

            loop.call_soon_threadsafe(self._dispatch_start, utterance)
            engine.say(utterance.text)
            engine.runAndWait()
        except Exception as e:
            loop.call_soon_threadsafe(self._dispatch_end, utterance, str(e))
        else:
            loop.call_soon_threadsafe(self._dispatch_end, utterance, None)

    def _dispatch_start(self, utterance: Utterance) -> None:
        if utterance is self._current:
            utterance.started()

    def _dispatch_end(self, utterance: Utterance, error: Optional[str]) -> None:
        if utterance is self._current:
            self._current = None
        if utterance.cancelled:
            return
        if error is None:
            utterance.ended()
        else:
            utterance.failed(error)

    def cancel(self) -> None:
        utterance = self._current
        if utterance is None:
            return
        self._current = None
        utterance.cancelled = True
        if self._engine is not None:
            self._engine.stop()
        utterance.failed("interrupted")

    def pause(self) -> None:
        # pyttsx3 cannot suspend mid-utterance
        if not self._warned_pause:
            logger.warning("System TTS cannot pause; the current sentence will finish")
            self._warned_pause = True

    def resume(self) -> None:
        pass

    def close(self) -> None:
        self.cancel()
        self._executor.shutdown(wait=False)


def _voice_lang(languages) -> str:
    """Normalise pyttsx3 language lists (espeak reports bytes like b'\\x05en-us')."""
    if not languages:
        return ""
    lang = languages[0]
    if isinstance(lang, bytes):
        lang = lang.decode("utf-8", errors="ignore")
    return lang.lstrip("\x00\x01\x02\x03\x04\x05\x06\x07\x08").strip()


def create_speech_backend() -> Optional[SpeechBackend]:
    """
    Create the system speech backend.

    Returns:
        A working Pyttsx3SpeechBackend, or None when pyttsx3 is not installed

    Raises:
        SpeechBackendError: If pyttsx3 is installed but the engine fails to start
    """
    try:
        import pyttsx3  # noqa: F401
    except ImportError:
        logger.warning("pyttsx3 not installed; narration will be silent")
        return None

    backend = Pyttsx3SpeechBackend()
    try:
        backend.probe()
    except SpeechBackendError:
        backend.close()
        raise

    return backend
