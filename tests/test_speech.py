import asyncio
import sys
import time
import types

import pytest

from explainer.playback.speech import (
    Pyttsx3SpeechBackend,
    SpeechBackendError,
    Utterance,
    create_speech_backend,
)


class FakeEngine:
    """Stands in for a pyttsx3 engine; speaking takes ``delay`` seconds."""

    def __init__(self, delay=0.1):
        self.delay = delay
        self.spoken = []
        self.stop_count = 0
        self.properties = {}
        self._queued = []

    def setProperty(self, name, value):
        self.properties[name] = value

    def getProperty(self, name):
        if name == "voices":
            return [types.SimpleNamespace(id="v1", name="Daniel", languages=[b"\x05en-gb"], gender="male")]
        return self.properties.get(name)

    def say(self, text):
        self._queued.append(text)

    def runAndWait(self):
        time.sleep(self.delay)
        self.spoken.extend(self._queued)
        self._queued = []

    def stop(self):
        self.stop_count += 1


def install_pyttsx3(monkeypatch, init):
    module = types.ModuleType("pyttsx3")
    module.init = init
    monkeypatch.setitem(sys.modules, "pyttsx3", module)


def test_cancelled_utterances_waiting_in_queue_are_skipped(monkeypatch):
    engine = FakeEngine(delay=0.1)
    install_pyttsx3(monkeypatch, lambda: engine)
    events = []

    async def scenario():
        backend = Pyttsx3SpeechBackend()
        backend.probe()
        done = asyncio.Event()

        first = Utterance("X", on_end=lambda: events.append("X ended"),
                          on_error=lambda reason: events.append(f"X {reason}"))
        backend.speak(first)
        await asyncio.sleep(0.02)

        backend.speak(Utterance("A"))
        backend.speak(Utterance("B"))
        backend.speak(Utterance("C", on_end=done.set))
        await asyncio.wait_for(done.wait(), timeout=2)
        backend.close()

    asyncio.run(scenario())

    assert engine.spoken == ["X", "C"]
    assert events == ["X interrupted"]
    assert engine.stop_count >= 1


def test_voices_load_in_background(monkeypatch):
    install_pyttsx3(monkeypatch, lambda: FakeEngine(delay=0))

    async def scenario():
        backend = Pyttsx3SpeechBackend()
        loaded = asyncio.Event()
        backend.add_voices_listener(loaded.set)
        first = backend.voices()
        await asyncio.wait_for(loaded.wait(), timeout=2)
        voices = backend.voices()
        backend.close()
        return first, voices

    first, voices = asyncio.run(scenario())

    assert first == []
    assert [(v.id, v.lang) for v in voices] == [("v1", "en-gb")]


def test_engine_start_failure_raises(monkeypatch):
    def broken_init():
        raise RuntimeError("no espeak")

    install_pyttsx3(monkeypatch, broken_init)

    with pytest.raises(SpeechBackendError):
        create_speech_backend()


def test_missing_pyttsx3_gives_no_backend(monkeypatch):
    monkeypatch.setitem(sys.modules, "pyttsx3", None)
    assert create_speech_backend() is None


def test_working_engine_gives_backend(monkeypatch):
    install_pyttsx3(monkeypatch, lambda: FakeEngine(delay=0))
    backend = create_speech_backend()

    assert isinstance(backend, Pyttsx3SpeechBackend)
    backend.close()
