"""
Playback Controller

State machine that walks through the key points of an explanation,
revealing each one word by word while it is narrated.

    IDLE --start--> PLAYING <--toggle_pause--> PAUSED
    PLAYING --last point done--> COMPLETED
    any --reset--> IDLE
"""

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Sequence

from explainer.models import GeneratedContent
from explainer.playback.gate import PauseGate
from explainer.playback.narration import NarrationEngine
from explainer.playback.ticker import TextRevealTicker
from explainer.utils.config import config
from explainer.utils import logger


class Phase(Enum):
    IDLE = "idle"
    PLAYING = "playing"
    PAUSED = "paused"
    COMPLETED = "completed"


@dataclass(frozen=True)
class PlaybackState:
    """Snapshot of the controller, handed to listeners."""

    phase: Phase
    current_index: int
    revealed_text: str
    is_narrating: bool


class PlaybackController:
    """
    Sequence narration and text reveal over a list of points.

    One driver task runs per playback. For each point it starts the reveal,
    waits for narration to complete, shows the full text, waits out the
    settling pause and then advances. Pausing halts all of it; reset
    cancels it.
    """

    def __init__(
        self,
        key_points: Sequence[str],
        script: str,
        narrator: NarrationEngine,
        ticker: Optional[TextRevealTicker] = None,
        settle_delay: Optional[float] = None,
        completion_message: Optional[str] = None,
    ):
        """
        Initialize the controller.

        Args:
            key_points: Points to narrate in order
            script: Narrated as the only point when there are no key points
            narrator: Narration engine (shared speech resource)
            ticker: Text reveal ticker (default: a new TextRevealTicker)
            settle_delay: Pause between points in seconds
            completion_message: Text shown once the last point finishes
        """
        self.points: List[str] = list(key_points) or [script]
        self.narrator = narrator
        self.ticker = ticker or TextRevealTicker()
        self.ticker.on_update = self._on_reveal
        self.settle_delay = config.settle_delay if settle_delay is None else settle_delay
        self.completion_message = completion_message or config.completion_message

        self._phase = Phase.IDLE
        self._index = 0
        self._revealed = ""
        self._gate = PauseGate()
        self._task: Optional[asyncio.Task] = None
        self._listeners: List[Callable[[PlaybackState], None]] = []

    @classmethod
    def from_content(
        cls,
        content: GeneratedContent,
        narrator: NarrationEngine,
        **kwargs,
    ) -> "PlaybackController":
        """Create a controller for generated content."""
        return cls(content.key_points, content.script, narrator, **kwargs)

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def current_index(self) -> int:
        return self._index

    @property
    def revealed_text(self) -> str:
        return self._revealed

    @property
    def state(self) -> PlaybackState:
        return PlaybackState(
            phase=self._phase,
            current_index=self._index,
            revealed_text=self._revealed,
            is_narrating=self.narrator.is_narrating,
        )

    def subscribe(self, listener: Callable[[PlaybackState], None]) -> None:
        """Register a listener called with the new state on every change."""
        self._listeners.append(listener)

    def start(self) -> None:
        """Start playback from the first point. Resumes when paused."""
        if self._phase is Phase.PLAYING:
            return
        if self._phase is Phase.PAUSED:
            self.toggle_pause()
            return

        self._index = 0
        self._phase = Phase.PLAYING
        self._gate.resume()

        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._drive())
        self._task.add_done_callback(self._driver_done)
        self._notify()

    def toggle_pause(self) -> None:
        """Switch between PLAYING and PAUSED. Ignored in other phases."""
        if self._phase is Phase.PLAYING:
            self._phase = Phase.PAUSED
            self._gate.pause()
            self.narrator.pause()
            self.ticker.pause()
        elif self._phase is Phase.PAUSED:
            self._phase = Phase.PLAYING
            self._gate.resume()
            self.narrator.resume()
            self.ticker.resume()
        else:
            return

        self._notify()

    def reset(self) -> None:
        """Stop everything and return to IDLE. Safe to call in any phase."""
        task = self._task
        self._task = None
        if task is not None and not task.done():
            task.cancel()

        self.ticker.cancel()
        self.narrator.cancel()
        self._gate.resume()

        self._phase = Phase.IDLE
        self._index = 0
        self._revealed = ""
        self._notify()

    def set_voice_enabled(self, enabled: bool) -> None:
        """Switch voice output without changing the playback phase."""
        self.narrator.enabled = enabled
        self._notify()

    def toggle_voice(self) -> None:
        self.set_voice_enabled(not self.narrator.enabled)

    async def wait(self) -> None:
        """Wait until the current playback completes or is reset."""
        task = self._task
        if task is not None:
            await asyncio.wait({task})

    async def play(self) -> None:
        """Start playback and wait for it to finish."""
        self.start()
        await self.wait()

    async def _drive(self) -> None:
        while True:
            await self._gate.wait_open()
            if self._phase is not Phase.PLAYING:
                return

            await self._play_point(self.points[self._index])
            await self._gate.sleep(self.settle_delay)

            if self._index >= len(self.points) - 1:
                self._phase = Phase.COMPLETED
                self._revealed = self.completion_message
                self._notify()
                return

            self._index += 1
            self._notify()

    async def _play_point(self, text: str) -> None:
        handle = self.ticker.reveal(text)
        await self.narrator.speak(text)
        handle.finish()

    def _driver_done(self, task: "asyncio.Task") -> None:
        if task.cancelled():
            return
        if task.exception() is not None:
            logger.error(f"Playback stopped: {task.exception()}")
            if task is self._task:
                self.reset()

    def _on_reveal(self, text: str) -> None:
        if self._phase in (Phase.PLAYING, Phase.PAUSED):
            self._revealed = text
            self._notify()

    def _notify(self) -> None:
        state = self.state
        for listener in list(self._listeners):
            listener(state)
