"""
Text Reveal Ticker

Progressively reveals the text being narrated, one word per tick.
"""

import asyncio
from typing import Callable, List, Optional

from explainer.playback.gate import PauseGate
from explainer.utils.config import config


class RevealHandle:
    """Handle for one running reveal. Cancelling twice is harmless."""

    def __init__(self, ticker: "TextRevealTicker", task: "asyncio.Task", text: str):
        self._ticker = ticker
        self._task = task
        self.text = text

    @property
    def done(self) -> bool:
        return self._task.done()

    def cancel(self) -> None:
        """Stop ticking. The completion callback is not invoked."""
        if not self._task.done():
            self._task.cancel()

    def finish(self) -> None:
        """Stop ticking and show the whole text."""
        self.cancel()
        if self._ticker._handle is self:
            self._ticker._show(self.text)


class TextRevealTicker:
    """
    Word-by-word text reveal driven by the event loop.

    Each tick appends one word to the revealed prefix. ``on_update`` is
    called with the new prefix after every change.
    """

    def __init__(
        self,
        interval: Optional[float] = None,
        on_update: Optional[Callable[[str], None]] = None,
    ):
        """
        Initialize the ticker.

        Args:
            interval: Seconds between words (default from config)
            on_update: Called with the revealed text after every change
        """
        self.interval = config.reveal_interval if interval is None else interval
        self.on_update = on_update
        self.revealed_text = ""
        self._handle: Optional[RevealHandle] = None
        self._gate = PauseGate()

    def reveal(
        self,
        text: str,
        on_complete: Optional[Callable[[], None]] = None,
    ) -> RevealHandle:
        """
        Start revealing text, replacing any reveal in progress.

        Args:
            text: Text to reveal, split on single spaces
            on_complete: Called once every word is shown

        Returns:
            RevealHandle for cancelling this reveal
        """
        self.cancel()
        self._show("")

        loop = asyncio.get_running_loop()
        task = loop.create_task(self._run(text.split(" "), on_complete))
        self._handle = RevealHandle(self, task, text)
        return self._handle

    def cancel(self) -> None:
        """Cancel the current reveal, if any, leaving the text as it is."""
        if self._handle is not None:
            self._handle.cancel()
        self._gate.resume()

    def pause(self) -> None:
        self._gate.pause()

    def resume(self) -> None:
        self._gate.resume()

    async def _run(self, words: List[str], on_complete: Optional[Callable[[], None]]) -> None:
        for count in range(1, len(words) + 1):
            await self._gate.sleep(self.interval)
            self._show(" ".join(words[:count]))

        if on_complete is not None:
            on_complete()

    def _show(self, text: str) -> None:
        self.revealed_text = text
        if self.on_update is not None:
            self.on_update(text)
