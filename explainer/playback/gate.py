"""
Pause gate shared by the playback components.

A gate is either open (running) or closed (paused). Coroutines can wait
for it to open, or sleep for a duration that only elapses while it is open.
"""

import asyncio


class PauseGate:
    """Open/closed flag with pausable waiting."""

    def __init__(self) -> None:
        self._open = asyncio.Event()
        self._closed = asyncio.Event()
        self._open.set()

    @property
    def is_paused(self) -> bool:
        return not self._open.is_set()

    def pause(self) -> None:
        self._open.clear()
        self._closed.set()

    def resume(self) -> None:
        self._closed.clear()
        self._open.set()

    async def wait_open(self) -> None:
        """Return once the gate is open."""
        await self._open.wait()

    async def sleep(self, seconds: float) -> None:
        """
        Sleep for ``seconds`` of open time.

        Time spent paused does not count; the remaining delay continues
        after resume.
        """
        loop = asyncio.get_running_loop()
        remaining = max(seconds, 0.0)

        while True:
            await self._open.wait()
            started = loop.time()
            try:
                await asyncio.wait_for(self._closed.wait(), timeout=remaining)
            except asyncio.TimeoutError:
                return
            remaining = max(remaining - (loop.time() - started), 0.0)
