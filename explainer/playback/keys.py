"""
Keyboard controls for terminal playback.

    space / p   pause or resume
    v           voice on/off
    r           reset
    s           start (replay)
    q           quit

Keys are read without waiting for Enter while playback runs. On terminals
without termios (Windows) or when stdin is not a terminal, playback runs
without key controls.
"""

import asyncio
import os
import sys
from contextlib import contextmanager
from typing import Callable, Iterator

try:
    import termios
    import tty
except ImportError:  # Windows
    termios = None

from explainer.playback.controller import PlaybackController

KEY_HINTS = "space pause · v voice · r reset · s start · q quit"


def handle_key(controller: PlaybackController, key: str) -> bool:
    """
    Apply one key press to the controller.

    Returns:
        False when the key asks to quit, True otherwise
    """
    key = key.lower()

    if key == "q":
        return False
    if key in (" ", "p"):
        controller.toggle_pause()
    elif key == "v":
        controller.toggle_voice()
    elif key == "r":
        controller.reset()
    elif key == "s":
        controller.start()

    return True


@contextmanager
def key_reader(on_key: Callable[[str], None]) -> Iterator[bool]:
    """
    Deliver key presses to ``on_key`` from the running event loop.

    Yields:
        True if keys are being read, False if stdin is not an interactive terminal
    """
    stream = sys.stdin
    if termios is None or stream is None or not stream.isatty():
        yield False
        return

    fd = stream.fileno()
    saved = termios.tcgetattr(fd)
    loop = asyncio.get_running_loop()

    def read() -> None:
        for key in os.read(fd, 32).decode("utf-8", errors="ignore"):
            on_key(key)

    # cbreak keeps output processing and Ctrl+C, unlike raw mode
    tty.setcbreak(fd)
    loop.add_reader(fd, read)
    try:
        yield True
    finally:
        loop.remove_reader(fd)
        termios.tcsetattr(fd, termios.TCSADRAIN, saved)
