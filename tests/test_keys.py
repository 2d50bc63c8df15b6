import asyncio
import io

from explainer.playback.controller import Phase, PlaybackController
from explainer.playback.keys import handle_key, key_reader
from explainer.playback.narration import NarrationEngine
from explainer.playback.ticker import TextRevealTicker


def make_controller():
    return PlaybackController(
        ["A.", "B."],
        "Welcome to our explanation of X. S.",
        NarrationEngine(None, animation_duration=0.05, enabled=True),
        ticker=TextRevealTicker(interval=0.001),
        settle_delay=0.005,
    )


def test_keys_drive_the_controller():
    async def scenario():
        controller = make_controller()
        phases = []

        handle_key(controller, "s")
        phases.append(controller.phase)
        handle_key(controller, " ")
        phases.append(controller.phase)
        handle_key(controller, "P")
        phases.append(controller.phase)

        handle_key(controller, "v")
        voice = controller.narrator.enabled

        handle_key(controller, "r")
        phases.append(controller.phase)
        keep_going = handle_key(controller, "x")
        quit_requested = not handle_key(controller, "q")
        return phases, voice, keep_going, quit_requested

    phases, voice, keep_going, quit_requested = asyncio.run(scenario())

    assert phases == [Phase.PLAYING, Phase.PAUSED, Phase.PLAYING, Phase.IDLE]
    assert voice is False
    assert keep_going
    assert quit_requested


def test_no_key_controls_without_terminal(monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO(""))

    with key_reader(lambda key: None) as interactive:
        assert interactive is False
