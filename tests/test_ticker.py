import asyncio

from explainer.playback.ticker import TextRevealTicker


def test_reveals_one_word_per_tick():
    async def scenario():
        updates = []
        done = asyncio.Event()
        ticker = TextRevealTicker(interval=0.001, on_update=updates.append)

        ticker.reveal("light makes sugar", on_complete=done.set)
        await asyncio.wait_for(done.wait(), timeout=1)
        return updates, ticker.revealed_text

    updates, revealed = asyncio.run(scenario())

    assert updates == ["", "light", "light makes", "light makes sugar"]
    assert revealed == "light makes sugar"


def test_cancel_stops_without_completion():
    async def scenario():
        completed = []
        ticker = TextRevealTicker(interval=0.01)
        handle = ticker.reveal("one two three four five six", on_complete=lambda: completed.append(True))

        await asyncio.sleep(0.025)
        handle.cancel()
        handle.cancel()
        partial = ticker.revealed_text
        await asyncio.sleep(0.1)
        return completed, partial, ticker.revealed_text, handle.done

    completed, partial, final, done = asyncio.run(scenario())

    assert completed == []
    assert final == partial
    assert final != "one two three four five six"
    assert done


def test_finish_shows_full_text():
    async def scenario():
        ticker = TextRevealTicker(interval=0.05)
        handle = ticker.reveal("alpha beta gamma")
        await asyncio.sleep(0)
        handle.finish()
        await asyncio.sleep(0.1)
        return ticker.revealed_text

    assert asyncio.run(scenario()) == "alpha beta gamma"


def test_new_reveal_replaces_previous():
    async def scenario():
        updates = []
        ticker = TextRevealTicker(interval=0.001, on_update=updates.append)
        ticker.reveal("first text that is long enough to still be running")
        await asyncio.sleep(0.003)

        done = asyncio.Event()
        ticker.reveal("second", on_complete=done.set)
        await asyncio.wait_for(done.wait(), timeout=1)
        await asyncio.sleep(0.05)
        return updates, ticker.revealed_text

    updates, revealed = asyncio.run(scenario())

    assert revealed == "second"
    assert updates[-2:] == ["", "second"]


def test_pause_suspends_ticking():
    async def scenario():
        ticker = TextRevealTicker(interval=0.01)
        done = asyncio.Event()
        ticker.reveal("a b c d e f g h", on_complete=done.set)
        ticker.pause()
        await asyncio.sleep(0.1)
        paused_text = ticker.revealed_text

        ticker.resume()
        await asyncio.wait_for(done.wait(), timeout=1)
        return paused_text, ticker.revealed_text

    paused_text, final = asyncio.run(scenario())

    assert paused_text == ""
    assert final == "a b c d e f g h"
