#!/usr/bin/env python3
"""
Explainer - Main CLI

Turns a topic and a free-text explanation into study material:
a summary, key points, flashcards and a quiz. The key points can be
played back in the terminal with word-by-word reveal and narration.

Features:
- Deterministic summary, key point, flashcard and quiz generation
- Narrated playback using system voices (pyttsx3), or silent pacing
- Interactive quiz with scoring
- Flashcard (JSON) and summary (text) export
"""

import asyncio
import sys
from pathlib import Path
from typing import Optional

import click
from rich.live import Live
from rich.panel import Panel
from rich.text import Text

from explainer.analysis.synthesizer import ValidationError, generate_content, generation_stage
from explainer.export import save_flashcards, save_summary
from explainer.models import GeneratedContent, RawInput
from explainer.playback.controller import Phase, PlaybackController, PlaybackState
from explainer.playback.keys import KEY_HINTS, handle_key, key_reader
from explainer.playback.narration import NarrationEngine, choose_voice
from explainer.playback.speech import SpeechBackendError, create_speech_backend
from explainer.quiz import QuizGrader
from explainer.utils import logger
from explainer.utils.config import config


def _read_explanation(text: Optional[str], file: Optional[str]) -> str:
    if file:
        return Path(file).read_text(encoding="utf-8")
    if text:
        return text
    return click.edit("# Enter a detailed explanation of the topic\n") or ""


def _generate(
    topic: str,
    text: Optional[str],
    file: Optional[str],
    cards: int,
    duration: int,
) -> GeneratedContent:
    """Generate content, exiting with an error message on invalid input."""
    raw = RawInput(
        topic=topic,
        explanation=_read_explanation(text, file),
        flashcard_count=cards,
        animation_duration=duration,
    )

    with logger.create_progress() as progress:
        task = progress.add_task(generation_stage(0), total=100)
        try:
            content = generate_content(raw)
        except ValidationError as e:
            progress.stop()
            logger.error(str(e))
            sys.exit(1)
        progress.update(task, completed=100, description=generation_stage(100))

    logger.success(f"Content generated for: {topic}")
    return content


def input_options(func):
    """Options shared by every command that generates content."""
    func = click.option(
        "-f", "--file",
        type=click.Path(exists=True, dir_okay=False),
        help="Read the explanation from a text file",
    )(func)
    func = click.option(
        "-t", "--text",
        default=None,
        help="Explanation text (default: open an editor)",
    )(func)
    return click.argument("topic")(func)


@click.group()
@click.version_option(version="1.0.0")
def cli():
    """
    Explainer

    Generate summaries, flashcards and quizzes from an explanation,
    and play it back with narration.
    """
    pass


@cli.command()
@input_options
@click.option(
    "-n", "--cards",
    type=click.IntRange(3, 10),
    default=config.flashcard_count,
    show_default=True,
    help="Number of flashcards",
)
@click.option(
    "-o", "--output",
    type=click.Path(file_okay=False),
    help="Output directory (default: output/)",
)
def generate(
    topic: str,
    text: Optional[str],
    file: Optional[str],
    cards: int,
    output: Optional[str],
):
    """
    Generate study material and save it.

    Writes <topic>_summary.txt and <topic>_flashcards.json.
    """
    logger.header(f"Explaining: {topic}")
    content = _generate(topic, text, file, cards, config.animation_duration)

    logger.console.print("[bold]Summary:[/bold]")
    logger.console.print(f"  {content.summary}\n")

    logger.console.print("[bold]Key Points:[/bold]")
    logger.numbered(content.key_points)
    logger.console.print()

    logger.step("Saving exports")
    output_dir = Path(output) if output else config.get_path("output")
    save_summary(content, output_dir)
    save_flashcards(content, output_dir)

    logger.info(f"Flashcards: {len(content.flashcards)}, quiz questions: {len(content.quiz)}")


@cli.command()
@input_options
@click.option(
    "-d", "--duration",
    type=click.IntRange(3, 10),
    default=config.animation_duration,
    show_default=True,
    help="Seconds per point when narration is silent",
)
@click.option("--no-voice", is_flag=True, help="Play without speech")
def play(
    topic: str,
    text: Optional[str],
    file: Optional[str],
    duration: int,
    no_voice: bool,
):
    """
    Play the key points with narration.

    Each point is revealed word by word while it is spoken.
    In a terminal: space pauses, v toggles voice, r resets,
    s starts again and q quits. Press Ctrl+C to stop at any time.
    """
    logger.header(f"Explaining: {topic}")
    content = _generate(topic, text, file, config.flashcard_count, duration)

    try:
        asyncio.run(_run_playback(content, duration, voice=not no_voice))
    except KeyboardInterrupt:
        logger.warning("Playback stopped")


async def _run_playback(content: GeneratedContent, duration: int, voice: bool) -> None:
    backend = None
    if voice and config.voice_enabled:
        try:
            backend = create_speech_backend()
        except SpeechBackendError as e:
            logger.warning(f"{e}; narration will be silent")

    narrator = NarrationEngine(backend, animation_duration=duration, enabled=backend is not None)
    controller = PlaybackController.from_content(content, narrator)
    total = len(controller.points)

    finished = asyncio.Event()
    interactive = False

    def on_key(key: str) -> None:
        if not handle_key(controller, key):
            finished.set()

    with Live(_render(controller.state, total), console=logger.console, refresh_per_second=20) as live:
        controller.subscribe(lambda state: live.update(_render(state, total, interactive)))
        try:
            with key_reader(on_key) as interactive:
                controller.start()
                if interactive:
                    # Stay open after completion so the explanation can be replayed
                    await finished.wait()
                else:
                    await controller.wait()
        finally:
            if controller.phase is not Phase.COMPLETED:
                controller.reset()
            if backend is not None:
                backend.close()


def _render(state: PlaybackState, total: int, hints: bool = False) -> Panel:
    """Panel showing the revealed text for the current point."""
    if state.phase is Phase.IDLE:
        body = Text(config.idle_message, style="dim")
        title = "Ready"
    elif state.phase is Phase.COMPLETED:
        body = Text(state.revealed_text, style="success")
        title = "Done"
    else:
        body = Text(state.revealed_text)
        title = f"Point {state.current_index + 1}/{total}"

    subtitle = "🔊 narrating" if state.is_narrating else state.phase.value
    if hints:
        subtitle = f"{subtitle} · {KEY_HINTS}"
    return Panel(body, title=title, subtitle=subtitle, border_style="highlight")


@cli.command()
@input_options
def quiz(topic: str, text: Optional[str], file: Optional[str]):
    """
    Take the multiple-choice quiz for an explanation.
    """
    logger.header(f"Quiz: {topic}")
    content = _generate(topic, text, file, config.flashcard_count, config.animation_duration)

    if not content.quiz:
        logger.warning("No quiz questions could be generated from this explanation")
        return

    grader = QuizGrader(content.quiz)

    while True:
        for q_index, question in enumerate(grader.questions):
            logger.console.print(f"\n[bold]{q_index + 1}. {question.question}[/bold]")
            for o_index, option in enumerate(question.options, 1):
                logger.console.print(f"   {o_index}) {option}")
            choice = click.prompt("Your answer", type=click.IntRange(1, len(question.options)))
            grader.select(q_index, choice - 1)

        grader.submit()

        logger.console.print()
        for q_index, question in enumerate(grader.questions):
            correct = question.options[question.correct_index]
            logger.result(
                grader.is_correct(q_index),
                f"Question {q_index + 1}: {correct}",
            )

        logger.header(f"Your Score: {grader.score}/{len(grader.questions)}")
        logger.console.print(grader.feedback)

        if not click.confirm("\nTry again?", default=False):
            break
        grader.reset()


@cli.command()
@input_options
@click.option(
    "-n", "--cards",
    type=click.IntRange(3, 10),
    default=config.flashcard_count,
    show_default=True,
    help="Number of flashcards",
)
def flashcards(topic: str, text: Optional[str], file: Optional[str], cards: int):
    """
    Show flashcards; press Enter to reveal each answer.
    """
    logger.header(f"Flashcards: {topic}")
    content = _generate(topic, text, file, cards, config.animation_duration)

    for i, card in enumerate(content.flashcards, 1):
        logger.console.print(f"\n[highlight]Card {i}/{len(content.flashcards)}[/highlight]")
        logger.console.print(f"[bold]Q:[/bold] {card.question}")
        click.pause("Press any key to flip...")
        logger.console.print(f"[bold]A:[/bold] {card.answer}")


@cli.command()
def list_voices():
    """
    List available system voices.
    """
    logger.header("Available Voices")

    try:
        backend = create_speech_backend()
    except SpeechBackendError as e:
        logger.error(str(e))
        sys.exit(1)

    if backend is None:
        return

    async def load():
        loaded = asyncio.Event()
        backend.add_voices_listener(loaded.set)
        voices = backend.voices()
        if not voices:
            await loaded.wait()
        return backend.voices()

    try:
        voices = asyncio.run(load())
    finally:
        backend.close()

    if not voices:
        logger.warning("No system voices found")
        return

    preferred = choose_voice(voices)

    for voice in voices:
        marker = "*" if voice == preferred else " "
        logger.console.print(f"  {marker} {voice.name:<30} {voice.lang:<8} {voice.id}")

    logger.console.print("\n* Used for narration")


@cli.command()
def info():
    """
    Show configuration and speech support.
    """
    logger.header("Explainer")

    logger.console.print("[bold]Paths:[/bold]")
    logger.console.print(f"  Project root: {config.project_root}")
    logger.console.print(f"  Output:       {config.get_path('output')}")

    logger.console.print("\n[bold]Generation:[/bold]")
    logger.console.print(f"  Flashcards:    {config.flashcard_count}")
    logger.console.print(f"  Min sentence:  {config.min_sentence_length} chars")

    logger.console.print("\n[bold]Playback:[/bold]")
    logger.console.print(f"  Duration:      {config.animation_duration}s per silent point")
    logger.console.print(f"  Reveal:        {config.reveal_interval * 1000:.0f} ms per word")
    logger.console.print(f"  Settle pause:  {config.settle_delay * 1000:.0f} ms")
    logger.console.print(f"  Voice:         {'on' if config.voice_enabled else 'off'} (rate {config.voice_rate})")

    logger.console.print("\n[bold]Dependencies:[/bold]")
    try:
        import pyttsx3  # noqa: F401
        logger.console.print(f"  {'pyttsx3':<12} [green]OK[/green]")
    except ImportError:
        logger.console.print(f"  {'pyttsx3':<12} [red]NOT FOUND[/red] (silent playback only)")


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
