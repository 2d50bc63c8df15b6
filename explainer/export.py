"""
Exporters for generated content.

Flashcards are written as a JSON array, the summary as plain text.
"""

import json
import re
from pathlib import Path

from explainer.models import GeneratedContent
from explainer.utils import logger


def flashcards_json(content: GeneratedContent) -> str:
    """Flashcards as a JSON array of {question, answer} objects."""
    return json.dumps(
        [card.to_dict() for card in content.flashcards],
        indent=2,
        ensure_ascii=False,
    )


def summary_text(content: GeneratedContent) -> str:
    """Topic, summary and numbered key points as plain text."""
    points = "\n".join(f"{i}. {point}" for i, point in enumerate(content.key_points, 1))
    return (
        f"Topic: {content.topic}\n\n"
        f"Summary:\n{content.summary}\n\n"
        f"Key Points:\n{points}"
    )


def export_name(topic: str) -> str:
    """Topic made safe to use as a file name inside the output directory."""
    return re.sub(r"[\\/]", "_", topic)


def save_flashcards(content: GeneratedContent, output_dir: Path) -> Path:
    """Write <topic>_flashcards.json into output_dir."""
    output_path = Path(output_dir) / f"{export_name(content.topic)}_flashcards.json"
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(flashcards_json(content), encoding="utf-8")

    logger.success(f"Saved flashcards: {output_path}")
    return output_path


def save_summary(content: GeneratedContent, output_dir: Path) -> Path:
    """Write <topic>_summary.txt into output_dir."""
    output_path = Path(output_dir) / f"{export_name(content.topic)}_summary.txt"
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(summary_text(content), encoding="utf-8")

    logger.success(f"Saved summary: {output_path}")
    return output_path
