"""
Data Model

Inputs and generated study artifacts shared by the analysis,
playback, quiz and export modules.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Tuple


@dataclass(frozen=True)
class RawInput:
    """User-supplied material for one generation."""

    topic: str
    explanation: str
    flashcard_count: int = 5
    animation_duration: int = 5  # Seconds per point when narration is silent


@dataclass(frozen=True)
class Flashcard:
    """A question/answer study card."""

    question: str
    answer: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON export."""
        return {"question": self.question, "answer": self.answer}


@dataclass(frozen=True)
class QuizQuestion:
    """Multiple-choice question with exactly four options."""

    question: str
    options: Tuple[str, ...]
    correct_index: int = 0

    def __post_init__(self):
        if len(self.options) != 4:
            raise ValueError(f"Quiz question needs 4 options, got {len(self.options)}")
        if not 0 <= self.correct_index < 4:
            raise ValueError(f"correct_index out of range: {self.correct_index}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON export."""
        return {
            "question": self.question,
            "options": list(self.options),
            "answer_index": self.correct_index,
        }


@dataclass(frozen=True)
class GeneratedContent:
    """Everything derived from one RawInput. Replaced wholesale, never edited."""

    topic: str
    summary: str
    key_points: Tuple[str, ...]
    flashcards: Tuple[Flashcard, ...]
    quiz: Tuple[QuizQuestion, ...]
    script: str
    generated_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON export."""
        return {
            "topic": self.topic,
            "summary": self.summary,
            "keyPoints": list(self.key_points),
            "flashcards": [card.to_dict() for card in self.flashcards],
            "quiz": [question.to_dict() for question in self.quiz],
            "script": self.script,
            "timestamp": self.generated_at.isoformat(timespec="seconds"),
        }
