"""
Content Synthesizer

Derives a summary, key points, flashcards and a quiz from an explanation.
This is a deterministic heuristic over the qualifying sentences, not
language understanding: the same input always yields the same output.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Tuple

from explainer.analysis.sentence_splitter import Sentence, SentenceSplitter
from explainer.models import Flashcard, GeneratedContent, QuizQuestion, RawInput
from explainer.utils.config import config
from explainer.utils import logger


class ValidationError(ValueError):
    """Raised when generation input is incomplete or out of range."""
    pass


@dataclass(frozen=True)
class AnalysisResult:
    """Artifacts derived from the explanation text alone."""

    summary: str
    key_points: Tuple[str, ...]
    flashcards: Tuple[Flashcard, ...]
    quiz: Tuple[QuizQuestion, ...]


# Wrong answers shared by every quiz question
DISTRACTORS = (
    "An unrelated statement about a different concept.",
    "A statement that contradicts the explanation.",
    "None of the above options are correct.",
)

# Labels shown while content is being generated
GENERATION_STAGES = (
    (30, "Analyzing content..."),
    (60, "Creating animations..."),
    (90, "Generating flashcards..."),
)

FLASHCARD_RANGE = (3, 10)
DURATION_RANGE = (3, 10)


class ContentSynthesizer:
    """Build study artifacts from segmented sentences."""

    SUMMARY_SENTENCES = 3
    MAX_KEY_POINTS = 8
    QUIZ_QUESTIONS = 5
    FALLBACK_SUMMARY_CHARS = 200
    SNIPPET_WORDS = 6
    QUESTION_CHARS = 60

    def __init__(self, splitter: Optional[SentenceSplitter] = None):
        self.splitter = splitter or SentenceSplitter(config.min_sentence_length)

    def synthesize(self, text: str, flashcard_count: int) -> AnalysisResult:
        """
        Derive all study artifacts from text.

        Args:
            text: Raw explanation
            flashcard_count: Maximum number of flashcards to produce

        Returns:
            AnalysisResult with summary, key points, flashcards and quiz
        """
        sentences = [s.text for s in self.splitter.split(text)]

        return AnalysisResult(
            summary=self.summarize(text, sentences),
            key_points=tuple(s + "." for s in sentences[:self.MAX_KEY_POINTS]),
            flashcards=tuple(self._flashcard(s) for s in sentences[:max(flashcard_count, 0)]),
            quiz=tuple(self._quiz_question(s) for s in sentences[:self.QUIZ_QUESTIONS]),
        )

    def summarize(self, text: str, sentences: List[str]) -> str:
        """Join the leading sentences, or fall back to a raw prefix."""
        if not sentences:
            return text[:self.FALLBACK_SUMMARY_CHARS]
        return ". ".join(sentences[:self.SUMMARY_SENTENCES]) + "."

    def _flashcard(self, sentence: str) -> Flashcard:
        words = sentence.split(" ")
        snippet = " ".join(words[:self.SNIPPET_WORDS])
        if len(words) > self.SNIPPET_WORDS:
            snippet += "..."

        return Flashcard(
            question=f'What does this statement explain: "{snippet}"?',
            answer=sentence + ".",
        )

    def _quiz_question(self, sentence: str) -> QuizQuestion:
        return QuizQuestion(
            question=f'Which option best matches: "{sentence[:self.QUESTION_CHARS]}..."?',
            options=(sentence + ".",) + DISTRACTORS,
            correct_index=0,
        )


def synthesize(text: str, flashcard_count: int) -> AnalysisResult:
    """Convenience function using the default synthesizer."""
    return ContentSynthesizer().synthesize(text, flashcard_count)


def build_script(topic: str, summary: str) -> str:
    """Narration script introducing the topic."""
    return f"Welcome to our explanation of {topic}. {summary}"


def validate(raw: RawInput) -> None:
    """
    Check generation input.

    Raises:
        ValidationError: If topic or explanation is blank, or a setting
            is outside its allowed range
    """
    if not raw.topic.strip() or not raw.explanation.strip():
        raise ValidationError("Please enter both a topic and explanation")

    low, high = FLASHCARD_RANGE
    if not low <= raw.flashcard_count <= high:
        raise ValidationError(f"Flashcard count must be between {low} and {high}")

    low, high = DURATION_RANGE
    if not low <= raw.animation_duration <= high:
        raise ValidationError(f"Animation duration must be between {low} and {high} seconds")


def generate_content(
    raw: RawInput,
    synthesizer: Optional[ContentSynthesizer] = None,
) -> GeneratedContent:
    """
    Validate input and generate a complete set of study content.

    Args:
        raw: Topic, explanation and generation settings
        synthesizer: Synthesizer to use (default: ContentSynthesizer())

    Returns:
        A new GeneratedContent

    Raises:
        ValidationError: If the input is rejected
    """
    validate(raw)
    synthesizer = synthesizer or ContentSynthesizer()

    result = synthesizer.synthesize(raw.explanation, raw.flashcard_count)

    if not result.key_points:
        logger.warning("No substantive sentences found; the script will be narrated instead")

    return GeneratedContent(
        topic=raw.topic,
        summary=result.summary,
        key_points=result.key_points,
        flashcards=result.flashcards,
        quiz=result.quiz,
        script=build_script(raw.topic, result.summary),
        generated_at=datetime.now(),
    )


def generation_stage(progress: float) -> str:
    """Label for a generation progress percentage."""
    for limit, label in GENERATION_STAGES:
        if progress < limit:
            return label
    return "Finalizing..."
