"""
Quiz Grader

Tracks answers to a generated quiz and scores a completed attempt.
"""

from typing import List, Optional, Sequence

from explainer.models import QuizQuestion
from explainer.utils import logger


class QuizGrader:
    """Selections and score for one attempt at a quiz."""

    def __init__(self, questions: Sequence[QuizQuestion]):
        self.questions = list(questions)
        self.selections: List[Optional[int]] = [None] * len(self.questions)
        self.submitted = False
        self.score = 0

    def select(self, question_index: int, option_index: int) -> None:
        """
        Record an answer, replacing any earlier one for the question.

        Ignored once the attempt has been submitted.

        Raises:
            IndexError: If either index is out of range
        """
        if self.submitted:
            return

        question = self.questions[question_index]
        if not 0 <= option_index < len(question.options):
            raise IndexError(f"Option {option_index} out of range for question {question_index + 1}")

        self.selections[question_index] = option_index

    @property
    def can_submit(self) -> bool:
        """True when every question has an answer."""
        return not self.submitted and all(s is not None for s in self.selections)

    def submit(self) -> bool:
        """
        Grade the attempt.

        Returns:
            True if graded, False if some question is still unanswered
        """
        if self.submitted:
            return True

        unanswered = [i + 1 for i, s in enumerate(self.selections) if s is None]
        if unanswered:
            logger.warning(f"Answer every question first (missing: {', '.join(map(str, unanswered))})")
            return False

        self.score = sum(
            1 for selection, question in zip(self.selections, self.questions)
            if selection == question.correct_index
        )
        self.submitted = True
        return True

    def reset(self) -> None:
        """Clear all answers for another attempt."""
        self.selections = [None] * len(self.questions)
        self.submitted = False
        self.score = 0

    def is_correct(self, question_index: int) -> bool:
        return self.selections[question_index] == self.questions[question_index].correct_index

    @property
    def percentage(self) -> int:
        if not self.questions:
            return 0
        return round(self.score / len(self.questions) * 100)

    @property
    def feedback(self) -> str:
        """Encouragement matching the score."""
        if self.percentage >= 70:
            return "Excellent work! You've mastered this topic!"
        if self.percentage >= 40:
            return "Good effort! Keep practicing!"
        return "Keep learning! You'll get there!"
