import pytest

from explainer.analysis.synthesizer import DISTRACTORS
from explainer.models import QuizQuestion
from explainer.quiz import QuizGrader


def make_questions(count):
    return [
        QuizQuestion(f"Question {i}?", (f"Answer {i}.",) + DISTRACTORS, 0)
        for i in range(count)
    ]


def test_submit_refused_until_every_question_answered():
    grader = QuizGrader(make_questions(3))
    grader.select(0, 0)
    grader.select(1, 2)

    assert not grader.can_submit
    assert grader.submit() is False
    assert not grader.submitted
    assert grader.score == 0


def test_score_counts_correct_selections():
    grader = QuizGrader(make_questions(4))
    for index, option in enumerate([0, 1, 0, 3]):
        grader.select(index, option)

    assert grader.can_submit
    assert grader.submit() is True
    assert grader.submitted
    assert grader.score == 2
    assert grader.percentage == 50
    assert [grader.is_correct(i) for i in range(4)] == [True, False, True, False]


def test_later_selection_overwrites_earlier():
    grader = QuizGrader(make_questions(1))
    grader.select(0, 2)
    grader.select(0, 0)
    grader.submit()

    assert grader.score == 1


def test_selection_ignored_after_submit():
    grader = QuizGrader(make_questions(1))
    grader.select(0, 0)
    grader.submit()
    grader.select(0, 3)

    assert grader.selections == [0]
    assert grader.score == 1


def test_reset_clears_attempt():
    grader = QuizGrader(make_questions(2))
    grader.select(0, 0)
    grader.select(1, 0)
    grader.submit()
    grader.reset()

    assert grader.selections == [None, None]
    assert not grader.submitted
    assert grader.score == 0


def test_out_of_range_selection():
    grader = QuizGrader(make_questions(2))
    with pytest.raises(IndexError):
        grader.select(5, 0)
    with pytest.raises(IndexError):
        grader.select(0, 4)


@pytest.mark.parametrize("correct, message", [
    (5, "Excellent work! You've mastered this topic!"),
    (2, "Good effort! Keep practicing!"),
    (1, "Keep learning! You'll get there!"),
])
def test_feedback(correct, message):
    grader = QuizGrader(make_questions(5))
    for i in range(5):
        grader.select(i, 0 if i < correct else 1)
    grader.submit()

    assert grader.feedback == message


def test_question_requires_four_options():
    with pytest.raises(ValueError):
        QuizQuestion("Q?", ("a", "b", "c"), 0)
    with pytest.raises(ValueError):
        QuizQuestion("Q?", ("a", "b", "c", "d"), 4)
