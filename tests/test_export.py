import json

from explainer.export import flashcards_json, save_flashcards, save_summary, summary_text
from explainer.models import Flashcard, GeneratedContent


def make_content(**overrides):
    fields = dict(
        topic="X",
        summary="S.",
        key_points=("P1.", "P2."),
        flashcards=(Flashcard("Q1?", "A1."), Flashcard("Q2?", "Ä2.")),
        quiz=(),
        script="Welcome to our explanation of X. S.",
    )
    fields.update(overrides)
    return GeneratedContent(**fields)


def test_summary_layout():
    assert summary_text(make_content()) == (
        "Topic: X\n\nSummary:\nS.\n\nKey Points:\n1. P1.\n2. P2."
    )


def test_flashcards_json_layout():
    text = flashcards_json(make_content())

    assert json.loads(text) == [
        {"question": "Q1?", "answer": "A1."},
        {"question": "Q2?", "answer": "Ä2."},
    ]
    assert text.startswith('[\n  {\n    "question": "Q1?"')


def test_files_named_after_topic(tmp_path):
    content = make_content(topic="Quantum Computing")

    summary_path = save_summary(content, tmp_path)
    cards_path = save_flashcards(content, tmp_path / "cards")

    assert summary_path.name == "Quantum Computing_summary.txt"
    assert cards_path.name == "Quantum Computing_flashcards.json"
    assert summary_path.read_text(encoding="utf-8") == summary_text(content)
    assert json.loads(cards_path.read_text(encoding="utf-8"))[1]["answer"] == "Ä2."


def test_topic_cannot_escape_output_dir(tmp_path):
    content = make_content(topic="../notes/secret")
    output_dir = tmp_path / "out"

    summary_path = save_summary(content, output_dir)
    cards_path = save_flashcards(content, output_dir)

    assert summary_path.parent == output_dir
    assert cards_path.parent == output_dir
    assert summary_path.name == ".._notes_secret_summary.txt"
    assert not (tmp_path / "notes").exists()
