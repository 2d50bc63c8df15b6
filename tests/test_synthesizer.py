import pytest

from explainer.analysis.synthesizer import (
    DISTRACTORS,
    ContentSynthesizer,
    ValidationError,
    build_script,
    generate_content,
    generation_stage,
    synthesize,
)
from explainer.models import RawInput

SENTENCES = [
    "Photosynthesis converts light energy into chemical energy",
    "It takes place mainly in the chloroplasts of plant cells",
    "Chlorophyll absorbs red and blue wavelengths of light",
    "Water molecules are split to release oxygen as a by-product",
    "Carbon dioxide is fixed into sugars during the Calvin cycle",
    "The light reactions produce ATP and NADPH for later stages",
    "Glucose made by the plant fuels growth and cellular respiration",
    "Environmental factors such as temperature affect the overall rate",
    "Some plants use alternative pathways to conserve water in dry climates",
]
TEXT = ". ".join(SENTENCES) + "."


def test_summary_joins_first_three_sentences():
    result = synthesize(TEXT, 5)
    assert result.summary == ". ".join(SENTENCES[:3]) + "."


def test_summary_falls_back_to_raw_prefix():
    text = "Too short. " * 40
    result = synthesize(text, 5)

    assert result.summary == text[:200]
    assert result.key_points == ()
    assert result.flashcards == ()
    assert result.quiz == ()


def test_key_points_capped_at_eight():
    result = synthesize(TEXT, 5)
    assert list(result.key_points) == [s + "." for s in SENTENCES[:8]]


def test_flashcards_follow_requested_count():
    result = synthesize(TEXT, 4)

    assert len(result.flashcards) == 4
    first = result.flashcards[0]
    assert first.question == 'What does this statement explain: "Photosynthesis converts light energy into chemical..."?'
    assert first.answer == SENTENCES[0] + "."


def test_flashcard_snippet_without_ellipsis_for_short_sentences():
    result = synthesize("Mitochondria are cellular powerhouses.", 3)
    assert result.flashcards[0].question == (
        'What does this statement explain: "Mitochondria are cellular powerhouses"?'
    )


def test_fewer_flashcards_when_sentences_run_out():
    result = synthesize(". ".join(SENTENCES[:2]), 10)
    assert len(result.flashcards) == 2


def test_quiz_questions():
    result = synthesize(TEXT, 5)

    assert len(result.quiz) == 5
    for sentence, question in zip(SENTENCES, result.quiz):
        assert question.correct_index == 0
        assert question.options == (sentence + ".",) + DISTRACTORS
        assert question.question == f'Which option best matches: "{sentence[:60]}..."?'


def test_synthesis_is_deterministic():
    assert ContentSynthesizer().synthesize(TEXT, 6) == ContentSynthesizer().synthesize(TEXT, 6)


def test_generate_content_builds_script():
    content = generate_content(RawInput("Photosynthesis", TEXT, 5, 5))

    assert content.topic == "Photosynthesis"
    assert content.script == "Welcome to our explanation of Photosynthesis. " + content.summary
    assert content.script == build_script("Photosynthesis", content.summary)
    assert len(content.flashcards) == 5


@pytest.mark.parametrize("topic, explanation", [
    ("", TEXT),
    ("   ", TEXT),
    ("Photosynthesis", ""),
    ("Photosynthesis", " \n\t "),
])
def test_blank_input_rejected(topic, explanation):
    with pytest.raises(ValidationError):
        generate_content(RawInput(topic, explanation, 5, 5))


@pytest.mark.parametrize("cards, duration", [(2, 5), (11, 5), (5, 2), (5, 11)])
def test_out_of_range_settings_rejected(cards, duration):
    with pytest.raises(ValidationError):
        generate_content(RawInput("Photosynthesis", TEXT, cards, duration))


def test_to_dict_uses_export_field_names():
    data = generate_content(RawInput("Photosynthesis", TEXT, 3, 5)).to_dict()

    assert data["keyPoints"][0] == SENTENCES[0] + "."
    assert data["quiz"][0]["answer_index"] == 0
    assert data["flashcards"][0].keys() == {"question", "answer"}
    assert "timestamp" in data


def test_generation_stages():
    assert generation_stage(0) == "Analyzing content..."
    assert generation_stage(45) == "Creating animations..."
    assert generation_stage(75) == "Generating flashcards..."
    assert generation_stage(95) == "Finalizing..."
