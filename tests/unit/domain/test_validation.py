from src.quiz.domain.models import Choice
from src.quiz.domain.validation import (
    MAX_SITUATION_LENGTH,
    check_choice_tone,
    check_duplicate_phrases,
    check_situation_length,
    validate_all,
)
from tests.drivers.builders import build_question


def test_long_situation_is_flagged():
    q = build_question("Q1", situation="x" * (MAX_SITUATION_LENGTH + 1))

    warning = check_situation_length(q)

    assert warning is not None
    assert warning.type == "LENGTH"
    assert warning.question_id == "Q1"


def test_situation_at_limit_is_fine():
    q = build_question("Q1", situation="x" * MAX_SITUATION_LENGTH)
    assert check_situation_length(q) is None


def test_repeated_word_is_flagged():
    q = build_question("Q1", situation="Runner on first, runner leading off")

    warning = check_duplicate_phrases(q)

    assert warning is not None
    assert warning.type == "DUPLICATE_PHRASE"
    assert "runner" in warning.message


def test_count_vocabulary_may_repeat():
    q = build_question("Q1", situation="Two strikes after three strikes")
    assert check_duplicate_phrases(q) is None


def test_choice_length_ratio():
    choices = [
        Choice(id="a", text="Go"),
        Choice(id="b", text="Throw a high fastball"),
        Choice(id="c", text="Slider"),
    ]

    warning = check_choice_tone("Q1", choices)

    assert warning is not None
    assert warning.type == "CHOICE_LENGTH"


def test_mixed_sentence_endings():
    choices = [
        Choice(id="a", text="Fastball."),
        Choice(id="b", text="Slider"),
        Choice(id="c", text="Curveball"),
    ]

    warning = check_choice_tone("Q1", choices)

    assert warning is not None
    assert warning.type == "CHOICE_TONE"


def test_validate_all_collects_without_raising():
    good = build_question("good", situation="Top 3rd, two outs")
    bad = build_question("bad", situation="y" * 80)

    warnings = validate_all([good, bad])

    assert [w.question_id for w in warnings] == ["bad"]
