import re
from collections import Counter

from src.quiz.domain.models import Choice, Question, ValidationWarning

MAX_SITUATION_LENGTH = 60
CHOICE_LENGTH_RATIO_THRESHOLD = 3

# Count vocabulary legitimately repeats ("2 balls, 1 strike")
_COUNT_WORDS = {"ball", "balls", "strike", "strikes", "count", "out", "outs"}
_WORD_RE = re.compile(r"[A-Za-z]{3,}|[一-龯぀-ゟ゠-ヿ]{3,}")
_SENTENCE_END = (".", "。", "!", "?")


def check_situation_length(question: Question) -> ValidationWarning | None:
    length = len(question.situation)
    if length > MAX_SITUATION_LENGTH:
        return ValidationWarning(
            question_id=question.id,
            type="LENGTH",
            message=(
                f"Situation is {length} chars (max {MAX_SITUATION_LENGTH}): "
                f"'{question.situation[:30]}...'"
            ),
        )
    return None


def check_duplicate_phrases(question: Question) -> ValidationWarning | None:
    words = _WORD_RE.findall(f"{question.situation} {question.count}")
    freq = Counter(w.lower() for w in words)
    for word, cnt in freq.items():
        if cnt >= 2 and word not in _COUNT_WORDS:
            return ValidationWarning(
                question_id=question.id,
                type="DUPLICATE_PHRASE",
                message=f"'{word}' repeated {cnt} times",
            )
    return None


def check_choice_tone(
    question_id: str, choices: list[Choice]
) -> ValidationWarning | None:
    if len(choices) < 2:
        return None

    lengths = [len(c.text) for c in choices]
    max_len, min_len = max(lengths), min(lengths)
    if min_len > 0 and max_len / min_len > CHOICE_LENGTH_RATIO_THRESHOLD:
        return ValidationWarning(
            question_id=question_id,
            type="CHOICE_LENGTH",
            message=f"Choice lengths vary (shortest {min_len} / longest {max_len})",
        )

    ending = sum(1 for c in choices if c.text.endswith(_SENTENCE_END))
    if 0 < ending < len(choices):
        return ValidationWarning(
            question_id=question_id,
            type="CHOICE_TONE",
            message=f"Mixed sentence endings ({ending}/{len(choices)} end a sentence)",
        )
    return None


def validate_all(questions: list[Question]) -> list[ValidationWarning]:
    """Quality lint for the catalog. Reports, never raises."""
    warnings: list[ValidationWarning] = []
    for q in questions:
        for warning in (
            check_situation_length(q),
            check_duplicate_phrases(q),
            check_choice_tone(q.id, q.choices),
        ):
            if warning:
                warnings.append(warning)
    return warnings
