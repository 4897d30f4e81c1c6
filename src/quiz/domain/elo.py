import math

from src.config import GameConfig
from src.quiz.domain.models import RatingChange


def expected_score(difficulty: int) -> float:
    """Difficulty 1 -> 1.0 (expected to be answered), 5 -> 0.2."""
    return (6 - difficulty) / 5


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def after_correct(rating: int, difficulty: int) -> RatingChange:
    delta = _round_half_up(GameConfig.ELO_K * (1 - expected_score(difficulty)))
    return RatingChange(new_rating=rating + delta, delta=delta)


def after_incorrect(rating: int, difficulty: int) -> RatingChange:
    # Always <= 0. The rating is not clamped and may go negative.
    delta = _round_half_up(GameConfig.ELO_K * (0 - expected_score(difficulty)))
    return RatingChange(new_rating=rating + delta, delta=delta)


def apply_answer(rating: int, difficulty: int, is_correct: bool) -> RatingChange:
    if is_correct:
        return after_correct(rating, difficulty)
    return after_incorrect(rating, difficulty)
