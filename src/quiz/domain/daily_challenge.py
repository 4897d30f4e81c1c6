import random
from datetime import date, datetime, timedelta
from typing import TypeVar
from zoneinfo import ZoneInfo

from pydantic import BaseModel

from src.config import GameConfig, QuestionCategory
from src.quiz.domain.models import Question
from src.shared.telemetry import Telemetry

T = TypeVar("T")


def today_local() -> date:
    """Calendar day in the game's timezone. Every day-keyed feature uses this."""
    return datetime.now(ZoneInfo(GameConfig.TIMEZONE)).date()


def hash_seed(text: str) -> int:
    """32-bit unsigned string hash (h = h * 31 + c)."""
    h = 0
    for ch in text:
        h = (h * 31 + ord(ch)) & 0xFFFFFFFF
    return h


def shuffle_with_seed(items: list[T], seed: int) -> list[T]:
    """Fisher-Yates on a copy; the same seed always gives the same order."""
    shuffled = list(items)
    random.Random(seed).shuffle(shuffled)
    return shuffled


class DailyChallengeSelector:
    """
    Everyone gets the same questions on the same day: the date string seeds
    the shuffle, so no state is shared between players.
    """

    def __init__(self) -> None:
        self.telemetry = Telemetry("DailyChallengeSelector")

    def select(
        self,
        pool: list[Question],
        day: date,
        count: int = GameConfig.QUESTIONS_PER_SESSION,
        category: QuestionCategory | None = None,
    ) -> list[Question]:
        candidates = sorted(pool, key=lambda q: q.id)
        if category is not None:
            candidates = [q for q in candidates if q.category is category]

        seed = hash_seed(f"daily-challenge-{day.isoformat()}")
        picked = shuffle_with_seed(candidates, seed)[:count]

        self.telemetry.log_info(
            "Daily Challenge Generated", day=day.isoformat(), count=len(picked)
        )
        return picked


class TomorrowPreview(BaseModel):
    theme: str
    teaser: str


# Two weeks of rotating themes
PREVIEW_THEMES: list[TomorrowPreview] = [
    TomorrowPreview(theme="Putaway pitch", teaser="Two strikes. What do you throw?"),
    TomorrowPreview(theme="Jam on the mound", teaser="Bases loaded, no room to miss"),
    TomorrowPreview(theme="First pitch", teaser="The opening pitch sets the tone"),
    TomorrowPreview(theme="Full count", teaser="3-2. What comes next?"),
    TomorrowPreview(theme="Platoon matchups", teaser="Do you know the lefty rule?"),
    TomorrowPreview(theme="Protecting a lead", teaser="Ahead is harder than it looks"),
    TomorrowPreview(theme="Heat vs. spin", teaser="The data breaks a common belief"),
    TomorrowPreview(theme="Heart of the order", teaser="Outsmart the big bats"),
    TomorrowPreview(theme="Data truths", teaser="Numbers with a surprise"),
    TomorrowPreview(theme="Classic duels", teaser="That moment. Your call?"),
    TomorrowPreview(theme="Count strategy", teaser="Use the hitter's count well"),
    TomorrowPreview(theme="Mind games", teaser="One pitch to flip the script"),
    TomorrowPreview(theme="Blind spots", teaser="Can you doubt the book?"),
    TomorrowPreview(theme="Big moment", teaser="Everything on one pitch"),
]


def tomorrow_preview(day: date) -> TomorrowPreview:
    tomorrow = day + timedelta(days=1)
    seed = hash_seed(f"tomorrow-preview-{tomorrow.isoformat()}")
    return PREVIEW_THEMES[seed % len(PREVIEW_THEMES)]
