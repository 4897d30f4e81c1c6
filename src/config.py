import os
from enum import Enum
from typing import Final


class QuestionCategory(Enum):
    # Enum Member = ("Category Name", "Icon")
    REAL_DATA = ("Real Data", "📊")
    THEORY = ("Theory", "🧠")
    KNOWLEDGE = ("Knowledge", "📚")

    def __init__(self, label: str, icon: str):
        self.label = label
        self.icon = icon

    @classmethod
    def get_icon(cls, label: str) -> str:
        """Returns the icon for a given category label, or a default."""
        for category in cls:
            if category.label == label:
                return category.icon
        return "⚾"  # Default fallback

    @classmethod
    def all_labels(cls) -> list[str]:
        return [c.label for c in cls]


class GameConfig:
    # --- Infrastructure Switch ---
    USE_SQLITE: bool = os.getenv("STATS_BACKEND", "sqlite") != "supabase"
    DB_PATH = "data/stats.db"
    QUESTION_BANK_PATH = "data/questions.json"

    # --- App Identity ---
    APP_TITLE = "Today's Pitch"
    APP_URL = os.getenv("APP_URL", "https://todays-pitch.example.com")

    # All calendar-day keys (daily attempts, streak, daily challenge) use this zone
    TIMEZONE = "Asia/Tokyo"

    # --- Session Rules ---
    QUESTIONS_PER_SESSION: Final[int] = 5
    ANSWER_TIMER_SECONDS: Final[int] = 30
    MAX_DAILY_ATTEMPTS: Final[int] = 3

    # (real, theory, knowledge) -> relative weight.
    # Every triple satisfies real >= 2, knowledge <= 1, sum == 5.
    COMPOSITION_WEIGHTS: Final[dict[tuple[int, int, int], int]] = {
        (5, 0, 0): 4,
        (4, 1, 0): 4,
        (3, 2, 0): 2,
        (4, 0, 1): 2,
        (3, 1, 1): 1,
        (2, 3, 0): 1,
        (2, 2, 1): 1,
    }

    # --- Fairness ---
    FEATURED_ENTITIES: Final[tuple[str, ...]] = (
        "Ohtani",
        "Judge",
        "Trout",
        "Yamamoto",
        "Darvish",
    )
    FEATURED_TOP_CAP = 1
    FEATURED_RETRY_LIMIT = 3

    # --- Rating ---
    INITIAL_RATING = 1500
    ELO_K = 24

    # rating floor -> label, checked top-down
    LEVEL_LABELS: Final[list[tuple[int, str]]] = [
        (1600, "Above the average pro-ball fan"),
        (1400, "Experienced"),
        (1200, "Around average"),
    ]
    LEVEL_LABEL_DEFAULT = "Still growing"

    # --- Monetization ---
    INTERSTITIAL_FREQUENCY = 2

    @staticmethod
    def metrics_port() -> int:
        return int(os.getenv("METRICS_PORT", "8000"))

    @staticmethod
    def supabase_credentials() -> tuple[str, str] | None:
        url = os.getenv("SUPABASE_URL")
        key = os.getenv("SUPABASE_KEY")
        if not url or not key:
            return None
        return url, key
