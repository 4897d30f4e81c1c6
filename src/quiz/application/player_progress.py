import time
import uuid
from collections.abc import Callable
from datetime import date, timedelta
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from src.config import GameConfig
from src.quiz.domain.daily_challenge import today_local
from src.quiz.domain.models import (
    DailyChallengeState,
    HistoryEntry,
    TodayResult,
    WeeklyRank,
    WeeklyState,
)
from src.quiz.domain.ports import IStateProvider
from src.shared.telemetry import Telemetry

M = TypeVar("M", bound=BaseModel)

# --- Storage Keys ---
USER_ID_KEY = "baseball_user_id"
RATING_KEY = "baseball_quiz_rating"
HISTORY_KEY = "baseball_quiz_history"
LAST_PLAYED_KEY = "baseball_quiz_last_played_date"
TODAY_RESULT_KEY = "baseball_quiz_today_result"
DAILY_ATTEMPTS_KEY = "baseball_quiz_daily_attempts"
DAILY_USED_QUESTIONS_KEY = "daily_used_question_ids_v1"
STREAK_COUNT_KEY = "baseball_quiz_streak_count"
DAILY_CHALLENGE_KEY = "baseball_quiz_daily_challenge"
WEEKLY_KEY = "bq_weekly_challenge"
MONETIZATION_KEY = "baseball_quiz_monetization"

# Checked top-down
WEEKLY_RANKS: list[WeeklyRank] = [
    WeeklyRank(title="Legend", threshold=60),
    WeeklyRank(title="Ace", threshold=40),
    WeeklyRank(title="Regular", threshold=20),
    WeeklyRank(title="Rookie", threshold=0),
]


def week_monday(day: date) -> date:
    return day - timedelta(days=day.weekday())


def weekly_rank(correct_total: int) -> WeeklyRank:
    for rank in WEEKLY_RANKS:
        if correct_total >= rank.threshold:
            return rank
    return WEEKLY_RANKS[-1]


def next_rank_gap(correct_total: int) -> tuple[str, int] | None:
    """(next rank title, answers still needed), or None at the top rank."""
    for rank in reversed(WEEKLY_RANKS):
        if correct_total < rank.threshold:
            return rank.title, rank.threshold - correct_total
    return None


class PlayerProgress:
    """
    Everything remembered about one player between sessions: rating, history,
    daily attempts, already-shown question ids, streak, daily/weekly challenge.

    Values are stored as JSON-compatible primitives so any key/value backend
    works. Unreadable values fall back to defaults instead of raising.
    """

    def __init__(
        self, state: IStateProvider, clock: Callable[[], date] = today_local
    ) -> None:
        self.state = state
        self.clock = clock
        self.telemetry = Telemetry("PlayerProgress")

    # --- Helpers ---
    def _load_model(self, key: str, model: type[M]) -> M | None:
        raw = self.state.get(key)
        if raw is None:
            return None
        try:
            return model.model_validate(raw)
        except ValidationError as e:
            self.telemetry.log_warning(
                "Discarding unreadable stored value", key=key, errors=e.error_count()
            )
            return None

    def _load_dated(self, key: str) -> dict[str, Any] | None:
        """Returns the stored dict only when it belongs to today."""
        raw = self.state.get(key)
        if not isinstance(raw, dict) or raw.get("date") != self.clock().isoformat():
            return None
        return raw

    # --- Identity ---
    def get_or_create_user_id(self) -> str:
        user_id = self.state.get(USER_ID_KEY)
        if not user_id:
            user_id = str(uuid.uuid4())
            self.state.set(USER_ID_KEY, user_id)
        return str(user_id)

    # --- Rating & History ---
    def get_rating(self) -> int:
        raw = self.state.get(RATING_KEY)
        try:
            return int(raw) if raw is not None else GameConfig.INITIAL_RATING
        except (TypeError, ValueError):
            return GameConfig.INITIAL_RATING

    def set_rating(self, rating: int) -> None:
        self.state.set(RATING_KEY, rating)

    def get_history(self) -> list[HistoryEntry]:
        raw = self.state.get(HISTORY_KEY, [])
        if not isinstance(raw, list):
            return []
        entries = []
        for item in raw:
            try:
                entries.append(HistoryEntry.model_validate(item))
            except ValidationError:
                continue
        return entries

    def append_history(
        self,
        question_id: str,
        correct: bool,
        rating_before: int,
        rating_after: int,
        difficulty: int,
    ) -> HistoryEntry:
        entry = HistoryEntry(
            question_id=question_id,
            correct=correct,
            rating_before=rating_before,
            rating_after=rating_after,
            difficulty=difficulty,
            timestamp=time.time(),
        )
        raw = self.state.get(HISTORY_KEY, [])
        items = list(raw) if isinstance(raw, list) else []
        items.append(entry.model_dump(mode="json"))
        self.state.set(HISTORY_KEY, items)
        return entry

    # --- Daily Attempts ---
    def get_last_played(self) -> date | None:
        raw = self.state.get(LAST_PLAYED_KEY)
        try:
            return date.fromisoformat(raw) if raw else None
        except (TypeError, ValueError):
            return None

    def has_played_today(self) -> bool:
        return self.get_last_played() == self.clock()

    def set_last_played_today(self) -> None:
        self.state.set(LAST_PLAYED_KEY, self.clock().isoformat())

    def attempts_used_today(self) -> int:
        raw = self._load_dated(DAILY_ATTEMPTS_KEY)
        if raw is None:
            return 0
        try:
            used = int(raw.get("used", 0))
        except (TypeError, ValueError):
            return 0
        return min(max(used, 0), GameConfig.MAX_DAILY_ATTEMPTS)

    def attempts_remaining_today(self) -> int:
        return max(0, GameConfig.MAX_DAILY_ATTEMPTS - self.attempts_used_today())

    def consume_attempt(self) -> None:
        used = self.attempts_used_today()
        if used >= GameConfig.MAX_DAILY_ATTEMPTS:
            return
        self.state.set(
            DAILY_ATTEMPTS_KEY, {"date": self.clock().isoformat(), "used": used + 1}
        )
        self.set_last_played_today()

    # --- Already-shown Questions ---
    def get_daily_used_ids(self) -> list[str]:
        raw = self._load_dated(DAILY_USED_QUESTIONS_KEY)
        if raw is None or not isinstance(raw.get("used"), list):
            return []
        return [i for i in raw["used"] if isinstance(i, str)]

    def add_daily_used_ids(self, ids: list[str]) -> None:
        if not ids:
            return
        merged = list(dict.fromkeys(self.get_daily_used_ids() + list(ids)))
        self.state.set(
            DAILY_USED_QUESTIONS_KEY,
            {"date": self.clock().isoformat(), "used": merged},
        )

    # --- Streak ---
    def get_streak(self) -> int:
        raw = self.state.get(STREAK_COUNT_KEY, 0)
        try:
            return max(int(raw), 0)
        except (TypeError, ValueError):
            return 0

    def update_streak(self) -> int:
        """
        Call once per completed session, BEFORE the last-played date is moved
        to today. Same-day replays keep the count; the day after the last
        played day extends it; any gap restarts at 1.
        """
        today = self.clock()
        last_played = self.get_last_played()

        if last_played == today:
            return self.get_streak()

        if last_played == today - timedelta(days=1):
            streak = self.get_streak() + 1
        else:
            streak = 1
        self.state.set(STREAK_COUNT_KEY, streak)
        return streak

    # --- Today's Result ---
    def set_today_result(self, result: TodayResult) -> None:
        self.state.set(TODAY_RESULT_KEY, result.model_dump(mode="json"))

    def get_today_result(self) -> TodayResult | None:
        if not self.has_played_today():
            self.state.delete(TODAY_RESULT_KEY)
            return None
        return self._load_model(TODAY_RESULT_KEY, TodayResult)

    # --- Daily Challenge ---
    def get_daily_challenge_state(self) -> DailyChallengeState | None:
        state = self._load_model(DAILY_CHALLENGE_KEY, DailyChallengeState)
        if state is None or state.day != self.clock():
            return None
        return state

    def save_daily_challenge_result(
        self, correct_count: int, rating_delta: int
    ) -> None:
        state = DailyChallengeState(
            day=self.clock(),
            completed=True,
            correct_count=correct_count,
            rating_delta=rating_delta,
        )
        self.state.set(DAILY_CHALLENGE_KEY, state.model_dump(mode="json"))

    def is_daily_challenge_completed(self) -> bool:
        state = self.get_daily_challenge_state()
        return state.completed if state else False

    # --- Weekly Challenge ---
    def get_weekly_state(self) -> WeeklyState:
        monday = week_monday(self.clock())
        state = self._load_model(WEEKLY_KEY, WeeklyState)
        if state is None or state.week_start != monday:
            return WeeklyState(week_start=monday)
        return state

    def add_weekly_session(self, correct: int, total: int) -> WeeklyState:
        state = self.get_weekly_state()
        state.correct_total += correct
        state.question_total += total
        state.session_count += 1
        today = self.clock()
        if today not in state.days_played:
            state.days_played.append(today)
        self.state.set(WEEKLY_KEY, state.model_dump(mode="json"))
        return state

    # --- Monetization Flags ---
    def get_plan_id(self) -> str | None:
        raw = self.state.get(MONETIZATION_KEY) or {}
        plan_id = raw.get("plan_id") if isinstance(raw, dict) else None
        return plan_id if isinstance(plan_id, str) else None

    def is_premium(self) -> bool:
        return self.get_plan_id() is not None

    def set_plan_id(self, plan_id: str | None) -> None:
        self.state.set(
            MONETIZATION_KEY,
            {"plan_id": plan_id, "sessions_completed": self.sessions_completed()},
        )

    def sessions_completed(self) -> int:
        raw = self.state.get(MONETIZATION_KEY) or {}
        count = raw.get("sessions_completed", 0) if isinstance(raw, dict) else 0
        return count if isinstance(count, int) else 0

    def increment_sessions_completed(self) -> int:
        count = self.sessions_completed() + 1
        self.state.set(
            MONETIZATION_KEY,
            {"plan_id": self.get_plan_id(), "sessions_completed": count},
        )
        return count
