import time
from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel

from src.quiz.application.player_progress import PlayerProgress
from src.quiz.domain import elo, monetization
from src.quiz.domain.daily_challenge import DailyChallengeSelector
from src.quiz.domain.models import (
    AnswerLog,
    AnswerOutcome,
    Question,
    QuestionStats,
    SessionOptions,
    SessionSummary,
    TodayResult,
)
from src.quiz.domain.ports import IStatsRepository
from src.quiz.domain.session_selector import SessionSelector
from src.shared.telemetry import (
    ANSWERS_RECORDED,
    SESSIONS_STARTED,
    Telemetry,
    measure_time,
)

HealthStatus = Literal["healthy", "degraded", "unhealthy"]

# Backend round trips slower than this count as degraded
SLOW_BACKEND_MS = 1000
# Errors older than this no longer affect the health status
HEALTH_ERROR_WINDOW_SECONDS = 300


class HealthReport(BaseModel):
    status: HealthStatus
    backend_ok: bool
    backend_latency_ms: float
    recent_errors: int
    timestamp: str


class QuizService:
    def __init__(
        self,
        stats_repo: IStatsRepository,
        questions: list[Question],
        progress: PlayerProgress,
        selector: SessionSelector | None = None,
        daily_selector: DailyChallengeSelector | None = None,
    ) -> None:
        self.stats_repo = stats_repo
        self.questions = questions
        self.progress = progress
        self.selector = selector or SessionSelector()
        self.daily_selector = daily_selector or DailyChallengeSelector()
        self.telemetry = Telemetry("QuizService")

    # --- Session Start ---
    def can_start_session(self) -> bool:
        return monetization.can_start_session(
            self.progress.attempts_used_today(), self.progress.get_plan_id()
        )

    @measure_time("start_session")
    def start_session(self, data_only: bool = False) -> list[Question]:
        if not self.can_start_session():
            self.telemetry.log_info(
                "Daily limit reached",
                used=self.progress.attempts_used_today(),
            )
            return []

        excluded = frozenset(self.progress.get_daily_used_ids())
        questions = self.selector.select(
            self.questions, SessionOptions(data_only=data_only, excluded_ids=excluded)
        )

        if not questions:
            self.telemetry.log_info("No questions generated", data_only=data_only)
            return []

        self.progress.add_daily_used_ids([q.id for q in questions])
        SESSIONS_STARTED.labels(mode="data" if data_only else "standard").inc()
        return questions

    @measure_time("start_daily_challenge")
    def start_daily_challenge(self) -> list[Question]:
        if self.progress.is_daily_challenge_completed():
            self.telemetry.log_info("Daily challenge already completed")
            return []

        questions = self.daily_selector.select(self.questions, self.progress.clock())
        if questions:
            SESSIONS_STARTED.labels(mode="daily").inc()
        return questions

    # --- Answering ---
    @measure_time("submit_answer")
    def submit_answer(
        self, user_id: str, question: Question, choice_id: str | None
    ) -> AnswerOutcome:
        """
        choice_id=None means the answer timer ran out; it is scored as a miss
        and logged with an empty selection.
        """
        is_correct = question.is_correct(choice_id)
        rating_before = self.progress.get_rating()
        change = elo.apply_answer(rating_before, question.difficulty, is_correct)

        self.progress.set_rating(change.new_rating)
        self.progress.append_history(
            question_id=question.id,
            correct=is_correct,
            rating_before=rating_before,
            rating_after=change.new_rating,
            difficulty=question.difficulty,
        )

        # Stats are best-effort; the player's answer still counts when the
        # backend is down.
        stats: QuestionStats | None = None
        try:
            stats = self.stats_repo.record_answer(question.id, is_correct)
        except Exception as e:
            self.telemetry.log_error("Stats update failed", e, q_id=question.id)

        try:
            self.stats_repo.save_answer_log(
                AnswerLog(
                    user_id=user_id,
                    question_id=question.id,
                    selected_option=choice_id or "",
                    is_correct=is_correct,
                    source_url=question.source_url,
                    rating_before=rating_before,
                    rating_after=change.new_rating,
                )
            )
        except Exception as e:
            self.telemetry.log_error("Answer log failed", e, q_id=question.id)

        ANSWERS_RECORDED.labels(correct=str(is_correct).lower()).inc()
        self.telemetry.log_info(
            "Answer Submitted",
            user_id=user_id,
            q_id=question.id,
            correct=is_correct,
            timed_out=choice_id is None,
            delta=change.delta,
        )
        return AnswerOutcome(is_correct=is_correct, rating=change, stats=stats)

    # --- Session End ---
    @measure_time("finalize_session")
    def finalize_session(
        self,
        correct: int,
        total: int,
        rating_before: int,
        is_daily_challenge: bool = False,
    ) -> SessionSummary:
        # Streak must see yesterday's last-played date before it moves to today
        streak = self.progress.update_streak()

        if is_daily_challenge:
            self.progress.set_last_played_today()
        else:
            self.progress.consume_attempt()

        rating_after = self.progress.get_rating()
        self.progress.set_today_result(
            TodayResult(
                correct_count=correct,
                total_questions=total,
                rating_before=rating_before,
                rating_after=rating_after,
            )
        )
        weekly = self.progress.add_weekly_session(correct, total)

        if is_daily_challenge:
            self.progress.save_daily_challenge_result(
                correct_count=correct, rating_delta=rating_after - rating_before
            )

        sessions = self.progress.increment_sessions_completed()
        show_interstitial = monetization.should_show_interstitial(
            sessions, self.progress.get_plan_id()
        )

        self.telemetry.log_info(
            "Session Finalized",
            correct=correct,
            total=total,
            streak=streak,
            daily=is_daily_challenge,
        )
        return SessionSummary(
            correct_count=correct,
            total_questions=total,
            rating_before=rating_before,
            rating_after=rating_after,
            streak=streak,
            weekly=weekly,
            show_interstitial=show_interstitial,
        )

    # --- Queries ---
    def get_question_stats(self, question_id: str) -> QuestionStats:
        return self.stats_repo.get_stats(question_id)

    def health_check(self) -> HealthReport:
        start = time.perf_counter()
        backend_ok = self.stats_repo.ping()
        latency_ms = round((time.perf_counter() - start) * 1000, 2)
        recent_errors = len(
            Telemetry.recent_errors(within_seconds=HEALTH_ERROR_WINDOW_SECONDS)
        )

        status: HealthStatus
        if not backend_ok:
            status = "unhealthy"
        elif latency_ms >= SLOW_BACKEND_MS or recent_errors > 0:
            status = "degraded"
        else:
            status = "healthy"

        report = HealthReport(
            status=status,
            backend_ok=backend_ok,
            backend_latency_ms=latency_ms,
            recent_errors=recent_errors,
            timestamp=datetime.now(timezone.utc).isoformat(),
        )
        self.telemetry.log_info(
            "Health check completed", status=status, latency_ms=latency_ms
        )
        return report
