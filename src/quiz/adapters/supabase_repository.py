from typing import Any, cast

from src.quiz.domain.models import AnswerLog, QuestionStats
from src.quiz.domain.ports import IStatsRepository
from src.shared.telemetry import STATS_BACKEND_FAILURES, Telemetry, measure_time
from supabase import Client, create_client


class SupabaseStatsRepository(IStatsRepository):
    """
    Production backend. Per-question aggregates live in `question_stats`
    (answered_count / correct_count) and are bumped atomically by the
    `record_answer` Postgres function. `answer_logs` is append-only.
    """

    def __init__(self, url: str, key: str) -> None:
        self.telemetry = Telemetry("SupabaseStatsRepository")
        try:
            self.client: Client = create_client(url, key)
        except Exception as e:
            self.telemetry.log_error("Failed to initialize Supabase client", e)
            raise

    @measure_time("sb_record_answer")
    def record_answer(self, question_id: str, is_correct: bool) -> QuestionStats:
        try:
            self.client.rpc(
                "record_answer",
                {"p_question_id": question_id, "p_is_correct": is_correct},
            ).execute()
        except Exception as e:
            STATS_BACKEND_FAILURES.labels(operation="record_answer").inc()
            self.telemetry.log_error(f"record_answer failed for {question_id}", e)
            raise
        return self.get_stats(question_id)

    @measure_time("sb_get_stats")
    def get_stats(self, question_id: str) -> QuestionStats:
        try:
            response = (
                self.client.table("question_stats")
                .select("question_id, answered_count, correct_count")
                .eq("question_id", question_id)
                .maybe_single()
                .execute()
            )
        except Exception as e:
            STATS_BACKEND_FAILURES.labels(operation="get_stats").inc()
            self.telemetry.log_error(f"get_stats failed for {question_id}", e)
            return QuestionStats(question_id=question_id)

        row = cast(dict[str, Any] | None, response.data if response else None)
        if not row:
            return QuestionStats(question_id=question_id)
        return QuestionStats(
            question_id=question_id,
            total_attempts=int(row.get("answered_count") or 0),
            total_correct=int(row.get("correct_count") or 0),
        )

    @measure_time("sb_save_answer_log")
    def save_answer_log(self, log: AnswerLog) -> None:
        payload: dict[str, Any] = {
            **log.model_dump(mode="json"),
            "meta": None,
        }
        try:
            self.client.table("answer_logs").insert(payload).execute()
        except Exception as e:
            STATS_BACKEND_FAILURES.labels(operation="save_answer_log").inc()
            self.telemetry.log_error(f"save_answer_log failed for {log.user_id}", e)
            raise

    def ping(self) -> bool:
        try:
            self.client.table("question_stats").select("question_id").limit(
                1
            ).execute()
            return True
        except Exception as e:
            self.telemetry.log_error("ping failed", e)
            return False
