import sqlite3
from typing import Any

from src.quiz.adapters.db_manager import ANSWER_LOG_TABLE, STATS_TABLE, DatabaseManager
from src.quiz.domain.models import AnswerLog, QuestionStats
from src.quiz.domain.ports import IStatsRepository
from src.shared.telemetry import STATS_BACKEND_FAILURES, Telemetry, measure_time


class SQLiteStatsRepository(IStatsRepository):
    def __init__(self, db_manager: DatabaseManager) -> None:
        self.telemetry = Telemetry("SQLiteStatsRepository")
        self.db_manager = db_manager

    def _get_connection(self) -> sqlite3.Connection:
        return self.db_manager.get_connection()

    def _release(self, conn: sqlite3.Connection) -> None:
        if not self.db_manager._shared_connection:
            conn.close()

    @measure_time("db_record_answer")
    def record_answer(self, question_id: str, is_correct: bool) -> QuestionStats:
        conn = self._get_connection()
        try:
            conn.execute(
                f"""
                INSERT INTO {STATS_TABLE} (question_id, total_attempts, total_correct)
                VALUES (?, 1, ?)
                ON CONFLICT(question_id) DO UPDATE SET
                    total_attempts = total_attempts + 1,
                    total_correct  = total_correct + excluded.total_correct,
                    updated_at     = CURRENT_TIMESTAMP
                """,
                (question_id, 1 if is_correct else 0),
            )
            conn.commit()
        except sqlite3.Error as e:
            STATS_BACKEND_FAILURES.labels(operation="record_answer").inc()
            self.telemetry.log_error(f"record_answer failed for {question_id}", e)
            raise
        finally:
            self._release(conn)

        return self.get_stats(question_id)

    @measure_time("db_get_stats")
    def get_stats(self, question_id: str) -> QuestionStats:
        conn = self._get_connection()
        try:
            row = conn.execute(
                f"SELECT total_attempts, total_correct FROM {STATS_TABLE} "
                f"WHERE question_id = ?",
                (question_id,),
            ).fetchone()
        except sqlite3.Error as e:
            STATS_BACKEND_FAILURES.labels(operation="get_stats").inc()
            self.telemetry.log_error(f"get_stats failed for {question_id}", e)
            return QuestionStats(question_id=question_id)
        finally:
            self._release(conn)

        if not row:
            return QuestionStats(question_id=question_id)
        return QuestionStats(
            question_id=question_id, total_attempts=row[0], total_correct=row[1]
        )

    @measure_time("db_save_answer_log")
    def save_answer_log(self, log: AnswerLog) -> None:
        conn = self._get_connection()
        try:
            conn.execute(
                f"""
                INSERT INTO {ANSWER_LOG_TABLE} (user_id, question_id, selected_option,
                                                is_correct, source_url,
                                                rating_before, rating_after)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    log.user_id,
                    log.question_id,
                    log.selected_option,
                    1 if log.is_correct else 0,
                    log.source_url,
                    log.rating_before,
                    log.rating_after,
                ),
            )
            conn.commit()
        except sqlite3.Error as e:
            STATS_BACKEND_FAILURES.labels(operation="save_answer_log").inc()
            self.telemetry.log_error(f"save_answer_log failed for {log.user_id}", e)
            raise
        finally:
            self._release(conn)

    def ping(self) -> bool:
        conn = self._get_connection()
        try:
            conn.execute(f"SELECT 1 FROM {STATS_TABLE} LIMIT 1")
            return True
        except sqlite3.Error as e:
            self.telemetry.log_error("ping failed", e)
            return False
        finally:
            self._release(conn)

    def debug_dump_answer_logs(self, user_id: str) -> list[dict[str, Any]]:
        conn = self._get_connection()
        try:
            cursor = conn.execute(
                f"""
                SELECT question_id, selected_option, is_correct,
                       rating_before, rating_after, created_at
                FROM {ANSWER_LOG_TABLE}
                WHERE user_id = ?
                ORDER BY id DESC
                LIMIT 20
                """,
                (user_id,),
            )
            columns = [desc[0] for desc in cursor.description]
            return [dict(zip(columns, row, strict=False)) for row in cursor.fetchall()]
        finally:
            self._release(conn)
