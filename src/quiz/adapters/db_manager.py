import os
import sqlite3
from typing import Any

from src.shared.telemetry import Telemetry, measure_time

STATS_TABLE = "stats_question_aggregate"
ANSWER_LOG_TABLE = "answer_logs"


class DatabaseManager:
    """
    Responsible for:
    1. Managing the SQLite connection lifecycle.
    2. Initializing the stats schema (DDL).
    3. Ensuring pickle-safety for Streamlit Session State.
    """

    def __init__(self, db_path: str = "data/stats.db") -> None:
        self.db_path = db_path
        self.telemetry = Telemetry("DatabaseManager")
        self._shared_connection: sqlite3.Connection | None = None

        self._ensure_db_exists()

        # For in-memory DBs, we must keep the connection open immediately
        if self.db_path == ":memory:":
            self._shared_connection = sqlite3.connect(
                ":memory:", check_same_thread=False
            )

        self._init_schema()

    # --- SERIALIZATION LOGIC (Pickle Safety) ---
    def __getstate__(self) -> dict[str, Any]:
        """The sqlite3 connection cannot be pickled; drop it."""
        state = self.__dict__.copy()
        state.pop("_shared_connection", None)
        return state

    def __setstate__(self, state: dict[str, Any]) -> None:
        """Connection is lazily re-created by get_connection()."""
        self.__dict__.update(state)
        self._shared_connection = None

    def get_connection(self) -> sqlite3.Connection:
        """Returns a usable database connection, reconnecting if necessary."""
        if self._shared_connection:
            try:
                self._shared_connection.execute("SELECT 1")
                return self._shared_connection
            except sqlite3.ProgrammingError:
                # Connection was closed externally
                self._shared_connection = None

        conn = sqlite3.connect(self.db_path, check_same_thread=False)

        if self.db_path != ":memory:":
            conn.execute("PRAGMA journal_mode=WAL")

        self._shared_connection = conn
        return conn

    def close(self) -> None:
        if self._shared_connection:
            self._shared_connection.close()
            self._shared_connection = None

    def _ensure_db_exists(self) -> None:
        if self.db_path == ":memory:":
            return
        dir_name = os.path.dirname(self.db_path)
        if dir_name:
            os.makedirs(dir_name, exist_ok=True)

    @measure_time("db_init_schema")
    def _init_schema(self) -> None:
        conn = self.get_connection()
        try:
            conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {STATS_TABLE}
                (
                    question_id    TEXT PRIMARY KEY,
                    total_attempts INTEGER NOT NULL DEFAULT 0,
                    total_correct  INTEGER NOT NULL DEFAULT 0,
                    updated_at     DATETIME NOT NULL DEFAULT CURRENT_TIMESTAMP
                )
                """
            )
            conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {ANSWER_LOG_TABLE}
                (
                    id              INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id         TEXT    NOT NULL,
                    question_id     TEXT    NOT NULL,
                    selected_option TEXT    NOT NULL DEFAULT '',
                    is_correct      BOOLEAN NOT NULL,
                    source_url      TEXT,
                    rating_before   INTEGER,
                    rating_after    INTEGER,
                    created_at      DATETIME DEFAULT CURRENT_TIMESTAMP
                )
                """
            )
            conn.execute(
                f"CREATE INDEX IF NOT EXISTS idx_answer_logs_question "
                f"ON {ANSWER_LOG_TABLE} (question_id)"
            )
            conn.commit()
        except sqlite3.Error as e:
            self.telemetry.log_error("Schema Init Failed", e)
            raise
