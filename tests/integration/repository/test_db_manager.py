import os
import pickle
import sqlite3

import pytest

from src.quiz.adapters.db_manager import ANSWER_LOG_TABLE, STATS_TABLE, DatabaseManager


@pytest.fixture
def file_db(tmp_path):
    db = DatabaseManager(str(tmp_path / "stats.db"))
    yield db
    db.close()


class TestInit:
    def test_creates_file_and_parent_dirs(self, tmp_path):
        db_path = str(tmp_path / "nested" / "dir" / "stats.db")
        db = DatabaseManager(db_path)

        assert os.path.exists(db_path)
        db.close()

    def test_creates_stats_tables(self, file_db):
        rows = file_db.get_connection().execute(
            "SELECT name FROM sqlite_master WHERE type='table'"
        )
        tables = {row[0] for row in rows.fetchall()}

        assert {STATS_TABLE, ANSWER_LOG_TABLE} <= tables

    def test_schema_init_is_idempotent(self, tmp_path):
        db_path = str(tmp_path / "stats.db")
        DatabaseManager(db_path).close()

        # Second open over an existing file must not fail
        DatabaseManager(db_path).close()

    def test_memory_db_is_usable_immediately(self):
        db = DatabaseManager(":memory:")

        assert db._shared_connection is not None
        count = db.get_connection().execute(
            f"SELECT COUNT(*) FROM {STATS_TABLE}"
        ).fetchone()
        assert count == (0,)
        db.close()


class TestConnections:
    def test_connection_is_reused(self, file_db):
        assert file_db.get_connection() is file_db.get_connection()

    def test_reconnects_after_external_close(self, file_db):
        """
        GIVEN a connection closed behind the manager's back
        WHEN a connection is requested again
        THEN a fresh working connection is returned
        """
        file_db.get_connection().close()

        conn = file_db.get_connection()

        assert conn.execute("SELECT 1").fetchone() == (1,)

    def test_file_db_uses_wal(self, file_db):
        mode = file_db.get_connection().execute("PRAGMA journal_mode").fetchone()
        assert mode[0].lower() == "wal"

    def test_close_really_closes(self, file_db):
        conn = file_db.get_connection()

        file_db.close()
        file_db.close()  # second close is a no-op

        assert file_db._shared_connection is None
        with pytest.raises(sqlite3.ProgrammingError):
            conn.execute("SELECT 1")


class TestPickle:
    def test_state_drops_connection(self, file_db):
        file_db.get_connection()

        state = file_db.__getstate__()

        assert "_shared_connection" not in state
        assert state["db_path"] == file_db.db_path

    def test_roundtrip_reconnects_lazily(self, file_db):
        file_db.get_connection()

        restored = pickle.loads(pickle.dumps(file_db))

        assert restored._shared_connection is None
        assert restored.get_connection().execute("SELECT 1").fetchone() == (1,)
        restored.close()
