import random
from datetime import date

import pytest
import streamlit as st

from src.config import QuestionCategory
from src.quiz.adapters.db_manager import DatabaseManager
from src.quiz.adapters.sqlite_repository import SQLiteStatsRepository
from src.quiz.application.player_progress import PlayerProgress
from src.quiz.application.service import QuizService
from src.quiz.domain.models import BiasLevel
from src.quiz.domain.session_selector import SessionSelector
from src.quiz.presentation.state_provider import InMemoryStateProvider
from src.shared.telemetry import Telemetry
from tests.drivers.builders import FakeClock, build_question


class MockSessionState(dict):
    """
    Mock for st.session_state that behaves like both a dict and an object.
    Allows both dict-style and attribute-style access.
    """

    def __getattr__(self, name):
        try:
            return self[name]
        except KeyError as err:
            raise AttributeError(
                f"'MockSessionState' object has no attribute '{name}'"
            ) from err

    def __setattr__(self, name, value):
        self[name] = value

    def __delattr__(self, name):
        try:
            del self[name]
        except KeyError as err:
            raise AttributeError(
                f"'MockSessionState' object has no attribute '{name}'"
            ) from err


@pytest.fixture(autouse=True)
def mock_streamlit_session():
    """
    Auto-use fixture that ensures st.session_state exists for all tests.
    """
    original_session_state = getattr(st, "session_state", None)
    st.session_state = MockSessionState()

    yield st.session_state

    st.session_state.clear()
    if original_session_state is not None:
        st.session_state = original_session_state


@pytest.fixture(autouse=True)
def clean_recent_errors():
    Telemetry.clear_recent_errors()
    yield
    Telemetry.clear_recent_errors()


@pytest.fixture
def make_question():
    return build_question


@pytest.fixture
def sample_question():
    return build_question("Q1", difficulty=3)


@pytest.fixture
def sample_pool():
    """
    8 REAL_DATA per bias level (32), 8 THEORY, 4 KNOWLEDGE. Plenty for any
    composition; no featured names.
    """
    pool = []
    for level in BiasLevel:
        pool += [
            build_question(f"R-{level.value}-{i}", bias=level) for i in range(8)
        ]
    pool += [
        build_question(f"T-{i}", category=QuestionCategory.THEORY) for i in range(8)
    ]
    pool += [
        build_question(f"K-{i}", category=QuestionCategory.KNOWLEDGE)
        for i in range(4)
    ]
    return pool


@pytest.fixture
def clock():
    return FakeClock(date(2025, 6, 10))  # a Tuesday


@pytest.fixture
def state_provider():
    return InMemoryStateProvider()


@pytest.fixture
def progress(state_provider, clock):
    return PlayerProgress(state_provider, clock=clock)


@pytest.fixture
def in_memory_stats_repo():
    """Returns a clean, empty in-memory stats repository."""
    db_manager = DatabaseManager(db_path=":memory:")
    repo = SQLiteStatsRepository(db_manager=db_manager)
    yield repo
    db_manager.close()


@pytest.fixture
def service(in_memory_stats_repo, sample_pool, progress):
    return QuizService(
        stats_repo=in_memory_stats_repo,
        questions=sample_pool,
        progress=progress,
        selector=SessionSelector(rng=random.Random(42)),
    )
