# ==============================================================================
# FUNCTIONAL TEST (USER FLOWS)
# ------------------------------------------------------------------------------
# GOAL: Verify end-to-end player scenarios through the view model.
# I/O: in-memory SQLite stats and in-memory player storage. No Streamlit UI.
# ==============================================================================
import pytest

from src.config import GameConfig, QuestionCategory
from src.fsm import QuizState
from src.quiz.presentation.viewmodel import QuizViewModel
from tests.drivers.quiz_driver import QuizDriver


@pytest.fixture
def driver(service, state_provider):
    return QuizDriver(QuizViewModel(service, state_provider))


def test_first_time_player_plays_a_session(driver, progress):
    """
    GIVEN a brand-new player
    WHEN they answer 3 of 5 correctly
    THEN the summary shows 3/5, a 1-day streak and one attempt used
    """
    driver.assert_on_screen(QuizState.IDLE)

    driver.play_session(correct=3)

    driver.assert_on_screen(QuizState.SUMMARY).assert_score(3)
    assert driver.vm.summary.streak == 1
    assert progress.attempts_remaining_today() == GameConfig.MAX_DAILY_ATTEMPTS - 1
    assert len(progress.get_history()) == GameConfig.QUESTIONS_PER_SESSION


def test_free_player_runs_out_of_attempts(driver):
    """
    GIVEN a free player
    WHEN they finish every allowed session today
    THEN the next start lands on the empty screen
    """
    real_ids = []
    for _ in range(GameConfig.MAX_DAILY_ATTEMPTS):
        driver.play_session(correct=5)
        real_ids += [
            q.id
            for q in driver.vm.questions
            if q.category is QuestionCategory.REAL_DATA
        ]
        driver.back_to_start()

    driver.start().assert_on_screen(QuizState.EMPTY_STATE)
    # Plenty of real data, so none of it repeats within the day
    assert len(real_ids) == len(set(real_ids))


def test_streak_grows_on_consecutive_days(driver, clock):
    driver.play_session(correct=2).back_to_start()
    clock.advance()

    driver.play_session(correct=2)

    assert driver.vm.summary.streak == 2


def test_timeouts_count_as_misses(driver, progress):
    driver.start()
    while driver.vm.current_state == QuizState.QUESTION_ACTIVE:
        driver.let_time_run_out().assert_on_screen(QuizState.FEEDBACK_VIEW).next()

    driver.assert_on_screen(QuizState.SUMMARY).assert_score(0)
    assert progress.get_rating() < GameConfig.INITIAL_RATING


def test_daily_challenge_once_per_day(driver, progress, clock):
    """
    GIVEN a player who already used every free attempt
    WHEN they open the daily challenge
    THEN they can still play it once, and again tomorrow
    """
    for _ in range(GameConfig.MAX_DAILY_ATTEMPTS):
        progress.consume_attempt()

    driver.play_session(correct=4, daily=True).assert_score(4)
    driver.back_to_start().start_daily().assert_on_screen(QuizState.EMPTY_STATE)

    clock.advance()
    driver.back_to_start().start_daily().assert_on_screen(QuizState.QUESTION_ACTIVE)
