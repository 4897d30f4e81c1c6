import time
from collections.abc import Callable

from src.config import GameConfig
from src.fsm import QuizAction, QuizState, QuizStateMachine
from src.quiz.application.service import QuizService
from src.quiz.domain.daily_challenge import TomorrowPreview, tomorrow_preview
from src.quiz.domain.models import (
    AnswerOutcome,
    Question,
    QuizSessionState,
    SessionSummary,
)
from src.quiz.domain.ports import IStateProvider
from src.quiz.presentation.formatters import ShareText, build_share_text
from src.shared.telemetry import Telemetry

# --- Session State Keys ---
FSM_KEY = "fsm_state"
SESSION_KEY = "quiz_session"
QUESTIONS_KEY = "questions"
LAST_SELECTED_KEY = "last_selected"
STARTED_AT_KEY = "question_started_at"
SUMMARY_KEY = "session_summary"


class QuizViewModel:
    def __init__(
        self,
        service: QuizService,
        state_provider: IStateProvider,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.service = service
        self.state = state_provider
        self.clock = clock
        self.telemetry = Telemetry("ViewModel")

        saved_fsm = self.state.get(FSM_KEY, QuizState.IDLE)
        self.fsm = QuizStateMachine(initial_state=saved_fsm)

        if self.state.get(SESSION_KEY) is None:
            self.state.set(SESSION_KEY, QuizSessionState())

    # --- Properties ---
    @property
    def current_state(self) -> QuizState:
        return self.fsm.current_state

    @property
    def session(self) -> QuizSessionState:
        return self.state.get(SESSION_KEY)

    @property
    def questions(self) -> list[Question]:
        return self.state.get(QUESTIONS_KEY, [])

    @property
    def current_question(self) -> Question | None:
        qs = self.questions
        idx = self.session.current_q_index
        if qs and 0 <= idx < len(qs):
            return qs[idx]
        return None

    @property
    def is_last_question(self) -> bool:
        return self.session.current_q_index >= len(self.questions) - 1

    @property
    def last_outcome(self) -> AnswerOutcome | None:
        return self.session.last_outcome

    @property
    def last_selected(self) -> str | None:
        return self.state.get(LAST_SELECTED_KEY)

    @property
    def summary(self) -> SessionSummary | None:
        return self.state.get(SUMMARY_KEY)

    @property
    def user_id(self) -> str:
        return self.service.progress.get_or_create_user_id()

    # --- Start Screen Data ---
    @property
    def rating(self) -> int:
        return self.service.progress.get_rating()

    @property
    def attempts_remaining(self) -> int:
        return self.service.progress.attempts_remaining_today()

    @property
    def can_start(self) -> bool:
        return self.service.can_start_session()

    @property
    def daily_challenge_completed(self) -> bool:
        return self.service.progress.is_daily_challenge_completed()

    def get_tomorrow_preview(self) -> TomorrowPreview:
        return tomorrow_preview(self.service.progress.clock())

    # --- Timer ---
    def time_remaining(self) -> float:
        started = self.state.get(STARTED_AT_KEY)
        if started is None or self.current_state != QuizState.QUESTION_ACTIVE:
            return float(GameConfig.ANSWER_TIMER_SECONDS)
        elapsed = self.clock() - started
        return max(0.0, GameConfig.ANSWER_TIMER_SECONDS - elapsed)

    def check_timeout(self) -> bool:
        """Scores the active question as missed once the timer has run out."""
        if self.current_state != QuizState.QUESTION_ACTIVE:
            return False
        if self.time_remaining() > 0:
            return False
        self.submit_answer(None)
        return True

    # --- Actions (Traced) ---
    def start_quiz(self, data_only: bool = False) -> None:
        Telemetry.start_trace()
        self.telemetry.log_info("Action: Start Quiz", data_only=data_only)
        self.fsm.transition(QuizAction.START)
        self._load(self.service.start_session(data_only=data_only), daily=False)

    def start_daily_challenge(self) -> None:
        Telemetry.start_trace()
        self.telemetry.log_info("Action: Start Daily Challenge")
        self.fsm.transition(QuizAction.START)
        self._load(self.service.start_daily_challenge(), daily=True)

    def _load(self, questions: list[Question], daily: bool) -> None:
        self.state.set(QUESTIONS_KEY, questions)
        self.state.set(
            SESSION_KEY,
            QuizSessionState(
                rating_at_start=self.service.progress.get_rating(),
                is_daily_challenge=daily,
            ),
        )
        self.state.set(LAST_SELECTED_KEY, None)
        self.state.set(SUMMARY_KEY, None)

        if questions:
            self.fsm.transition(QuizAction.LOAD_SUCCESS)
            self._start_timer()
        else:
            self.fsm.transition(QuizAction.LOAD_EMPTY)
        self._persist_fsm()

    def submit_answer(self, choice_id: str | None) -> None:
        """choice_id=None is a timeout."""
        Telemetry.start_trace()
        q = self.current_question

        if not q or self.current_state != QuizState.QUESTION_ACTIVE:
            self.telemetry.log_error("Submit failed", Exception("No active question"))
            return

        outcome = self.service.submit_answer(self.user_id, q, choice_id)
        self.session.record_answer(outcome)
        self.state.set(LAST_SELECTED_KEY, choice_id)

        action = QuizAction.TIME_UP if choice_id is None else QuizAction.SUBMIT_ANSWER
        self.fsm.transition(action)
        self._persist_fsm()

    def next_step(self) -> None:
        Telemetry.start_trace()
        if self.is_last_question:
            self._finish_quiz()
        else:
            self.session.next_question()
            self.state.set(LAST_SELECTED_KEY, None)
            self.fsm.transition(QuizAction.NEXT_QUESTION)
            self._start_timer()
        self._persist_fsm()

    def _finish_quiz(self) -> None:
        session = self.session
        summary = self.service.finalize_session(
            correct=session.score,
            total=len(self.questions),
            rating_before=session.rating_at_start,
            is_daily_challenge=session.is_daily_challenge,
        )
        self.state.set(SUMMARY_KEY, summary)
        self.fsm.transition(QuizAction.FINISH_QUIZ)

    def share_text(self) -> ShareText | None:
        summary = self.summary
        if summary is None:
            return None
        return build_share_text(
            correct_count=summary.correct_count,
            total_questions=summary.total_questions,
            accuracy=summary.accuracy,
            rating=summary.rating_after,
        )

    def reset(self) -> None:
        Telemetry.start_trace()
        self.fsm.transition(QuizAction.RESET)
        self.state.delete(STARTED_AT_KEY)
        self._persist_fsm()

    def _start_timer(self) -> None:
        self.state.set(STARTED_AT_KEY, self.clock())

    def _persist_fsm(self) -> None:
        self.state.set(FSM_KEY, self.fsm.current_state)
