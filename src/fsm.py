import logging
from enum import Enum, auto

logger = logging.getLogger(__name__)


class QuizState(Enum):
    IDLE = auto()  # Start screen: attempts left, daily challenge, tomorrow preview
    LOADING = auto()  # Building the session
    QUESTION_ACTIVE = auto()  # Question on screen, answer timer running
    FEEDBACK_VIEW = auto()  # Answer (or timeout) scored, explanation shown
    SUMMARY = auto()  # Session finished, result + share
    EMPTY_STATE = auto()  # Nothing to play (daily cap or empty catalog)


class QuizAction(Enum):
    START = auto()
    LOAD_SUCCESS = auto()
    LOAD_EMPTY = auto()
    SUBMIT_ANSWER = auto()
    TIME_UP = auto()
    NEXT_QUESTION = auto()
    FINISH_QUIZ = auto()
    RESET = auto()


class QuizStateMachine:
    """
    Pure FSM Logic.
    Only knows which screen follows which; no UI, no storage.
    """

    def __init__(self, initial_state: QuizState = QuizState.IDLE) -> None:
        self._state = initial_state

    @property
    def current_state(self) -> QuizState:
        return self._state

    def transition(self, action: QuizAction) -> bool:
        """Applies the action. Returns False (state unchanged) if not allowed."""
        previous = self._state

        match (self._state, action):
            case (QuizState.IDLE, QuizAction.START):
                self._state = QuizState.LOADING

            case (QuizState.LOADING, QuizAction.LOAD_SUCCESS):
                self._state = QuizState.QUESTION_ACTIVE
            case (QuizState.LOADING, QuizAction.LOAD_EMPTY):
                self._state = QuizState.EMPTY_STATE

            # A timeout is scored like a wrong answer
            case (QuizState.QUESTION_ACTIVE, QuizAction.SUBMIT_ANSWER):
                self._state = QuizState.FEEDBACK_VIEW
            case (QuizState.QUESTION_ACTIVE, QuizAction.TIME_UP):
                self._state = QuizState.FEEDBACK_VIEW

            case (QuizState.FEEDBACK_VIEW, QuizAction.NEXT_QUESTION):
                self._state = QuizState.QUESTION_ACTIVE
            case (QuizState.FEEDBACK_VIEW, QuizAction.FINISH_QUIZ):
                self._state = QuizState.SUMMARY

            case (_, QuizAction.RESET):
                self._state = QuizState.IDLE

            case _:
                logger.error(
                    f"⛔ INVALID TRANSITION: {self._state.name} + {action.name}"
                )
                return False

        logger.info(
            f"🔄 FSM: {previous.name} --[{action.name}]--> {self._state.name}"
        )
        return True
