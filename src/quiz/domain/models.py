from dataclasses import dataclass
from datetime import date
from enum import Enum

from pydantic import BaseModel, Field, model_validator

from src.config import GameConfig, QuestionCategory


# --- Enums ---
class BiasLevel(str, Enum):
    """How obvious the correct answer of a REAL_DATA question is (TOP = most)."""

    TOP = "TOP"
    MID = "MID"
    AVG = "AVG"
    LOW = "LOW"


# Round-robin order used by the session selector
BIAS_ORDER: tuple[BiasLevel, ...] = (
    BiasLevel.TOP,
    BiasLevel.MID,
    BiasLevel.AVG,
    BiasLevel.LOW,
)


# --- Entities ---
class Choice(BaseModel):
    id: str
    text: str


class Question(BaseModel):
    id: str
    number: int
    category: QuestionCategory
    bias_level: BiasLevel = BiasLevel.AVG
    difficulty: int = Field(ge=1, le=5)
    situation: str
    count: str = ""
    choices: list[Choice] = Field(min_length=3, max_length=4)
    answer_choice_id: str
    explanation: str | None = None
    source_label: str | None = None
    source_url: str | None = None

    model_config = {"frozen": True}

    @model_validator(mode="before")
    @classmethod
    def _coerce_category(cls, data: object) -> object:
        # Catalog files store the enum member name ("REAL_DATA")
        if isinstance(data, dict) and isinstance(data.get("category"), str):
            data = dict(data)
            try:
                data["category"] = QuestionCategory[data["category"]]
            except KeyError as err:
                raise ValueError(f"Unknown category: {data['category']}") from err
        return data

    @model_validator(mode="after")
    def _check_answer(self) -> "Question":
        ids = [c.id for c in self.choices]
        if len(set(ids)) != len(ids):
            raise ValueError(f"Question {self.id}: duplicate choice ids {ids}")
        if self.answer_choice_id not in ids:
            raise ValueError(
                f"Question {self.id}: answer '{self.answer_choice_id}' not in {ids}"
            )
        return self

    @property
    def is_featured(self) -> bool:
        text = f"{self.situation} {self.count}"
        return any(name in text for name in GameConfig.FEATURED_ENTITIES)

    @property
    def is_featured_top(self) -> bool:
        return self.is_featured and self.bias_level is BiasLevel.TOP

    def is_correct(self, choice_id: str | None) -> bool:
        return choice_id is not None and choice_id == self.answer_choice_id


# --- Value Objects ---
class SessionOptions(BaseModel):
    data_only: bool = False
    excluded_ids: frozenset[str] = frozenset()


@dataclass(frozen=True)
class SessionComposition:
    real: int
    theory: int
    knowledge: int

    @property
    def total(self) -> int:
        return self.real + self.theory + self.knowledge

    def is_valid(self) -> bool:
        return (
            self.real >= 2
            and self.knowledge <= 1
            and self.total == GameConfig.QUESTIONS_PER_SESSION
        )

    @classmethod
    def of(cls, questions: list[Question]) -> "SessionComposition":
        counts = {c: 0 for c in QuestionCategory}
        for q in questions:
            counts[q.category] += 1
        return cls(
            real=counts[QuestionCategory.REAL_DATA],
            theory=counts[QuestionCategory.THEORY],
            knowledge=counts[QuestionCategory.KNOWLEDGE],
        )


@dataclass(frozen=True)
class RatingChange:
    new_rating: int
    delta: int


class QuestionStats(BaseModel):
    question_id: str
    total_attempts: int = 0
    total_correct: int = 0

    @property
    def accuracy(self) -> float:
        if self.total_attempts == 0:
            return 0.0
        return round(self.total_correct / self.total_attempts, 2)


class AnswerLog(BaseModel):
    user_id: str
    question_id: str
    selected_option: str  # "" when the timer ran out
    is_correct: bool
    source_url: str | None = None
    rating_before: int | None = None
    rating_after: int | None = None


class HistoryEntry(BaseModel):
    question_id: str
    correct: bool
    rating_before: int
    rating_after: int
    difficulty: int
    timestamp: float


class TodayResult(BaseModel):
    correct_count: int
    total_questions: int
    rating_before: int
    rating_after: int


class DailyChallengeState(BaseModel):
    day: date
    completed: bool = False
    correct_count: int = 0
    rating_delta: int = 0


class WeeklyState(BaseModel):
    week_start: date
    correct_total: int = 0
    question_total: int = 0
    session_count: int = 0
    days_played: list[date] = []


class WeeklyRank(BaseModel):
    title: str
    threshold: int


@dataclass
class AnswerOutcome:
    is_correct: bool
    rating: RatingChange
    stats: QuestionStats | None = None


@dataclass
class SessionSummary:
    correct_count: int
    total_questions: int
    rating_before: int
    rating_after: int
    streak: int
    weekly: WeeklyState
    show_interstitial: bool = False

    @property
    def accuracy(self) -> float:
        if self.total_questions == 0:
            return 0.0
        return self.correct_count / self.total_questions * 100


class QuizSessionState(BaseModel):
    """
    Encapsulates the state of a running quiz.
    """

    current_q_index: int = 0
    score: int = 0
    rating_at_start: int = GameConfig.INITIAL_RATING
    is_daily_challenge: bool = False
    answers: list[bool] = []
    last_outcome: AnswerOutcome | None = None

    def record_answer(self, outcome: AnswerOutcome) -> None:
        self.answers.append(outcome.is_correct)
        self.last_outcome = outcome
        if outcome.is_correct:
            self.score += 1

    def next_question(self) -> None:
        self.current_q_index += 1
        self.last_outcome = None


@dataclass
class ValidationWarning:
    question_id: str
    type: str  # LENGTH | DUPLICATE_PHRASE | CHOICE_TONE | CHOICE_LENGTH
    message: str
