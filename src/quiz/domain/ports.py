from abc import ABC, abstractmethod
from typing import Any

from src.quiz.domain.models import AnswerLog, QuestionStats


class IStatsRepository(ABC):
    """Shared, cross-player answer statistics (backend table)."""

    @abstractmethod
    def record_answer(self, question_id: str, is_correct: bool) -> QuestionStats:
        """Increments the aggregate and returns the updated row."""
        pass

    @abstractmethod
    def get_stats(self, question_id: str) -> QuestionStats:
        pass

    @abstractmethod
    def save_answer_log(self, log: AnswerLog) -> None:
        pass

    @abstractmethod
    def ping(self) -> bool:
        pass


class IStateProvider(ABC):
    """Per-player key/value storage (browser-local in spirit)."""

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        pass

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        pass

    @abstractmethod
    def clear(self) -> None:
        pass
