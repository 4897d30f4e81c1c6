import json
import os
from typing import Any

from pydantic import ValidationError

from src.config import QuestionCategory
from src.quiz.domain.models import Question
from src.quiz.domain.validation import validate_all
from src.shared.telemetry import Telemetry


class QuestionBank:
    """
    Read-only question catalog loaded from a JSON array.

    Broken records are skipped and logged; a bad catalog entry must never take
    the whole quiz down. Identifiers are unique: the first occurrence wins.
    """

    def __init__(self, questions: list[Question] | None = None) -> None:
        self.telemetry = Telemetry("QuestionBank")
        self._questions: list[Question] = []
        self._by_id: dict[str, Question] = {}
        for q in questions or []:
            self._add(q)

    def _add(self, question: Question) -> bool:
        if question.id in self._by_id:
            self.telemetry.log_warning("Duplicate question id skipped", id=question.id)
            return False
        self._by_id[question.id] = question
        self._questions.append(question)
        return True

    @classmethod
    def load(cls, path: str) -> "QuestionBank":
        bank = cls()
        if not os.path.exists(path):
            bank.telemetry.log_error(
                "Question file NOT found", FileNotFoundError(f"Missing: {path}")
            )
            return bank

        with open(path, encoding="utf-8") as f:
            raw: Any = json.load(f)

        if not isinstance(raw, list):
            bank.telemetry.log_error(
                "Question file is not a JSON array", ValueError(type(raw).__name__)
            )
            return bank

        skipped = 0
        for index, record in enumerate(raw):
            try:
                question = Question.model_validate(record)
            except ValidationError as e:
                skipped += 1
                bank.telemetry.log_warning(
                    "Invalid question skipped",
                    index=index,
                    errors=e.error_count(),
                    detail=e.errors()[0]["msg"],
                )
                continue
            bank._add(question)

        for warning in validate_all(bank.all()):
            bank.telemetry.log_warning(
                "Quality check",
                id=warning.question_id,
                type=warning.type,
                message=warning.message,
            )

        bank.telemetry.log_info(
            "Question bank loaded", path=path, count=len(bank), skipped=skipped
        )
        return bank

    def __len__(self) -> int:
        return len(self._questions)

    def all(self) -> list[Question]:
        return list(self._questions)

    def get(self, question_id: str) -> Question | None:
        return self._by_id.get(question_id)

    def by_category(self, category: QuestionCategory) -> list[Question]:
        return [q for q in self._questions if q.category is category]
