import json
from typing import Any

from pydantic import ValidationError

from fe_quiz.exceptions import GlossaryUnavailableError, StorageError
from fe_quiz.quiz.domain.models import CategoryInfo, GlossaryTerm, Question
from fe_quiz.quiz.domain.ports import IGlossary, IQuestionBank
from fe_quiz.shared.telemetry import Telemetry


def _read_json(path: str) -> dict[str, Any]:
    with open(path, encoding="utf-8") as f:
        return json.load(f)


class JsonQuestionBank(IQuestionBank):
    """
    Reads `{"categories": [...], "questions": [...]}` on every call, so edits
    to the file are picked up without a restart.
    """

    def __init__(self, path: str) -> None:
        self.path = path
        self.telemetry = Telemetry("JsonQuestionBank")

    def _load(self) -> dict[str, Any]:
        try:
            return _read_json(self.path)
        except (OSError, json.JSONDecodeError) as e:
            self.telemetry.log_error("Question file unreadable", e, path=self.path)
            raise StorageError("問題の取得に失敗しました", {"path": self.path}) from e

    def get_all_questions(self) -> list[Question]:
        data = self._load()
        try:
            return [Question.model_validate(q) for q in data.get("questions", [])]
        except ValidationError as e:
            raise StorageError("問題データが不正です", {"path": self.path}) from e

    def get_categories(self) -> list[CategoryInfo]:
        data = self._load()
        try:
            return [CategoryInfo.model_validate(c) for c in data.get("categories", [])]
        except ValidationError as e:
            raise StorageError("カテゴリデータが不正です", {"path": self.path}) from e


class JsonGlossary(IGlossary):
    def __init__(self, path: str) -> None:
        self.path = path

    def get_terms(self) -> list[GlossaryTerm]:
        try:
            data = _read_json(self.path)
            return [GlossaryTerm.model_validate(t) for t in data.get("terms", [])]
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            raise GlossaryUnavailableError(
                "用語集の取得に失敗しました", {"path": self.path}
            ) from e
