"""
HTTP client used by the quiz session to reach the quiz API.

Transport errors, server failures and malformed payloads surface as
ApiUnavailableError so the session can show them without advancing.
"""
from typing import Any

import httpx
from pydantic import TypeAdapter, ValidationError

from fe_quiz.api.schemas import MessageResponse
from fe_quiz.exceptions import ApiUnavailableError, NotFoundError
from fe_quiz.quiz.domain.models import (
    AnswerResult,
    CategoryId,
    CategoryInfo,
    Difficulty,
    GlossaryTerm,
    HistoryItem,
    ProgressSummary,
    PublicQuestion,
    QuestionListItem,
    SubmittedAnswer,
    answer_to_wire,
)
from fe_quiz.quiz.domain.ports import IQuizApi
from fe_quiz.shared.telemetry import Telemetry, measure_time

_questions = TypeAdapter(list[PublicQuestion])
_history = TypeAdapter(list[HistoryItem])
_terms = TypeAdapter(list[GlossaryTerm])
_categories = TypeAdapter(list[CategoryInfo])
_question_list = TypeAdapter(list[QuestionListItem])
_question = TypeAdapter(PublicQuestion)
_verdict = TypeAdapter(AnswerResult)
_summary = TypeAdapter(ProgressSummary)
_message = TypeAdapter(MessageResponse)

_MALFORMED = "サーバーの応答が不正です"


def _params(**kwargs: Any) -> dict[str, Any]:
    return {
        k: v.value if hasattr(v, "value") else v
        for k, v in kwargs.items()
        if v is not None and v != ""
    }


class HttpQuizApi(IQuizApi):
    def __init__(self, client: httpx.Client) -> None:
        self.client = client
        self.telemetry = Telemetry("HttpQuizApi")

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            response = self.client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            self.telemetry.log_error("API unreachable", e, path=path)
            raise ApiUnavailableError(
                "サーバーに接続できませんでした", {"path": path}
            ) from e

        if response.status_code == 404:
            raise NotFoundError(self._error_message(response), {"path": path})
        if response.is_error:
            raise ApiUnavailableError(
                self._error_message(response),
                {"path": path, "status": response.status_code},
            )
        try:
            return response.json()
        except ValueError as e:
            self.telemetry.log_error("Response is not JSON", e, path=path)
            raise ApiUnavailableError(_MALFORMED, {"path": path}) from e

    def _fetch(self, adapter: TypeAdapter, method: str, path: str, **kwargs: Any) -> Any:
        data = self._request(method, path, **kwargs)
        try:
            return adapter.validate_python(data)
        except ValidationError as e:
            self.telemetry.log_error("Unexpected response shape", e, path=path)
            raise ApiUnavailableError(_MALFORMED, {"path": path}) from e

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            return response.json().get("error", response.reason_phrase)
        except (ValueError, AttributeError):
            return response.reason_phrase

    # --- Session port ---
    @measure_time("api_fetch_random")
    def fetch_random_questions(
        self, category: CategoryId | None, count: int
    ) -> list[PublicQuestion]:
        return self._fetch(
            _questions,
            "GET",
            "/api/questions/random",
            params=_params(category=category, count=count),
        )

    def fetch_weak_questions(self) -> list[PublicQuestion]:
        return self._fetch(_questions, "GET", "/api/questions/weak")

    def fetch_question(self, question_id: str) -> PublicQuestion | None:
        try:
            return self._fetch(_question, "GET", f"/api/questions/{question_id}")
        except NotFoundError:
            return None

    @measure_time("api_submit_answer")
    def submit_answer(self, question_id: str, answer: SubmittedAnswer) -> AnswerResult:
        return self._fetch(
            _verdict,
            "POST",
            "/api/answer",
            json={"questionId": question_id, "selectedAnswer": answer_to_wire(answer)},
        )

    def fetch_progress(self) -> ProgressSummary:
        return self._fetch(_summary, "GET", "/api/progress")

    def reset_progress(self) -> str:
        return self._fetch(_message, "POST", "/api/progress/reset").message

    def fetch_history(self, limit: int) -> list[HistoryItem]:
        return self._fetch(_history, "GET", "/api/history", params={"limit": limit})

    # --- Read-only screens ---
    def fetch_categories(self) -> list[CategoryInfo]:
        return self._fetch(_categories, "GET", "/api/categories")

    def fetch_question_list(
        self,
        category: CategoryId | None = None,
        difficulty: Difficulty | None = None,
        search: str | None = None,
    ) -> list[QuestionListItem]:
        return self._fetch(
            _question_list,
            "GET",
            "/api/questions/list",
            params=_params(category=category, difficulty=difficulty, search=search),
        )

    def fetch_glossary(
        self, category: CategoryId | None = None, search: str | None = None
    ) -> list[GlossaryTerm]:
        return self._fetch(
            _terms, "GET", "/api/glossary", params=_params(category=category, search=search)
        )
