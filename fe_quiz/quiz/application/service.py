import threading
from collections.abc import Callable
from datetime import datetime

from fe_quiz.config import QuizConfig
from fe_quiz.exceptions import GlossaryUnavailableError, NotFoundError
from fe_quiz.quiz.adapters.json_repository import utc_now
from fe_quiz.quiz.domain.mastery import MasteryRules
from fe_quiz.quiz.domain.models import (
    AnswerResult,
    GlossaryTerm,
    HistoryItem,
    HistoryQuestionInfo,
    Progress,
    ProgressSummary,
    Question,
    SubmittedAnswer,
    TimedOut,
)
from fe_quiz.quiz.domain.ports import IGlossary, IProgressRepository, IQuestionBank
from fe_quiz.shared.telemetry import Telemetry, measure_time


class ProgressService:
    """
    Owns the single Progress aggregate.

    Every read and write goes through one lock, so concurrent submissions
    are applied one after another. Mutations run on a deep copy that only
    replaces the held aggregate once the repository save has succeeded.
    """

    def __init__(
        self,
        repo: IProgressRepository,
        question_bank: IQuestionBank,
        glossary: IGlossary,
        rules: MasteryRules | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.repo = repo
        self.question_bank = question_bank
        self.glossary = glossary
        self.rules = rules or MasteryRules()
        self.clock = clock
        self.telemetry = Telemetry("ProgressService")
        self._lock = threading.Lock()
        self._progress: Progress | None = None

    def _current(self) -> Progress:
        # Caller holds the lock.
        if self._progress is None:
            self._progress = self.repo.load()
        return self._progress

    def snapshot(self) -> Progress:
        with self._lock:
            return self._current().model_copy(deep=True)

    @measure_time("submit_answer")
    def submit_answer(self, question_id: str, answer: SubmittedAnswer) -> AnswerResult:
        question = self.question_bank.get_question(question_id)
        if question is None:
            raise NotFoundError("問題が見つかりません", {"question_id": question_id})

        with self._lock:
            draft = self._current().model_copy(deep=True)
            is_correct = self.rules.record_answer(draft, question, answer, self.clock())
            self.repo.save(draft)
            self._progress = draft
            stats = draft.question_stats[question.id].model_copy()

        Telemetry.count_answer(question.category.value, is_correct)
        self.telemetry.log_info(
            "Answer Submitted",
            q_id=question.id,
            correct=is_correct,
            timed_out=isinstance(answer, TimedOut),
        )

        return AnswerResult(
            is_correct=is_correct,
            correct_answer=question.correct_answer,
            explanation=question.explanation,
            stats=stats,
            related_terms=self._resolve_related_terms(question),
        )

    def _resolve_related_terms(self, question: Question) -> list[GlossaryTerm]:
        if not question.related_terms:
            return []
        try:
            terms = {t.id: t for t in self.glossary.get_terms()}
        except GlossaryUnavailableError as e:
            self.telemetry.log_info("Glossary unavailable, no related terms", error=str(e))
            return []
        return [terms[term_id] for term_id in question.related_terms if term_id in terms]

    @measure_time("get_progress_summary")
    def get_progress_summary(self) -> ProgressSummary:
        with self._lock:
            return self.rules.summarize(self._current().model_copy(deep=True))

    @measure_time("reset_progress")
    def reset_progress(self) -> str:
        fresh = Progress.fresh(self.clock())
        with self._lock:
            self.repo.save(fresh)
            self._progress = fresh
        self.telemetry.log_info("Progress Reset")
        return "進捗をリセットしました"

    def weak_question_ids(self) -> list[str]:
        with self._lock:
            return list(self._current().weak_questions)

    def get_history(self, limit: int = QuizConfig.DEFAULT_HISTORY_LIMIT) -> list[HistoryItem]:
        """Most recent entries first, each with a short question preview."""
        with self._lock:
            entries = list(self._current().history[-limit:]) if limit > 0 else []

        questions = {
            q.id: q
            for q in self.question_bank.get_questions_by_ids(
                [e.question_id for e in entries]
            )
        }

        items = []
        for entry in reversed(entries):
            question = questions.get(entry.question_id)
            preview = None
            if question:
                preview = HistoryQuestionInfo(
                    id=question.id,
                    category=question.category,
                    category_name=question.category_name,
                    subcategory=question.subcategory,
                    question_text=question.prompt[: QuizConfig.PREVIEW_LENGTH] + "...",
                )
            items.append(HistoryItem(**entry.model_dump(), question=preview))
        return items
