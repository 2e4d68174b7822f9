from abc import ABC, abstractmethod

from fe_quiz.quiz.domain.models import (
    AnswerResult,
    CategoryId,
    CategoryInfo,
    GlossaryTerm,
    HistoryItem,
    Progress,
    ProgressSummary,
    PublicQuestion,
    Question,
    SubmittedAnswer,
)


# --- Server side ---
class IProgressRepository(ABC):
    @abstractmethod
    def load(self) -> Progress:
        """Returns the stored document, creating a fresh one if none exists."""
        pass

    @abstractmethod
    def save(self, progress: Progress) -> None:
        """Replaces the whole stored document."""
        pass


class IQuestionBank(ABC):
    @abstractmethod
    def get_all_questions(self) -> list[Question]:
        pass

    @abstractmethod
    def get_categories(self) -> list[CategoryInfo]:
        pass

    def get_question(self, question_id: str) -> Question | None:
        for question in self.get_all_questions():
            if question.id == question_id:
                return question
        return None

    def get_questions_by_ids(self, question_ids: list[str]) -> list[Question]:
        wanted = set(question_ids)
        return [q for q in self.get_all_questions() if q.id in wanted]


class IGlossary(ABC):
    @abstractmethod
    def get_terms(self) -> list[GlossaryTerm]:
        pass

    def get_term(self, term_id: str) -> GlossaryTerm | None:
        for term in self.get_terms():
            if term.id == term_id:
                return term
        return None


# --- Client side ---
class IQuizApi(ABC):
    """What the quiz session needs from the server."""

    @abstractmethod
    def fetch_random_questions(
        self, category: CategoryId | None, count: int
    ) -> list[PublicQuestion]:
        pass

    @abstractmethod
    def fetch_weak_questions(self) -> list[PublicQuestion]:
        pass

    @abstractmethod
    def fetch_question(self, question_id: str) -> PublicQuestion | None:
        pass

    @abstractmethod
    def submit_answer(self, question_id: str, answer: SubmittedAnswer) -> AnswerResult:
        pass

    @abstractmethod
    def fetch_progress(self) -> ProgressSummary:
        pass

    @abstractmethod
    def reset_progress(self) -> str:
        pass

    @abstractmethod
    def fetch_history(self, limit: int) -> list[HistoryItem]:
        pass
