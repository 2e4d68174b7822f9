import random

from fe_quiz.config import QuizConfig
from fe_quiz.exceptions import NotFoundError
from fe_quiz.quiz.application.service import ProgressService
from fe_quiz.quiz.domain.models import (
    CategoryId,
    CategoryInfo,
    Difficulty,
    GlossaryTerm,
    PublicQuestion,
    QuestionListItem,
    QuestionStatus,
)
from fe_quiz.quiz.domain.ports import IGlossary, IQuestionBank
from fe_quiz.shared.telemetry import Telemetry, measure_time


class CatalogService:
    """Read paths over the question file and the glossary. Never mutates."""

    def __init__(
        self,
        question_bank: IQuestionBank,
        glossary: IGlossary,
        progress: ProgressService,
        rng: random.Random | None = None,
    ) -> None:
        self.question_bank = question_bank
        self.glossary = glossary
        self.progress = progress
        self.rng = rng or random.Random()
        self.telemetry = Telemetry("CatalogService")

    def get_categories(self) -> list[CategoryInfo]:
        return self.question_bank.get_categories()

    def get_questions(
        self,
        category: CategoryId | None = None,
        subcategory: str | None = None,
        difficulty: Difficulty | None = None,
    ) -> list[PublicQuestion]:
        questions = self.question_bank.get_all_questions()
        if category:
            questions = [q for q in questions if q.category == category]
        if subcategory:
            questions = [q for q in questions if q.subcategory == subcategory]
        if difficulty:
            questions = [q for q in questions if q.difficulty == difficulty]
        return [q.public() for q in questions]

    @measure_time("random_questions")
    def get_random_questions(
        self,
        category: CategoryId | None = None,
        count: int = QuizConfig.DEFAULT_QUESTION_COUNT,
    ) -> list[PublicQuestion]:
        questions = self.question_bank.get_all_questions()
        if category:
            questions = [q for q in questions if q.category == category]
        selected = self.rng.sample(questions, min(max(count, 0), len(questions)))
        self.telemetry.log_info(
            "Random batch", category=category, requested=count, served=len(selected)
        )
        return [q.public() for q in selected]

    def get_weak_questions(self) -> list[PublicQuestion]:
        weak_ids = set(self.progress.weak_question_ids())
        return [
            q.public()
            for q in self.question_bank.get_all_questions()
            if q.id in weak_ids
        ]

    def get_question(self, question_id: str) -> PublicQuestion:
        question = self.question_bank.get_question(question_id)
        if question is None:
            raise NotFoundError("問題が見つかりません", {"question_id": question_id})
        return question.public()

    def list_questions(
        self,
        category: CategoryId | None = None,
        difficulty: Difficulty | None = None,
        search: str | None = None,
    ) -> list[QuestionListItem]:
        questions = self.question_bank.get_all_questions()
        if category:
            questions = [q for q in questions if q.category == category]
        if difficulty:
            questions = [q for q in questions if q.difficulty == difficulty]
        if search:
            needle = search.lower()
            questions = [
                q
                for q in questions
                if needle in q.prompt.lower() or needle in q.subcategory.lower()
            ]

        stats = self.progress.snapshot().question_stats
        items = []
        for q in questions:
            stat = stats.get(q.id)
            status = QuestionStatus.UNANSWERED
            if stat and stat.attempts > 0:
                status = (
                    QuestionStatus.CORRECT
                    if stat.correct_rate >= QuizConfig.LIST_CORRECT_RATE
                    else QuestionStatus.INCORRECT
                )
            items.append(
                QuestionListItem(
                    id=q.id,
                    category=q.category,
                    category_name=q.category_name,
                    subcategory=q.subcategory,
                    prompt=q.prompt,
                    difficulty=q.difficulty,
                    status=status,
                    attempts=stat.attempts if stat else 0,
                    correct_count=stat.correct_count if stat else 0,
                )
            )
        return items

    def get_glossary(
        self, category: CategoryId | None = None, search: str | None = None
    ) -> list[GlossaryTerm]:
        terms = self.glossary.get_terms()
        if category:
            terms = [t for t in terms if t.category == category]
        if search:
            needle = search.lower()
            terms = [
                t
                for t in terms
                if needle in t.term.lower()
                or search in t.meaning
                or search in t.description
            ]
        return terms

    def get_term(self, term_id: str) -> GlossaryTerm:
        term = self.glossary.get_term(term_id)
        if term is None:
            raise NotFoundError("用語が見つかりません", {"term_id": term_id})
        return term
