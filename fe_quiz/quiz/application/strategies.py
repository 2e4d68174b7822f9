from abc import ABC, abstractmethod

from pydantic import BaseModel, Field

from fe_quiz.config import QuizConfig
from fe_quiz.quiz.domain.models import CategoryId, PublicQuestion, QuizMode, QuizOptions
from fe_quiz.quiz.domain.ports import IQuizApi
from fe_quiz.shared.telemetry import Telemetry, measure_time


# --- DTO describing what to fetch ---
class BatchRequest(BaseModel):
    mode: QuizMode = QuizMode.NORMAL
    category: CategoryId | None = None
    question_id: str | None = None
    options: QuizOptions = Field(default_factory=QuizOptions)


# --- Interface ---
class IQuestionStrategy(ABC):
    allows_shuffle: bool = True
    offers_retry: bool = False
    empty_message: str = QuizConfig.EMPTY_MESSAGE

    @abstractmethod
    def fetch(self, api: IQuizApi, request: BatchRequest) -> list[PublicQuestion]:
        pass


# --- Concrete Strategies ---
class RandomBatchStrategy(IQuestionStrategy):
    def __init__(self) -> None:
        self.telemetry = Telemetry("Strategy.Random")

    @measure_time("fetch_random_batch")
    def fetch(self, api: IQuizApi, request: BatchRequest) -> list[PublicQuestion]:
        count = request.options.count
        # 0 means "all questions"
        requested = QuizConfig.ALL_QUESTIONS_COUNT if count == 0 else count
        return api.fetch_random_questions(request.category, requested)


class WeakBatchStrategy(IQuestionStrategy):
    empty_message = QuizConfig.EMPTY_WEAK_MESSAGE

    def __init__(self) -> None:
        self.telemetry = Telemetry("Strategy.Weak")

    @measure_time("fetch_weak_batch")
    def fetch(self, api: IQuizApi, request: BatchRequest) -> list[PublicQuestion]:
        return api.fetch_weak_questions()


class SingleQuestionStrategy(IQuestionStrategy):
    allows_shuffle = False
    offers_retry = True

    def fetch(self, api: IQuizApi, request: BatchRequest) -> list[PublicQuestion]:
        if not request.question_id:
            return []
        question = api.fetch_question(request.question_id)
        return [question] if question else []


# --- Registry (OCP) ---
class StrategyRegistry:
    _strategies: dict[QuizMode, IQuestionStrategy] = {}

    @classmethod
    def register(cls, mode: QuizMode, strategy: IQuestionStrategy) -> None:
        cls._strategies[mode] = strategy

    @classmethod
    def get(cls, mode: QuizMode) -> IQuestionStrategy:
        return cls._strategies.get(mode, cls._strategies[QuizMode.NORMAL])


StrategyRegistry.register(QuizMode.NORMAL, RandomBatchStrategy())
StrategyRegistry.register(QuizMode.WEAK, WeakBatchStrategy())
StrategyRegistry.register(QuizMode.SINGLE, SingleQuestionStrategy())
