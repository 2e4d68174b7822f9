import uuid
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from fe_quiz.config import QuizConfig
from fe_quiz.exceptions import ValidationFailure
from fe_quiz.quiz.domain.countdown import Countdown


# --- Enums ---
class CategoryId(str, Enum):
    TECHNOLOGY = "technology"
    MANAGEMENT = "management"
    STRATEGY = "strategy"

    @property
    def label(self) -> str:
        return QuizConfig.CATEGORY_LABELS[self.value]


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class QuestionStatus(str, Enum):
    CORRECT = "correct"
    INCORRECT = "incorrect"
    UNANSWERED = "unanswered"


class QuizMode(str, Enum):
    NORMAL = "normal"
    WEAK = "weak"
    SINGLE = "single"


class ScoreBand(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    NEEDS_WORK = "needsWork"

    @classmethod
    def for_percentage(cls, percentage: int) -> "ScoreBand":
        if percentage >= QuizConfig.EXCELLENT_SCORE:
            return cls.EXCELLENT
        if percentage >= QuizConfig.GOOD_SCORE:
            return cls.GOOD
        return cls.NEEDS_WORK


class CamelModel(BaseModel):
    """Stored and served documents use the camelCase keys of the JSON files."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


# --- Question Catalog ---
class PublicQuestion(CamelModel):
    """A question as served to the client: answer and explanation stripped."""

    id: str
    category: CategoryId
    category_name: str = ""
    subcategory: str = ""
    prompt: str = Field(alias="question")
    choices: list[str] = Field(
        min_length=QuizConfig.CHOICE_COUNT, max_length=QuizConfig.CHOICE_COUNT
    )
    related_terms: list[str] = Field(default_factory=list)
    difficulty: Difficulty | None = None


class Question(PublicQuestion):
    correct_answer: int = Field(ge=0, le=QuizConfig.CHOICE_COUNT - 1)
    explanation: str = ""

    def public(self) -> PublicQuestion:
        return PublicQuestion.model_validate(
            self.model_dump(include=set(PublicQuestion.model_fields))
        )


class CategoryInfo(CamelModel):
    id: CategoryId
    name: str
    subcategories: list[str] = Field(default_factory=list)


class GlossaryTerm(CamelModel):
    id: str
    term: str
    full_name: str | None = None
    meaning: str = ""
    category: CategoryId | None = None
    subcategory: str = ""
    description: str = ""
    examples: list[str] | None = None
    related_terms: list[str] | None = None
    tips: str | None = None


# --- Progress Aggregate ---
class QuestionStat(CamelModel):
    attempts: int = Field(default=0, ge=0)
    correct_count: int = Field(default=0, ge=0)
    last_attempt_at: datetime | None = None

    @model_validator(mode="after")
    def _correct_within_attempts(self) -> "QuestionStat":
        if self.correct_count > self.attempts:
            raise ValueError("correctCount cannot exceed attempts")
        return self

    @property
    def correct_rate(self) -> float:
        return self.correct_count / self.attempts if self.attempts else 0.0


class CategoryStat(CamelModel):
    total_attempts: int = Field(default=0, ge=0)
    correct_count: int = Field(default=0, ge=0)
    last_studied_at: datetime | None = None

    @model_validator(mode="after")
    def _correct_within_attempts(self) -> "CategoryStat":
        if self.correct_count > self.total_attempts:
            raise ValueError("correctCount cannot exceed totalAttempts")
        return self


class UserRecord(CamelModel):
    id: str = QuizConfig.DEFAULT_USER_ID
    created_at: datetime
    last_accessed_at: datetime


class HistoryEntry(CamelModel):
    question_id: str
    selected_answer: int
    is_correct: bool
    answered_at: datetime


class Progress(CamelModel):
    """
    The single persisted document: user record, answer history, per-question
    and per-category statistics, and the weak question set.
    """

    user: UserRecord
    history: list[HistoryEntry] = Field(default_factory=list)
    question_stats: dict[str, QuestionStat] = Field(default_factory=dict)
    category_stats: dict[CategoryId, CategoryStat] = Field(default_factory=dict)
    weak_questions: list[str] = Field(default_factory=list)

    @classmethod
    def fresh(cls, now: datetime) -> "Progress":
        return cls(
            user=UserRecord(created_at=now, last_accessed_at=now),
            category_stats={category: CategoryStat() for category in CategoryId},
        )


# --- Answers ---
TIMEOUT_SENTINEL = -1


@dataclass(frozen=True)
class Answered:
    index: int

    def __post_init__(self) -> None:
        if not 0 <= self.index < QuizConfig.CHOICE_COUNT:
            raise ValidationFailure(
                f"選択肢の番号が不正です: {self.index}", {"index": self.index}
            )


@dataclass(frozen=True)
class TimedOut:
    """No answer was given before the question timer expired."""


SubmittedAnswer = Answered | TimedOut


def answer_from_wire(value: int) -> SubmittedAnswer:
    if value == TIMEOUT_SENTINEL:
        return TimedOut()
    return Answered(value)


def answer_to_wire(answer: SubmittedAnswer) -> int:
    if isinstance(answer, Answered):
        return answer.index
    return TIMEOUT_SENTINEL


# --- API Views ---
class AnswerResult(CamelModel):
    is_correct: bool
    correct_answer: int
    explanation: str
    stats: QuestionStat
    related_terms: list[GlossaryTerm] = Field(default_factory=list)


class ProgressSummary(CamelModel):
    user: UserRecord
    category_stats: dict[CategoryId, CategoryStat]
    total_attempts: int
    total_correct: int
    overall_correct_rate: float
    weak_questions_count: int


class HistoryQuestionInfo(CamelModel):
    id: str
    category: CategoryId
    category_name: str
    subcategory: str
    question_text: str


class HistoryItem(HistoryEntry):
    question: HistoryQuestionInfo | None = None


class QuestionListItem(CamelModel):
    id: str
    category: CategoryId
    category_name: str = ""
    subcategory: str = ""
    prompt: str = Field(alias="question")
    difficulty: Difficulty | None = None
    status: QuestionStatus
    attempts: int = 0
    correct_count: int = 0


# --- Quiz Session (client side, never persisted) ---
class QuizOptions(BaseModel):
    count: int = QuizConfig.DEFAULT_QUESTION_COUNT  # 0 = all questions
    shuffle: bool = False
    timer: int | None = None  # seconds per question


class ShuffledQuestion(BaseModel):
    """
    A question as presented. `shuffle_map[k]` is the original index of the
    choice shown at position k; None means the original order.
    """

    question: PublicQuestion
    shuffle_map: list[int] | None = None

    @property
    def id(self) -> str:
        return self.question.id

    @property
    def choices(self) -> list[str]:
        if self.shuffle_map is None:
            return list(self.question.choices)
        return [self.question.choices[i] for i in self.shuffle_map]

    def to_original(self, display_index: int) -> int:
        if self.shuffle_map is None:
            return display_index
        return self.shuffle_map[display_index]

    def to_display(self, original_index: int) -> int:
        if self.shuffle_map is None:
            return original_index
        return self.shuffle_map.index(original_index)


class QuizSessionState(BaseModel):
    """
    Encapsulates the state of a running quiz.
    """

    current_q_index: int = 0
    correct: int = 0
    total: int = 0
    selected_answer: int | None = None  # display coordinates
    last_result: AnswerResult | None = None
    timed_out: bool = False
    is_complete: bool = False
    countdown: Countdown = Field(default_factory=Countdown)
    session_id: str = Field(default_factory=lambda: uuid.uuid4().hex[:8])

    @property
    def percentage(self) -> int:
        if self.total == 0:
            return 0
        # Half-up rounding on integers
        return (self.correct * 200 + self.total) // (2 * self.total)

    @property
    def band(self) -> ScoreBand:
        return ScoreBand.for_percentage(self.percentage)

    def record_verdict(self, result: AnswerResult, timed_out: bool = False) -> None:
        self.last_result = result
        self.timed_out = timed_out
        self.total += 1
        if result.is_correct and not timed_out:
            self.correct += 1

    def next_question(self) -> None:
        self.current_q_index += 1
        self.selected_answer = None
        self.last_result = None
        self.timed_out = False

    def reset(self) -> None:
        self.current_q_index = 0
        self.correct = 0
        self.total = 0
        self.selected_answer = None
        self.last_result = None
        self.timed_out = False
        self.is_complete = False
        self.countdown.cancel()
