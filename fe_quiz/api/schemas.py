from pydantic import BaseModel, ConfigDict, Field, StrictInt
from pydantic.alias_generators import to_camel

from fe_quiz.config import QuizConfig
from fe_quiz.quiz.domain.models import TIMEOUT_SENTINEL


class AnswerRequest(BaseModel):
    """Body of POST /api/answer. selectedAnswer -1 means the timer ran out."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    question_id: str = Field(min_length=1)
    selected_answer: StrictInt = Field(
        ge=TIMEOUT_SENTINEL, le=QuizConfig.CHOICE_COUNT - 1
    )


class MessageResponse(BaseModel):
    message: str
