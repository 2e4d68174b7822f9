from fastapi import APIRouter, Depends, Query

from fe_quiz.api.dependencies import get_progress_service
from fe_quiz.api.schemas import AnswerRequest, MessageResponse
from fe_quiz.config import QuizConfig
from fe_quiz.quiz.application.service import ProgressService
from fe_quiz.quiz.domain.models import (
    AnswerResult,
    HistoryItem,
    ProgressSummary,
    answer_from_wire,
)

router = APIRouter(prefix="/api", tags=["progress"])


@router.post("/answer", response_model=AnswerResult)
def submit_answer(
    body: AnswerRequest, service: ProgressService = Depends(get_progress_service)
):
    return service.submit_answer(body.question_id, answer_from_wire(body.selected_answer))


@router.get("/progress", response_model=ProgressSummary)
def get_progress(service: ProgressService = Depends(get_progress_service)):
    return service.get_progress_summary()


@router.post("/progress/reset", response_model=MessageResponse)
def reset_progress(service: ProgressService = Depends(get_progress_service)):
    return MessageResponse(message=service.reset_progress())


@router.get("/history", response_model=list[HistoryItem])
def get_history(
    limit: int = Query(
        QuizConfig.DEFAULT_HISTORY_LIMIT, ge=1, le=QuizConfig.HISTORY_LIMIT
    ),
    service: ProgressService = Depends(get_progress_service),
):
    return service.get_history(limit)
