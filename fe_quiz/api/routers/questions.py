from fastapi import APIRouter, Depends, Query

from fe_quiz.api.dependencies import get_catalog_service
from fe_quiz.config import QuizConfig
from fe_quiz.quiz.application.catalog import CatalogService
from fe_quiz.quiz.domain.models import (
    CategoryId,
    CategoryInfo,
    Difficulty,
    PublicQuestion,
    QuestionListItem,
)

router = APIRouter(prefix="/api", tags=["questions"])


@router.get("/categories", response_model=list[CategoryInfo])
def get_categories(catalog: CatalogService = Depends(get_catalog_service)):
    return catalog.get_categories()


@router.get(
    "/questions",
    response_model=list[PublicQuestion],
    response_model_exclude_none=True,
)
def get_questions(
    category: CategoryId | None = None,
    subcategory: str | None = None,
    difficulty: Difficulty | None = None,
    catalog: CatalogService = Depends(get_catalog_service),
):
    return catalog.get_questions(category, subcategory, difficulty)


# Fixed paths must be registered before /questions/{question_id}.
@router.get("/questions/list", response_model=list[QuestionListItem])
def list_questions(
    category: CategoryId | None = None,
    difficulty: Difficulty | None = None,
    search: str | None = None,
    catalog: CatalogService = Depends(get_catalog_service),
):
    return catalog.list_questions(category, difficulty, search)


@router.get(
    "/questions/random",
    response_model=list[PublicQuestion],
    response_model_exclude_none=True,
)
def get_random_questions(
    category: CategoryId | None = None,
    count: int = Query(QuizConfig.DEFAULT_QUESTION_COUNT, ge=0),
    catalog: CatalogService = Depends(get_catalog_service),
):
    return catalog.get_random_questions(category, count)


@router.get(
    "/questions/weak",
    response_model=list[PublicQuestion],
    response_model_exclude_none=True,
)
def get_weak_questions(catalog: CatalogService = Depends(get_catalog_service)):
    return catalog.get_weak_questions()


@router.get(
    "/questions/{question_id}",
    response_model=PublicQuestion,
    response_model_exclude_none=True,
)
def get_question(question_id: str, catalog: CatalogService = Depends(get_catalog_service)):
    return catalog.get_question(question_id)
