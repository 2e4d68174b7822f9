from fastapi import APIRouter, Depends

from fe_quiz.api.dependencies import get_catalog_service
from fe_quiz.quiz.application.catalog import CatalogService
from fe_quiz.quiz.domain.models import CategoryId, GlossaryTerm

router = APIRouter(prefix="/api/glossary", tags=["glossary"])


@router.get("", response_model=list[GlossaryTerm])
def get_glossary(
    category: CategoryId | None = None,
    search: str | None = None,
    catalog: CatalogService = Depends(get_catalog_service),
):
    return catalog.get_glossary(category, search)


@router.get("/{term_id}", response_model=GlossaryTerm)
def get_term(term_id: str, catalog: CatalogService = Depends(get_catalog_service)):
    return catalog.get_term(term_id)
