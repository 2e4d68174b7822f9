from fastapi import Request

from fe_quiz.quiz.application.catalog import CatalogService
from fe_quiz.quiz.application.service import ProgressService


def get_progress_service(request: Request) -> ProgressService:
    return request.app.state.progress_service


def get_catalog_service(request: Request) -> CatalogService:
    return request.app.state.catalog_service
