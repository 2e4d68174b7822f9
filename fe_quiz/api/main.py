"""
FastAPI application serving the question catalog, the glossary and the
learner's progress document.
"""
import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from fe_quiz.api.middleware import log_requests
from fe_quiz.api.routers import glossary, progress, questions
from fe_quiz.config import QuizConfig, Settings, get_settings
from fe_quiz.exceptions import NotFoundError, QuizError, StorageError, ValidationFailure
from fe_quiz.quiz.adapters.json_catalog import JsonGlossary, JsonQuestionBank
from fe_quiz.quiz.adapters.json_repository import JsonProgressRepository
from fe_quiz.quiz.application.catalog import CatalogService
from fe_quiz.quiz.application.service import ProgressService
from fe_quiz.shared.observability import configure_observability
from fe_quiz.shared.telemetry import Telemetry

telemetry = Telemetry("API")


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def build_services(settings: Settings) -> tuple[ProgressService, CatalogService]:
    """Wires the JSON-file adapters into the application services."""
    bank = JsonQuestionBank(settings.questions_file)
    terms = JsonGlossary(settings.glossary_file)
    progress_service = ProgressService(
        JsonProgressRepository(settings.progress_file), bank, terms
    )
    return progress_service, CatalogService(bank, terms, progress_service)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        telemetry.log_warning("Not found", path=request.url.path, context=exc.context)
        return _error(404, exc.message)

    @app.exception_handler(ValidationFailure)
    async def validation_failure_handler(request: Request, exc: ValidationFailure):
        telemetry.log_warning(
            "Rejected request", path=request.url.path, context=exc.context
        )
        return _error(400, exc.message)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        telemetry.log_warning(
            "Invalid request", path=request.url.path, errors=len(exc.errors())
        )
        return _error(400, "リクエストが不正です")

    @app.exception_handler(StorageError)
    async def storage_handler(request: Request, exc: StorageError):
        telemetry.log_error(
            "Storage failure", exc, path=request.url.path, context=exc.context
        )
        return _error(500, exc.message)

    @app.exception_handler(QuizError)
    async def quiz_error_handler(request: Request, exc: QuizError):
        telemetry.log_error("Request failed", exc, path=request.url.path)
        return _error(500, exc.message)

    @app.exception_handler(Exception)
    async def unhandled_handler(request: Request, exc: Exception):
        telemetry.log_error("Unhandled error", exc, path=request.url.path)
        return _error(500, "サーバーエラーが発生しました")


def create_app(
    progress_service: ProgressService | None = None,
    catalog: CatalogService | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    if progress_service is None or catalog is None:
        progress_service, catalog = build_services(settings)

    app = FastAPI(title=QuizConfig.APP_TITLE)
    app.state.progress_service = progress_service
    app.state.catalog_service = catalog

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.middleware("http")(log_requests)
    register_exception_handlers(app)

    app.include_router(questions.router)
    app.include_router(progress.router)
    app.include_router(glossary.router)

    @app.get("/api/health", tags=["health"])
    def health():
        return {"status": "ok"}

    return app


def run() -> None:
    """Console entry point: serves the API with uvicorn."""
    settings = get_settings()
    configure_observability("fe-quiz-api", settings.metrics_port)
    telemetry.log_info("Starting API", host=settings.host, port=settings.port)
    uvicorn.run(create_app(settings=settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
