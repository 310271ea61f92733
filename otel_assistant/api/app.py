"""
Application FastAPI exposant le service RAG.

Toutes les réponses utilisent l'enveloppe `{"success": true, "data": ...}`
ou `{"success": false, "error": ..., "message": ...}` attendue par le client.
"""

import sys
import time
from typing import Optional
from datetime import datetime, timezone

import uvicorn
from fastapi import APIRouter, Depends, FastAPI, Query, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from otel_assistant.api.schemas import (
    ChatRequest,
    IngestRequest,
    ProviderTestRequest,
    SearchRequest,
)
from otel_assistant.api.security import APIKeyChecker, RateLimiter, RateLimitExceeded
from otel_assistant.config import Settings, get_settings
from otel_assistant.container import Services, build_services
from otel_assistant.exceptions import AssistantError, ProviderNotAvailableError
from otel_assistant.utils.logger import get_logger, setup_logging


logger = get_logger("api")


def success(data) -> dict:
    return {"success": True, "data": data}


def error_response(status_code: int, error: str, exc: Optional[Exception] = None) -> JSONResponse:
    content = {"success": False, "error": error}
    if exc is not None:
        content["message"] = str(exc)
    return JSONResponse(status_code=status_code, content=content)


def get_services(request: Request) -> Services:
    return request.app.state.services


def create_app(
    settings: Optional[Settings] = None,
    services: Optional[Services] = None,
) -> FastAPI:
    """
    Construit l'application FastAPI.

    Args:
        settings: Configuration à utiliser (défaut: config globale)
        services: Services déjà construits (défaut: build_services)

    Returns:
        FastAPI: Application prête à être servie

    Raises:
        ConfigurationError: Si aucun fournisseur LLM n'est configuré
    """
    settings = settings or (services.settings if services else get_settings())
    services = services or build_services(settings)

    app = FastAPI(title="OpenTelemetry Assistant API", version="1.0.0")
    app.state.services = services

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000
        logger.info(
            f"{request.method} {request.url.path} -> {response.status_code} "
            f"({duration_ms:.0f}ms)"
        )
        return response

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        details = [
            {
                "field": ".".join(str(part) for part in error["loc"][1:]),
                "message": error["msg"],
                "value": error.get("input"),
            }
            for error in exc.errors()
        ]
        logger.warning(f"Erreurs de validation: {details}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=jsonable_encoder(
                {"success": False, "error": "Validation failed", "details": details}
            ),
        )

    @app.exception_handler(RateLimitExceeded)
    async def handle_rate_limit(request: Request, exc: RateLimitExceeded) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            content={"success": False, "error": str(exc), "retryAfter": exc.retry_after},
            headers={"Retry-After": str(exc.retry_after)},
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        error = "API endpoint not found" if exc.status_code == 404 else exc.detail
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "error": error},
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.error(f"Erreur non gérée: {str(exc)}", exc_info=True)
        error = str(exc) if settings.debug else "Internal server error"
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "error": error},
        )

    guards = [
        Depends(RateLimiter(settings.rate_limit_max_requests, settings.rate_limit_window_seconds)),
        Depends(APIKeyChecker(settings.api_key)),
    ]

    app.include_router(build_chat_router(), prefix="/api/chat", dependencies=guards)
    app.include_router(build_admin_router(), prefix="/api/admin", dependencies=guards)

    @app.get("/api/health", dependencies=guards)
    def health(services: Services = Depends(get_services)) -> dict:
        return {
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "environment": settings.environment,
            "availableProviders": services.providers.get_available_providers(),
        }

    logger.info("Application API initialisée")
    return app


def build_chat_router() -> APIRouter:
    router = APIRouter()

    @router.post("")
    def chat(payload: ChatRequest, services: Services = Depends(get_services)):
        logger.info(
            f"Requête de chat reçue: '{payload.message[:80]}' "
            f"(fournisseur: {payload.provider.value if payload.provider else 'défaut'})"
        )
        try:
            result = services.rag.ask_question(
                payload.message,
                provider=payload.provider,
                max_context_docs=payload.max_context_docs,
                include_context=payload.include_context,
            )
        except ProviderNotAvailableError as e:
            return error_response(status.HTTP_400_BAD_REQUEST, "Provider not available", e)
        except AssistantError as e:
            logger.error(f"Erreur sur /api/chat: {str(e)}")
            return error_response(
                status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to generate response", e
            )

        return success(result)

    @router.get("/context")
    def context(
        question: Optional[str] = Query(default=None),
        max_docs: int = Query(default=5, ge=1, le=10, alias="maxDocs"),
        services: Services = Depends(get_services),
    ):
        if not question or not question.strip():
            return error_response(status.HTTP_400_BAD_REQUEST, "Question parameter is required")

        try:
            result = services.rag.get_context_for_question(question, max_docs)
        except AssistantError as e:
            logger.error(f"Erreur sur /api/chat/context: {str(e)}")
            return error_response(
                status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to retrieve context", e
            )

        return success(result)

    @router.get("/providers")
    def providers(services: Services = Depends(get_services)) -> dict:
        return success({
            "providers": services.providers.get_available_providers(),
            "default": services.providers.default_provider.value,
        })

    @router.post("/test-provider")
    def test_provider(payload: ProviderTestRequest, services: Services = Depends(get_services)) -> dict:
        result = services.providers.test_provider(payload.provider)
        return success(result.to_dict())

    return router


def build_admin_router() -> APIRouter:
    router = APIRouter()

    @router.post("/ingest")
    def ingest(payload: IngestRequest, services: Services = Depends(get_services)):
        if not payload.content and not payload.url:
            return error_response(
                status.HTTP_400_BAD_REQUEST, "Either content or url must be provided"
            )

        if not payload.content:
            return error_response(
                status.HTTP_400_BAD_REQUEST,
                "URL ingestion not implemented. Please provide content directly.",
            )

        try:
            chunks_added = services.ingestion.ingest_text(
                content=payload.content,
                title=payload.title,
                source=payload.source,
                url=str(payload.url) if payload.url else None,
                metadata=payload.metadata,
            )
        except AssistantError as e:
            logger.error(f"Erreur lors de l'ingestion: {str(e)}")
            return error_response(
                status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to ingest document", e
            )

        return success({
            "title": payload.title,
            "source": payload.source,
            "chunksAdded": chunks_added,
            "message": "Document successfully ingested",
        })

    @router.get("/vector-store/info")
    def vector_store_info(services: Services = Depends(get_services)) -> dict:
        return success(services.vectorstore.get_collection_info())

    @router.delete("/vector-store")
    def delete_vector_store(services: Services = Depends(get_services)):
        try:
            services.vectorstore.delete_collection()
        except AssistantError as e:
            return error_response(
                status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to delete vector store", e
            )

        logger.info("Collection de la base vectorielle supprimée")
        return success({"message": "Vector store collection deleted successfully"})

    @router.post("/search")
    def search(payload: SearchRequest, services: Services = Depends(get_services)):
        try:
            results = services.vectorstore.similarity_search_with_score(
                payload.query, k=payload.max_results
            )
        except AssistantError as e:
            return error_response(
                status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to search vector store", e
            )

        return success({
            "query": payload.query,
            "results": [
                {"content": doc.page_content, "metadata": doc.metadata, "score": score}
                for doc, score in results
            ],
        })

    return router


def run() -> None:
    """Point d'entrée `otel-assistant-api`."""
    settings = get_settings()
    setup_logging()

    try:
        app = create_app(settings)
    except AssistantError as e:
        logger.critical(f"Démarrage du serveur impossible: {str(e)}")
        sys.exit(1)

    logger.info(
        f"Serveur démarré sur {settings.host}:{settings.port} "
        f"(environnement: {settings.environment})"
    )
    uvicorn.run(app, host=settings.host, port=settings.port)
