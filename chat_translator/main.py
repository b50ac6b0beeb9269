"""FastAPI application entrypoint.

All routes prefixed /v1. Auto-generated OpenAPI docs at /docs.

The language provider selected by settings is wrapped in a
LanguageServiceClient, handed to a PipelineController, and stored on
app.state for injection via Depends(). The message store lives only as
long as the process.
"""

from contextlib import asynccontextmanager
import logging
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from chat_translator.api.v1.messages import router as messages_router
from chat_translator.core.config import Settings, settings
from chat_translator.core.exceptions import ChatTranslatorError
from chat_translator.services.language.base import LanguageProvider
from chat_translator.services.language.client import LanguageServiceClient
from chat_translator.services.language.gemini import GeminiLanguageProvider
from chat_translator.services.language.remote import RemoteLanguageProvider
from chat_translator.services.pipeline.controller import PipelineController


def _configure_logging() -> None:
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=True,
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


_configure_logging()

logger = structlog.get_logger(__name__)


def build_language_provider(config: Settings) -> LanguageProvider:
    """Instantiate the provider named by config.language_provider."""
    if config.language_provider == "remote":
        return RemoteLanguageProvider(
            base_url=config.language_service_url,
            timeout_seconds=config.language_service_timeout_seconds,
        )
    return GeminiLanguageProvider(
        api_key=config.gemini_api_key,
        model=config.gemini_model,
    )


def build_controller(
    config: Settings, provider: LanguageProvider | None = None
) -> PipelineController:
    client = LanguageServiceClient(provider or build_language_provider(config))
    return PipelineController(
        client=client,
        target_language=config.default_target_language,
        summary_language=config.summary_language,
        summary_min_chars=config.summary_min_chars,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application startup and shutdown lifecycle.

    A controller already placed on app.state (tests) is left in place.
    """
    # --- Startup ---
    logger.info(
        "app_startup",
        env=settings.app_env,
        language_provider=settings.language_provider,
    )
    if getattr(app.state, "controller", None) is None:
        app.state.controller = build_controller(settings)
    logger.info("app_pipeline_ready")
    yield

    # --- Shutdown ---
    logger.info("app_shutdown")
    await app.state.controller.aclose()


def create_app(controller: PipelineController | None = None) -> FastAPI:
    app = FastAPI(
        title="Chat Translator API",
        description="Message language detection, translation and summarization.",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.controller = controller

    # CORS: permissive for development only
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if not settings.is_production else [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ChatTranslatorError)
    async def chat_translator_error_handler(
        request: Request, exc: ChatTranslatorError
    ) -> JSONResponse:
        """Structured error response for all chat translator exceptions."""
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.to_dict(),
        )

    app.include_router(messages_router, prefix="/v1")
    return app


app = create_app()
