"""Entry point for the exception mapper host application."""

from __future__ import annotations

import uvicorn
from fastapi import FastAPI

from .api.routers import health_router
from .core.config import Settings, get_settings
from .core.logging import configure_logging
from .errors import register_exception_handlers
from .lookup import build_config_lookup
from .models import TranslatorConfig
from .schemas.system import RootResponse
from .translator import ExceptionTranslator


def build_translator(settings: Settings) -> ExceptionTranslator:
    """Create a translator whose flags and status codes come from ``settings``."""

    lookup = build_config_lookup(settings)
    config = TranslatorConfig.from_lookup(lookup, settings.translator_defaults())
    return ExceptionTranslator(lookup, config)


def create_app(
    settings: Settings | None = None,
    translator: ExceptionTranslator | None = None,
) -> FastAPI:
    """Instantiate and configure the FastAPI application."""

    settings = settings or get_settings()
    configure_logging(settings)
    translator = translator or build_translator(settings)

    application = FastAPI(
        title=settings.project_name,
        version=settings.version,
        summary="Configurable exception-to-HTTP translation.",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    application.state.settings = settings
    application.include_router(health_router)
    register_exception_handlers(application, translator)

    @application.get("/", response_model=RootResponse, summary="Service metadata")
    async def read_root() -> RootResponse:
        """Expose minimal service metadata at the root endpoint."""
        return RootResponse(
            name=settings.project_name,
            environment=settings.environment,
            version=settings.version,
        )

    return application


def run() -> None:
    """Console entry point that serves the app with uvicorn."""
    settings: Settings = get_settings()
    uvicorn.run(
        "exception_mapper.main:create_app",
        factory=True,
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.reload,
        log_config=None,
    )
