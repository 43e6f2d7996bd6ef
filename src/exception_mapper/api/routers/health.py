"""Readiness endpoint reporting how the exception translator is configured."""

from __future__ import annotations

from fastapi import APIRouter, Request

from ...schemas.system import HealthCheckResponse
from ...translator import ExceptionTranslator

router = APIRouter(tags=["system"])


@router.get("/healthz", response_model=HealthCheckResponse, summary="Translator readiness")
async def read_health(request: Request) -> HealthCheckResponse:
    """Report whether a translator is installed and which status codes it maps.

    Disabled mappings (negative codes) are listed too, since they change how
    the matching errors are answered.
    """
    translator: ExceptionTranslator | None = getattr(request.app.state, "exception_translator", None)
    if translator is None:
        return HealthCheckResponse(status="unavailable")
    config = translator.config
    return HealthCheckResponse(
        status="ok",
        status_codes=translator.configured_status_codes(),
        include_class_name=config.include_class_name,
        include_stacktrace=config.include_stacktrace,
        stacktrace_log_level=config.log_level,
    )
