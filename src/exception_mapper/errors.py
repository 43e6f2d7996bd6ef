"""Application-level exception handling helpers."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Mapping
from xml.sax.saxutils import escape

from fastapi import FastAPI
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.requests import Request
from starlette.responses import Response

from .core.logging import REQUEST_ID_HEADER, bind_request_id, reset_request_id
from .models import (
    JSON_MEDIA_TYPE,
    REASON_HEADER,
    TEXT_MEDIA_TYPE,
    XML_MEDIA_TYPE,
    ErrorVariant,
    FrameworkNative,
    ResponseDescriptor,
)
from .translator import ExceptionTranslator, classify

logger = logging.getLogger(__name__)

SUPPORTED_MEDIA_TYPES: tuple[str, ...] = (JSON_MEDIA_TYPE, XML_MEDIA_TYPE, TEXT_MEDIA_TYPE)


class WebApplicationError(Exception):
    """An error raised with the exact response it should produce."""

    def __init__(
        self,
        status_code: int,
        *,
        reason: str | None = None,
        headers: Mapping[str, str] | None = None,
        body: str | None = None,
        media_type: str = TEXT_MEDIA_TYPE,
    ) -> None:
        super().__init__(reason or "")
        response_headers: list[tuple[str, str]] = list((headers or {}).items())
        if reason:
            response_headers.append((REASON_HEADER, reason))
        self.response = ResponseDescriptor(status_code, tuple(response_headers), body, media_type)

    @property
    def status_code(self) -> int:
        return self.response.status_code


@classify.register(WebApplicationError)
def _classify_web_application_error(error: WebApplicationError) -> ErrorVariant:
    return FrameworkNative(error, error.response)


def _parse_accept(accept: str) -> list[tuple[str, float]]:
    ranges: list[tuple[str, float]] = []
    for item in accept.split(","):
        parts = [part.strip() for part in item.split(";")]
        media_range = parts[0].lower()
        if not media_range:
            continue
        quality = 1.0
        for param in parts[1:]:
            name, _, value = param.partition("=")
            if name.strip().lower() != "q":
                continue
            try:
                quality = float(value)
            except ValueError:
                quality = 0.0
        ranges.append((media_range, quality))
    # stable sort keeps header order for equal q-values
    return sorted(ranges, key=lambda item: item[1], reverse=True)


def _matches(media_range: str, media_type: str) -> bool:
    if media_range in {"*", "*/*"}:
        return True
    range_type, _, range_subtype = media_range.partition("/")
    main_type, _, subtype = media_type.partition("/")
    return range_type == main_type and range_subtype in {"*", subtype}


def negotiate_media_type(accept: str | None) -> str:
    """Pick the response media type from an ``Accept`` header."""

    if not accept or not accept.strip():
        return JSON_MEDIA_TYPE
    for media_range, quality in _parse_accept(accept):
        if quality <= 0:
            continue
        for media_type in SUPPORTED_MEDIA_TYPES:
            if _matches(media_range, media_type):
                return media_type
    return JSON_MEDIA_TYPE


def to_response(descriptor: ResponseDescriptor, media_type: str = JSON_MEDIA_TYPE) -> Response:
    """Build a Starlette response; repeated header names are preserved.

    Bodies that came with their own media type are sent unchanged; stack
    trace bodies are rendered for ``media_type``.
    """

    status_code = descriptor.status_code
    if descriptor.body is None:
        response = Response(status_code=status_code)
    elif descriptor.media_type is not None:
        response = Response(content=descriptor.body, status_code=status_code, media_type=descriptor.media_type)
    elif media_type == JSON_MEDIA_TYPE:
        response = JSONResponse(content=descriptor.body, status_code=status_code)
    elif media_type == XML_MEDIA_TYPE:
        response = Response(
            content=f"<stacktrace>{escape(descriptor.body)}</stacktrace>",
            status_code=status_code,
            media_type=XML_MEDIA_TYPE,
        )
    else:
        response = PlainTextResponse(content=descriptor.body, status_code=status_code)
    for name, value in descriptor.headers:
        response.headers.append(name, value)
    return response


def register_exception_handlers(app: FastAPI, translator: ExceptionTranslator) -> None:
    """Route every otherwise unhandled exception through ``translator``.

    Each translated response carries an ``X-Request-ID`` (the caller's, or a
    fresh one) that is also bound to the log record the translator emits.
    ``WebApplicationError`` is registered on its own so Starlette answers it
    from the exception middleware instead of the server-error fallback.
    """

    async def _handle_unhandled_exception(request: Request, exc: Exception) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        token = bind_request_id(request_id)
        try:
            descriptor = translator.translate(exc)
        finally:
            reset_request_id(token)
        response = to_response(descriptor, negotiate_media_type(request.headers.get("accept")))
        response.headers.setdefault(REQUEST_ID_HEADER, request_id)
        return response

    app.add_exception_handler(WebApplicationError, _handle_unhandled_exception)
    app.add_exception_handler(Exception, _handle_unhandled_exception)
    app.state.exception_translator = translator
    logger.debug("Exception translator registered", extra={"lookup": type(translator.lookup).__name__})


__all__ = [
    "JSON_MEDIA_TYPE",
    "SUPPORTED_MEDIA_TYPES",
    "TEXT_MEDIA_TYPE",
    "WebApplicationError",
    "XML_MEDIA_TYPE",
    "negotiate_media_type",
    "register_exception_handlers",
    "to_response",
]
