"""Translate unhandled exceptions into HTTP response descriptors.

Status codes come from configuration keys of the form
``<module.QualName>/mp-jaxrs-ext/statuscode``. When an exception has no
entry its cause chain is searched for the nearest mapped cause; a negative
value switches a mapping off. Anything left unmapped becomes a 500 whose
``reason`` headers carry the messages found along the chain.
"""

from __future__ import annotations

import json
import logging
import traceback
from collections.abc import Iterator
from functools import singledispatch

from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.logging import resolve_level
from .lookup import ConfigLookup
from .models import (
    JSON_MEDIA_TYPE,
    MAX_STATUS_CODE,
    MIN_STATUS_CODE,
    REASON_HEADER,
    STATUS_CODE_KEY_SUFFIX,
    TEXT_MEDIA_TYPE,
    ErrorVariant,
    FrameworkNative,
    Generic,
    ResponseDescriptor,
    TranslatorConfig,
)

logger = logging.getLogger(__name__)

MAX_CAUSE_DEPTH = 100

INTERNAL_SERVER_ERROR = 500

NULL_ERROR_MESSAGE = "Runtime Exception that is null"
UNMAPPED_MESSAGE = "Unmapped Runtime Exception"
UNKNOWN_REASON = "Unknown exception"


def type_identifier(error: BaseException) -> str:
    """Return the dotted class name used in configuration keys."""

    cls = type(error)
    if cls.__module__ == "builtins":
        return cls.__qualname__
    return f"{cls.__module__}.{cls.__qualname__}"


def status_code_key(error: BaseException) -> str:
    return type_identifier(error) + STATUS_CODE_KEY_SUFFIX


def error_message(error: BaseException) -> str:
    try:
        return str(error)
    except Exception:  # pragma: no cover - broken __str__
        logger.warning("Could not render message of %s", type_identifier(error))
        return ""


def cause_of(error: BaseException) -> BaseException | None:
    """Return the explicit cause, else the implicit context unless suppressed."""

    if error.__cause__ is not None:
        return error.__cause__
    if error.__suppress_context__:
        return None
    return error.__context__


def iter_cause_chain(error: BaseException) -> Iterator[BaseException]:
    """Yield ``error`` and its causes outer to inner.

    Stops at the first repeated exception or after ``MAX_CAUSE_DEPTH`` levels.
    """

    seen: set[int] = set()
    current: BaseException | None = error
    while current is not None and id(current) not in seen and len(seen) < MAX_CAUSE_DEPTH:
        seen.add(id(current))
        yield current
        current = cause_of(current)


@singledispatch
def classify(error: BaseException) -> ErrorVariant:
    """Sort an error into ``Generic`` or ``FrameworkNative``.

    Register further overloads for exception types that carry their own
    HTTP representation.
    """

    return Generic(error)


@classify.register(StarletteHTTPException)
def _classify_http_exception(error: StarletteHTTPException) -> ErrorVariant:
    headers = tuple((dict(error.headers or {})).items())
    if isinstance(error.detail, str):
        descriptor = ResponseDescriptor(error.status_code, headers, error.detail, TEXT_MEDIA_TYPE)
    else:
        body = json.dumps(error.detail, ensure_ascii=False, default=str)
        descriptor = ResponseDescriptor(error.status_code, headers, body, JSON_MEDIA_TYPE)
    return FrameworkNative(error, descriptor)


def collect_reasons(error: BaseException) -> list[str]:
    """Every non-empty message from ``error`` down to its last cause."""

    reasons: list[str] = []
    for node in iter_cause_chain(error):
        message = error_message(node)
        if message:
            reasons.append(message)
    return reasons


def render_stacktrace(error: BaseException) -> str:
    try:
        return "".join(traceback.format_exception(type(error), error, error.__traceback__))
    except Exception as exc:
        return f"Could not get stacktrace [{exc}]"


class ExceptionTranslator:
    """Turn an exception into a :class:`ResponseDescriptor`.

    The translator is stateless apart from its collaborators and never raises.
    """

    def __init__(
        self,
        lookup: ConfigLookup,
        config: TranslatorConfig | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.lookup = lookup
        self.config = config or TranslatorConfig()
        self.logger = logger or logging.getLogger(__name__)

    @property
    def level(self) -> int:
        return resolve_level(self.config.log_level)

    def translate(self, error: BaseException | None) -> ResponseDescriptor:
        if error is None:
            self.logger.log(self.level, NULL_ERROR_MESSAGE)
            return ResponseDescriptor(INTERNAL_SERVER_ERROR)

        node = error
        for node in iter_cause_chain(error):
            variant = classify(node)
            if isinstance(variant, FrameworkNative):
                return variant.response

            status = self._status_for(node)
            if status is None:
                continue
            if status < 0:
                return self._unmapped(node)
            return self._mapped(node, status)
        return self._unmapped(node)

    __call__ = translate

    def build_reason(self, error: BaseException) -> str:
        """Reason text for a mapped error.

        Uses the first non-empty message on the chain, prefixed with the
        class of the exception that supplied it when class names are on.
        """

        source = error
        text = UNKNOWN_REASON
        for node in iter_cause_chain(error):
            source = node
            message = error_message(node)
            if message:
                text = message
                break
        if self.config.include_class_name:
            return f"[{type_identifier(source)}]{text}"
        return text

    def configured_status_codes(self) -> dict[str, int]:
        """Status codes keyed by type identifier, as the lookup declares them."""

        codes: dict[str, int] = {}
        for key in sorted(self.lookup.keys()):
            if not key.endswith(STATUS_CODE_KEY_SUFFIX):
                continue
            status = self.lookup.get_int(key)
            if status is not None:
                codes[key[: -len(STATUS_CODE_KEY_SUFFIX)]] = status
        return codes

    def _status_for(self, error: BaseException) -> int | None:
        key = status_code_key(error)
        try:
            status = self.lookup.get_int(key)
        except Exception:
            logger.warning("Status code lookup failed for %s", key, exc_info=True)
            return None
        if status is None or status < 0 or MIN_STATUS_CODE <= status <= MAX_STATUS_CODE:
            return status
        logger.warning("Ignoring out-of-range status code %d for %s", status, key)
        return None

    def _body(self, error: BaseException) -> str | None:
        if not self.config.include_stacktrace:
            return None
        return render_stacktrace(error)

    def _mapped(self, error: BaseException, status: int) -> ResponseDescriptor:
        reason = self.build_reason(error)
        self.logger.log(self.level, reason, exc_info=error)
        return ResponseDescriptor(status, ((REASON_HEADER, reason),), self._body(error))

    def _unmapped(self, error: BaseException) -> ResponseDescriptor:
        self.logger.log(self.level, UNMAPPED_MESSAGE, exc_info=error)
        headers = tuple((REASON_HEADER, reason) for reason in collect_reasons(error))
        return ResponseDescriptor(INTERNAL_SERVER_ERROR, headers, self._body(error))


def translate(
    error: BaseException | None,
    config: TranslatorConfig,
    lookup: ConfigLookup,
    logger: logging.Logger | None = None,
) -> ResponseDescriptor:
    """Functional form of :meth:`ExceptionTranslator.translate`."""

    return ExceptionTranslator(lookup, config, logger).translate(error)


__all__ = [
    "ExceptionTranslator",
    "MAX_CAUSE_DEPTH",
    "NULL_ERROR_MESSAGE",
    "STATUS_CODE_KEY_SUFFIX",
    "UNKNOWN_REASON",
    "UNMAPPED_MESSAGE",
    "cause_of",
    "classify",
    "collect_reasons",
    "iter_cause_chain",
    "render_stacktrace",
    "status_code_key",
    "translate",
    "type_identifier",
]
