"""Centralised logging configuration and severity-name handling."""

from __future__ import annotations

import logging
import logging.config
from contextvars import ContextVar, Token
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .config import Settings

_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(request_id)s | %(message)s"

REQUEST_ID_HEADER = "X-Request-ID"

_request_id: ContextVar[str] = ContextVar("exception_mapper_request_id", default="-")

# java.util.logging severity names, accepted alongside the stdlib ones.
FINEST = 5
FINER = 7
CONFIG = 15
SEVERE = logging.ERROR

_LEVELS: dict[str, int] = {
    "ALL": 1,
    "FINEST": FINEST,
    "FINER": FINER,
    "FINE": logging.DEBUG,
    "DEBUG": logging.DEBUG,
    "CONFIG": CONFIG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "SEVERE": SEVERE,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
    "FATAL": logging.CRITICAL,
    "OFF": 100,
}

for _name, _value in (("FINEST", FINEST), ("FINER", FINER), ("CONFIG", CONFIG)):
    logging.addLevelName(_value, _name)


def is_known_level(name: str) -> bool:
    normalized = name.strip().upper()
    return normalized in _LEVELS or normalized.lstrip("-").isdigit()


def resolve_level(name: str | int | None, default: int = FINEST) -> int:
    """Translate a severity name or number into a ``logging`` level.

    Unknown names resolve to ``default`` rather than raising.
    """

    if isinstance(name, int):
        return name
    if not name:
        return default
    normalized = name.strip().upper()
    if normalized in _LEVELS:
        return _LEVELS[normalized]
    try:
        return int(normalized)
    except ValueError:
        return default


def get_request_id() -> str:
    return _request_id.get()


def bind_request_id(request_id: str) -> Token[str]:
    """Bind the id stamped on log records emitted in this context."""

    return _request_id.set(request_id)


def reset_request_id(token: Token[str]) -> None:
    _request_id.reset(token)


class RequestContextFilter(logging.Filter):
    """Attach request correlation identifiers to emitted log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = get_request_id()
        return True


def configure_logging(settings: "Settings") -> None:
    """Apply a structured logging configuration using the provided settings."""

    level = resolve_level(settings.log_level, default=logging.INFO)
    config: dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": _LOG_FORMAT,
                "datefmt": "%Y-%m-%d %H:%M:%S",
            }
        },
        "filters": {
            "request_context": {"()": RequestContextFilter},
        },
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "stream": "ext://sys.stdout",
                "formatter": "standard",
                "level": level,
                "filters": ["request_context"],
            }
        },
        "loggers": {
            "": {"handlers": ["default"], "level": level},
            "uvicorn": {"handlers": ["default"], "level": level, "propagate": False},
            "uvicorn.error": {
                "handlers": ["default"],
                "level": level,
                "propagate": False,
            },
            "uvicorn.access": {
                "handlers": ["default"],
                "level": level,
                "propagate": False,
            },
        },
    }
    logging.config.dictConfig(config)


__all__ = [
    "CONFIG",
    "FINER",
    "FINEST",
    "REQUEST_ID_HEADER",
    "RequestContextFilter",
    "SEVERE",
    "bind_request_id",
    "configure_logging",
    "get_request_id",
    "is_known_level",
    "reset_request_id",
    "resolve_level",
]
