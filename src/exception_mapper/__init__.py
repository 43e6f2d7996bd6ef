"""Configurable translation of unhandled exceptions into HTTP responses."""

from __future__ import annotations

__version__ = "0.1.0"

from .errors import WebApplicationError, register_exception_handlers  # noqa: E402
from .lookup import ConfigLookup, MappingConfigLookup, build_config_lookup  # noqa: E402
from .models import ResponseDescriptor, TranslatorConfig  # noqa: E402
from .translator import ExceptionTranslator, translate  # noqa: E402

__all__ = [
    "ConfigLookup",
    "ExceptionTranslator",
    "MappingConfigLookup",
    "ResponseDescriptor",
    "TranslatorConfig",
    "WebApplicationError",
    "__version__",
    "build_config_lookup",
    "register_exception_handlers",
    "translate",
]
