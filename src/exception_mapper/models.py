"""Value objects shared by the translator and the HTTP integration."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from .lookup import ConfigLookup

REASON_HEADER = "reason"

INCLUDE_CLASS_NAME_KEY = "jaxrs-ext.includeClassName"
INCLUDE_STACKTRACE_KEY = "jaxrs-ext.includeStacktrace"
STACKTRACE_LOG_LEVEL_KEY = "jaxrs-ext.stacktraceLogLevel"

DEFAULT_LOG_LEVEL = "FINEST"

STATUS_CODE_KEY_SUFFIX = "/mp-jaxrs-ext/statuscode"

JSON_MEDIA_TYPE = "application/json"
XML_MEDIA_TYPE = "application/xml"
TEXT_MEDIA_TYPE = "text/plain"
MIN_STATUS_CODE = 100
MAX_STATUS_CODE = 599


@dataclass(frozen=True, slots=True)
class ResponseDescriptor:
    """Framework-neutral description of an HTTP error response.

    ``media_type`` is set only on responses an error carried itself; such a
    body is sent as-is. Translator bodies leave it unset and are rendered for
    the negotiated media type.
    """

    status_code: int
    headers: tuple[tuple[str, str], ...] = ()
    body: str | None = None
    media_type: str | None = None

    def header_values(self, name: str) -> list[str]:
        """Return every value sent for ``name``, in order."""

        wanted = name.lower()
        return [value for key, value in self.headers if key.lower() == wanted]

    @property
    def reasons(self) -> list[str]:
        return self.header_values(REASON_HEADER)


@dataclass(frozen=True, slots=True)
class TranslatorConfig:
    """Flags controlling how translated responses are rendered and logged."""

    include_class_name: bool = False
    include_stacktrace: bool = False
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_lookup(
        cls,
        lookup: "ConfigLookup",
        defaults: "TranslatorConfig | None" = None,
    ) -> "TranslatorConfig":
        """Read the ``jaxrs-ext.*`` keys, falling back to ``defaults``."""

        base = defaults or cls()
        return cls(
            include_class_name=lookup.get_bool(INCLUDE_CLASS_NAME_KEY, base.include_class_name),
            include_stacktrace=lookup.get_bool(INCLUDE_STACKTRACE_KEY, base.include_stacktrace),
            log_level=lookup.get_str(STACKTRACE_LOG_LEVEL_KEY, base.log_level).strip().upper(),
        )


@dataclass(frozen=True, slots=True)
class Generic:
    """An error with no HTTP representation of its own."""

    error: BaseException


@dataclass(frozen=True, slots=True)
class FrameworkNative:
    """An error that already knows the response it should produce."""

    error: BaseException
    response: ResponseDescriptor = field(compare=False)


ErrorVariant = Union[Generic, FrameworkNative]


__all__ = [
    "DEFAULT_LOG_LEVEL",
    "ErrorVariant",
    "FrameworkNative",
    "Generic",
    "INCLUDE_CLASS_NAME_KEY",
    "INCLUDE_STACKTRACE_KEY",
    "JSON_MEDIA_TYPE",
    "MAX_STATUS_CODE",
    "MIN_STATUS_CODE",
    "REASON_HEADER",
    "ResponseDescriptor",
    "STACKTRACE_LOG_LEVEL_KEY",
    "STATUS_CODE_KEY_SUFFIX",
    "TEXT_MEDIA_TYPE",
    "TranslatorConfig",
    "XML_MEDIA_TYPE",
]
