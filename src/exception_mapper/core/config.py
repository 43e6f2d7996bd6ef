"""Application settings powered by ``pydantic-settings``."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .. import __version__ as package_version
from ..models import DEFAULT_LOG_LEVEL, TranslatorConfig
from .logging import is_known_level


class Settings(BaseSettings):
    """Runtime configuration for the exception mapper and its host app."""

    model_config = SettingsConfigDict(
        env_prefix="EXCEPTION_MAPPER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    project_name: str = "Exception Mapper"
    environment: str = "development"
    version: str = package_version
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    reload: bool = False
    log_level: str = "INFO"

    include_class_name: bool = False
    include_stacktrace: bool = False
    stacktrace_log_level: str = DEFAULT_LOG_LEVEL

    properties: dict[str, str] = Field(default_factory=dict)
    properties_file: Path | None = None

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalise_log_level(cls, value: object) -> str:
        if not isinstance(value, str):
            return "INFO"
        return value.strip().upper() or "INFO"

    @field_validator("stacktrace_log_level", mode="before")
    @classmethod
    def _normalise_stacktrace_log_level(cls, value: object) -> str:
        if isinstance(value, int) and not isinstance(value, bool):
            value = str(value)
        if not isinstance(value, str):
            return DEFAULT_LOG_LEVEL
        normalized = value.strip().upper()
        if not is_known_level(normalized):
            return DEFAULT_LOG_LEVEL
        return normalized

    @field_validator("properties", mode="before")
    @classmethod
    def _stringify_properties(cls, value: Any) -> Any:
        if not isinstance(value, dict):
            return value
        return {
            str(key): str(item).lower() if isinstance(item, bool) else str(item)
            for key, item in value.items()
        }

    def translator_defaults(self) -> TranslatorConfig:
        """Translator flags as declared through environment variables."""

        return TranslatorConfig(
            include_class_name=self.include_class_name,
            include_stacktrace=self.include_stacktrace,
            log_level=self.stacktrace_log_level,
        )


@lru_cache()
def get_settings() -> Settings:
    """Return a cached ``Settings`` instance."""

    return Settings()


__all__ = ["Settings", "get_settings"]
