"""Common system-level response models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class RootResponse(BaseModel):
    """Metadata payload returned by the root endpoint."""

    name: str = Field(description="Human-friendly service name")
    environment: str = Field(description="Deployment environment identifier")
    version: str = Field(description="Semantic version of the service")


class HealthCheckResponse(BaseModel):
    """Translator readiness and the mappings it will apply."""

    status: str = Field(default="ok", description="'ok' once an exception translator is installed")
    status_codes: dict[str, int] = Field(
        default_factory=dict,
        description="Configured status code per exception type; negative values disable the mapping",
    )
    include_class_name: bool = Field(default=False, description="Whether reasons carry the exception class")
    include_stacktrace: bool = Field(default=False, description="Whether error bodies carry a stack trace")
    stacktrace_log_level: str | None = Field(default=None, description="Severity name used when logging errors")
