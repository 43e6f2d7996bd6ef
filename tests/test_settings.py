from __future__ import annotations

from pathlib import Path

from exception_mapper.core.config import Settings, get_settings
from exception_mapper.main import build_translator
from exception_mapper.models import TranslatorConfig


def test_defaults() -> None:
    settings = Settings(_env_file=None)

    assert settings.include_class_name is False
    assert settings.include_stacktrace is False
    assert settings.stacktrace_log_level == "FINEST"
    assert settings.log_level == "INFO"
    assert settings.properties == {}
    assert settings.properties_file is None
    assert settings.translator_defaults() == TranslatorConfig()


def test_environment_overrides(monkeypatch) -> None:
    monkeypatch.setenv("EXCEPTION_MAPPER_INCLUDE_CLASS_NAME", "true")
    monkeypatch.setenv("EXCEPTION_MAPPER_INCLUDE_STACKTRACE", "1")
    monkeypatch.setenv("EXCEPTION_MAPPER_STACKTRACE_LOG_LEVEL", "severe")
    monkeypatch.setenv("EXCEPTION_MAPPER_LOG_LEVEL", "debug")
    monkeypatch.setenv(
        "EXCEPTION_MAPPER_PROPERTIES",
        '{"ValueError/mp-jaxrs-ext/statuscode": "400"}',
    )

    settings = Settings(_env_file=None)

    assert settings.include_class_name is True
    assert settings.include_stacktrace is True
    assert settings.stacktrace_log_level == "SEVERE"
    assert settings.log_level == "DEBUG"
    assert settings.properties == {"ValueError/mp-jaxrs-ext/statuscode": "400"}


def test_unknown_stacktrace_level_falls_back() -> None:
    assert Settings(_env_file=None, stacktrace_log_level="LOUD").stacktrace_log_level == "FINEST"
    assert Settings(_env_file=None, stacktrace_log_level="25").stacktrace_log_level == "25"


def test_properties_values_are_stringified() -> None:
    settings = Settings(_env_file=None, properties={"jaxrs-ext.includeClassName": True, "KeyError/mp-jaxrs-ext/statuscode": 404})

    assert settings.properties == {"jaxrs-ext.includeClassName": "true", "KeyError/mp-jaxrs-ext/statuscode": "404"}


def test_properties_keys_override_environment_flags(tmp_path: Path) -> None:
    properties = tmp_path / "mapper.properties"
    properties.write_text("jaxrs-ext.includeStacktrace=true\njaxrs-ext.stacktraceLogLevel=INFO\n", encoding="utf-8")
    settings = Settings(_env_file=None, include_class_name=True, properties_file=properties)

    translator = build_translator(settings)

    assert translator.config == TranslatorConfig(include_class_name=True, include_stacktrace=True, log_level="INFO")


def test_get_settings_is_cached() -> None:
    get_settings.cache_clear()
    try:
        assert get_settings() is get_settings()
    finally:
        get_settings.cache_clear()
