from __future__ import annotations

from pathlib import Path

from exception_mapper.core.config import Settings
from exception_mapper.lookup import ConfigLookup, MappingConfigLookup, build_config_lookup, load_properties
from exception_mapper.models import TranslatorConfig


def test_mapping_lookup_parses_values() -> None:
    lookup = MappingConfigLookup(
        {
            "int": 404,
            "text-int": "-1",
            "bad-int": "four hundred",
            "flag": "TRUE",
            "off": "no",
            "garbage-flag": "maybe",
            "level": "SEVERE",
        }
    )

    assert isinstance(lookup, ConfigLookup)
    assert lookup.get_int("int") == 404
    assert lookup.get_int("text-int") == -1
    assert lookup.get_int("bad-int") is None
    assert lookup.get_int("missing") is None
    assert lookup.get_bool("flag", False) is True
    assert lookup.get_bool("off", True) is False
    assert lookup.get_bool("garbage-flag", True) is True
    assert lookup.get_bool("missing", False) is False
    assert lookup.get_str("level", "FINEST") == "SEVERE"
    assert lookup.get_str("missing", "FINEST") == "FINEST"


def test_boolean_values_read_as_flags() -> None:
    lookup = MappingConfigLookup({"on": True, "count": True})

    assert lookup.get_bool("on", False) is True
    assert lookup.get_int("count") is None


def test_load_properties(tmp_path: Path) -> None:
    properties = tmp_path / "exception-mapper.properties"
    properties.write_text(
        "\n".join(
            [
                "# status codes",
                "! legacy comment",
                "",
                "  ValueError/mp-jaxrs-ext/statuscode = 400",
                "app.errors.NotFound/mp-jaxrs-ext/statuscode: 404",
                "jaxrs-ext.includeClassName=true",
                "flag-only",
            ]
        ),
        encoding="utf-8",
    )

    assert load_properties(properties) == {
        "ValueError/mp-jaxrs-ext/statuscode": "400",
        "app.errors.NotFound/mp-jaxrs-ext/statuscode": "404",
        "jaxrs-ext.includeClassName": "true",
        "flag-only": "",
    }


def test_load_properties_continuations_and_escapes(tmp_path: Path) -> None:
    properties = tmp_path / "escaped.properties"
    properties.write_text(
        "\n".join(
            [
                r"ValueError/mp-jaxrs-ext/statuscode 400",
                "greeting = hello \\",
                r"    world",
                r"path=C\:\\temp",
                r"a\=b=c",
                r"unicode=caf\u00e9",
                r"tabbed=one\ttwo",
                r"even=ends with\\",
                r"next=1",
            ]
        ),
        encoding="utf-8",
    )

    assert load_properties(properties) == {
        "ValueError/mp-jaxrs-ext/statuscode": "400",
        "greeting": "hello world",
        "path": "C:\\temp",
        "a=b": "c",
        "unicode": "caf\u00e9",
        "tabbed": "one\ttwo",
        "even": "ends with\\",
        "next": "1",
    }


def test_load_properties_falls_back_to_latin1(tmp_path: Path) -> None:
    properties = tmp_path / "legacy.properties"
    properties.write_bytes(b"reason=caf\xe9\n")

    assert load_properties(properties) == {"reason": "caf\u00e9"}


def test_load_properties_missing_file(tmp_path: Path) -> None:
    assert load_properties(tmp_path / "absent.properties") == {}


def test_inline_properties_override_file(tmp_path: Path) -> None:
    properties = tmp_path / "mapper.properties"
    properties.write_text(
        "ValueError/mp-jaxrs-ext/statuscode=400\nKeyError/mp-jaxrs-ext/statuscode=404\n",
        encoding="utf-8",
    )
    settings = Settings(
        _env_file=None,
        properties_file=properties,
        properties={"ValueError/mp-jaxrs-ext/statuscode": "422"},
    )

    lookup = build_config_lookup(settings)

    assert lookup.get_int("ValueError/mp-jaxrs-ext/statuscode") == 422
    assert lookup.get_int("KeyError/mp-jaxrs-ext/statuscode") == 404


def test_translator_config_from_lookup_uses_defaults() -> None:
    defaults = TranslatorConfig(include_class_name=True, include_stacktrace=False, log_level="INFO")

    unset = TranslatorConfig.from_lookup(MappingConfigLookup(), defaults)
    overridden = TranslatorConfig.from_lookup(
        MappingConfigLookup(
            {
                "jaxrs-ext.includeClassName": "false",
                "jaxrs-ext.includeStacktrace": "true",
                "jaxrs-ext.stacktraceLogLevel": "warning",
            }
        ),
        defaults,
    )

    assert unset == defaults
    assert overridden == TranslatorConfig(include_class_name=False, include_stacktrace=True, log_level="WARNING")


def test_translator_config_defaults() -> None:
    config = TranslatorConfig.from_lookup(MappingConfigLookup())

    assert config == TranslatorConfig(include_class_name=False, include_stacktrace=False, log_level="FINEST")
