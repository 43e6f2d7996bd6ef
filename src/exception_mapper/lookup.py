"""Read-only configuration lookups used to resolve status codes and flags."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .core.config import Settings

logger = logging.getLogger(__name__)

_TRUE_VALUES = {"true", "1", "yes", "on"}
_FALSE_VALUES = {"false", "0", "no", "off"}


@runtime_checkable
class ConfigLookup(Protocol):
    """String-keyed configuration source."""

    def get_value(self, key: str) -> str | None: ...

    def get_int(self, key: str) -> int | None: ...

    def get_bool(self, key: str, default: bool) -> bool: ...

    def get_str(self, key: str, default: str) -> str: ...

    def keys(self) -> Iterable[str]: ...


class MappingConfigLookup:
    """``ConfigLookup`` backed by an in-memory mapping."""

    def __init__(self, values: Mapping[str, Any] | None = None) -> None:
        self._values: dict[str, Any] = dict(values or {})

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __len__(self) -> int:
        return len(self._values)

    def keys(self) -> Iterable[str]:
        return self._values.keys()

    def get_value(self, key: str) -> str | None:
        raw = self._values.get(key)
        if raw is None:
            return None
        if isinstance(raw, bool):
            return "true" if raw else "false"
        return str(raw)

    def get_int(self, key: str) -> int | None:
        raw = self._values.get(key)
        if raw is None:
            return None
        if isinstance(raw, int) and not isinstance(raw, bool):
            return raw
        try:
            return int(str(raw).strip())
        except ValueError:
            logger.warning("Ignoring non-integer value for %s: %r", key, raw)
            return None

    def get_bool(self, key: str, default: bool) -> bool:
        raw = self.get_value(key)
        if raw is None:
            return default
        normalized = raw.strip().lower()
        if normalized in _TRUE_VALUES:
            return True
        if normalized in _FALSE_VALUES:
            return False
        logger.warning("Ignoring non-boolean value for %s: %r", key, raw)
        return default

    def get_str(self, key: str, default: str) -> str:
        raw = self.get_value(key)
        if raw is None or not raw.strip():
            return default
        return raw


_SEPARATORS = "=: \t\f"
_WHITESPACE = " \t\f"
_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}


def _logical_lines(text: str) -> Iterator[str]:
    """Join backslash-continued lines and drop comments and blank lines."""

    pending: str | None = None
    for raw_line in text.splitlines():
        line = raw_line.lstrip(_WHITESPACE)
        if pending is None and (not line or line[0] in "#!"):
            continue
        trailing = len(line) - len(line.rstrip("\\"))
        if trailing % 2:
            pending = (pending or "") + line[:-1]
            continue
        yield (pending or "") + line
        pending = None
    if pending:
        yield pending


def _unescape(text: str) -> str:
    chars: list[str] = []
    index = 0
    while index < len(text):
        char = text[index]
        if char != "\\":
            chars.append(char)
            index += 1
            continue
        escaped = text[index + 1 : index + 2]
        digits = text[index + 2 : index + 6]
        if escaped == "u" and len(digits) == 4:
            try:
                chars.append(chr(int(digits, 16)))
                index += 6
                continue
            except ValueError:
                pass
        chars.append(_ESCAPES.get(escaped, escaped))
        index += 2
    return "".join(chars)


def _split_property(line: str) -> tuple[str, str]:
    index = 0
    while index < len(line):
        char = line[index]
        if char == "\\":
            index += 2
            continue
        if char in _SEPARATORS:
            break
        index += 1
    key = line[:index]
    value = line[index:].lstrip(_WHITESPACE)
    if value[:1] in ("=", ":"):
        value = value[1:].lstrip(_WHITESPACE)
    return _unescape(key), _unescape(value)


def load_properties(path: str | Path) -> dict[str, str]:
    """Parse a Java ``.properties`` file; a missing file yields ``{}``.

    Handles ``=``, ``:`` and whitespace separators, ``#``/``!`` comments,
    backslash line continuations and escapes (``\\=``, ``\\:``, ``\\t``,
    ``\\uXXXX``). Files are read as UTF-8, falling back to ISO-8859-1.
    """

    properties_path = Path(path)
    if not properties_path.is_file():
        logger.debug("Properties file %s not found", properties_path)
        return {}

    data = properties_path.read_bytes()
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError:
        text = data.decode("latin-1")

    properties: dict[str, str] = {}
    for line in _logical_lines(text):
        key, value = _split_property(line)
        properties[key] = value
    return properties


def build_config_lookup(settings: "Settings") -> MappingConfigLookup:
    """Merge the properties file with inline properties; inline values win."""

    values: dict[str, Any] = {}
    if settings.properties_file is not None:
        values.update(load_properties(settings.properties_file))
    values.update(settings.properties)
    return MappingConfigLookup(values)


__all__ = [
    "ConfigLookup",
    "MappingConfigLookup",
    "build_config_lookup",
    "load_properties",
]
