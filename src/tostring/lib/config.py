"""Formatter defaults loader."""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, fields
from pathlib import Path
from typing import cast

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FormatterDefaults:
    """Formatting options a new spec starts from."""

    quote_strings: bool = True
    multi_line: bool = False
    order_alphabetically: bool = False
    line_separator: str = "\n"


_BOOL_KEYS = frozenset({"quote_strings", "multi_line", "order_alphabetically"})

_ENV_OVERRIDE_MAP: dict[str, str] = {
    "TOSTRING_QUOTE_STRINGS": "quote_strings",
    "TOSTRING_MULTI_LINE": "multi_line",
    "TOSTRING_ORDER_ALPHABETICALLY": "order_alphabetically",
    "TOSTRING_LINE_SEPARATOR": "line_separator",
}

_LINE_SEPARATOR_ALIASES: dict[str, str] = {
    "lf": "\n",
    "crlf": "\r\n",
    "cr": "\r",
}

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


def _coerce_line_separator(raw_value: str, *, source: str) -> str:
    if not raw_value:
        raise ValueError(f"Invalid value for '{source}': expected non-empty string.")
    return _LINE_SEPARATOR_ALIASES.get(raw_value.strip().lower(), raw_value)


def _coerce_file_value(*, field_name: str, raw_value: object, source: str) -> object:
    if field_name in _BOOL_KEYS:
        if not isinstance(raw_value, bool):
            raise ValueError(
                f"Invalid value for '{source}': expected bool, got "
                f"{type(raw_value).__name__} ({raw_value!r})."
            )
        return raw_value

    if not isinstance(raw_value, str):
        raise ValueError(
            f"Invalid value for '{source}': expected str, got "
            f"{type(raw_value).__name__} ({raw_value!r})."
        )
    return _coerce_line_separator(raw_value, source=source)


def _coerce_env_value(*, field_name: str, raw_value: str, env_name: str) -> object:
    if field_name in _BOOL_KEYS:
        normalized = raw_value.strip().lower()
        if normalized in _TRUE_VALUES:
            return True
        if normalized in _FALSE_VALUES:
            return False
        raise ValueError(
            f"Invalid environment override '{env_name}': expected bool, got {raw_value!r}."
        )
    return _coerce_line_separator(raw_value, source=env_name)


def _default_values() -> dict[str, object]:
    defaults = FormatterDefaults()
    return {field.name: getattr(defaults, field.name) for field in fields(FormatterDefaults)}


def _apply_toml_payload(*, values: dict[str, object], payload: dict[str, object]) -> None:
    known = set(values)
    for key, raw_value in payload.items():
        if key not in known:
            logger.warning("Ignoring unknown tostring config key '%s'.", key)
            continue
        values[key] = _coerce_file_value(field_name=key, raw_value=raw_value, source=key)


def _apply_env_overrides(values: dict[str, object]) -> None:
    for env_name, field_name in _ENV_OVERRIDE_MAP.items():
        raw_value = os.getenv(env_name)
        if raw_value is None:
            continue
        values[field_name] = _coerce_env_value(
            field_name=field_name,
            raw_value=raw_value,
            env_name=env_name,
        )


def _read_payload(path: Path | None) -> dict[str, object]:
    if path is not None:
        return cast("dict[str, object]", tomllib.loads(path.read_text(encoding="utf-8")))

    pyproject = Path.cwd() / "pyproject.toml"
    if not pyproject.is_file():
        return {}
    document = cast("dict[str, object]", tomllib.loads(pyproject.read_text(encoding="utf-8")))
    tool = document.get("tool", {})
    if not isinstance(tool, dict):
        return {}
    section = cast("dict[str, object]", tool).get("tostring", {})
    if not isinstance(section, dict):
        raise ValueError(f"Invalid value for 'tool.tostring' in '{pyproject}': expected table.")
    return cast("dict[str, object]", section)


def load_defaults(path: Path | None = None) -> FormatterDefaults:
    """Load formatter defaults and apply environment overrides.

    Reads `path` when given, otherwise the `[tool.tostring]` table of
    `./pyproject.toml` if one exists.
    """

    values = _default_values()
    _apply_toml_payload(values=values, payload=_read_payload(path))
    _apply_env_overrides(values)
    return FormatterDefaults(
        quote_strings=cast("bool", values["quote_strings"]),
        multi_line=cast("bool", values["multi_line"]),
        order_alphabetically=cast("bool", values["order_alphabetically"]),
        line_separator=cast("str", values["line_separator"]),
    )
