"""CLI output formatting utilities."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, is_dataclass
from enum import Enum
from typing import Any, Literal, Protocol, runtime_checkable

OutputFormat = Literal["text", "json"]


@dataclass(frozen=True, slots=True)
class FormatContext:
    """Parameters passed to text formatters."""

    verbosity: int = 0  # 0=normal, 1=verbose, -1=quiet


@runtime_checkable
class TextFormattable(Protocol):
    """Protocol for output dataclasses that provide a human-readable text format."""

    def format_text(self, ctx: FormatContext | None = None) -> str: ...


@dataclass(frozen=True, slots=True)
class OutputConfig:
    format: OutputFormat = "text"
    verbosity: int = 0


def to_jsonable(value: Any) -> Any:
    """Convert output payloads to JSON-serializable values."""

    if is_dataclass(value) and not isinstance(value, type):
        return to_jsonable(asdict(value))
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, type):
        return f"{value.__module__}.{value.__qualname__}"
    if isinstance(value, dict):
        return {str(key): to_jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [to_jsonable(item) for item in value]
    return value


def emit(payload: object, config: OutputConfig) -> None:
    """Write one command result to stdout in the configured format."""

    if config.format == "json":
        print(json.dumps(to_jsonable(payload), indent=2, sort_keys=True))
        return
    if isinstance(payload, TextFormattable):
        print(payload.format_text(FormatContext(verbosity=config.verbosity)))
        return
    print(payload)


def tabular(rows: list[list[str]], *, header: list[str] | None = None, sep: str = "  ") -> str:
    """Align columns by max width per column, with an optional header row.

    >>> tabular([["name", "string"], ["count", "scalar"]])
    'name   string\\ncount  scalar'
    """
    table = [header, *rows] if header else rows
    if not table:
        return ""
    widths = [0] * max(len(row) for row in table)
    for row in table:
        for col, cell in enumerate(row):
            widths[col] = max(widths[col], len(cell))
    lines = [
        sep.join(cell.ljust(widths[col]) for col, cell in enumerate(row)).rstrip()
        for row in table
    ]
    return "\n".join(lines)
