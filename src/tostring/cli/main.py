"""Cyclopts CLI entry point for tostring."""

from __future__ import annotations

import sys
from contextvars import ContextVar
from typing import TYPE_CHECKING

from cyclopts import App

from tostring import __version__
from tostring.cli.inspect_cmd import register_inspect_commands
from tostring.cli.output import OutputConfig
from tostring.cli.output import emit as emit_output
from tostring.lib.errors import ToStringError

if TYPE_CHECKING:
    from collections.abc import Sequence

_OUTPUT: ContextVar[OutputConfig | None] = ContextVar("_OUTPUT", default=None)

app = App(
    name="tostring",
    help="Inspect declarative to-string formatters.",
    version=__version__,
)


def get_output_config() -> OutputConfig:
    return _OUTPUT.get() or OutputConfig()


def emit(payload: object) -> None:
    """Write command output using current output format settings."""

    emit_output(payload, get_output_config())


def _extract_global_options(argv: Sequence[str]) -> tuple[list[str], OutputConfig]:
    json_mode = False
    verbosity = 0
    cleaned: list[str] = []
    for arg in argv:
        if arg == "--json":
            json_mode = True
            continue
        if arg == "--no-json":
            json_mode = False
            continue
        if arg in {"--verbose", "-v"}:
            verbosity += 1
            continue
        cleaned.append(arg)
    return cleaned, OutputConfig(format="json" if json_mode else "text", verbosity=verbosity)


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point used by `tostring` and `python -m tostring`."""

    from tostring.lib.logging import configure_logging

    args = list(sys.argv[1:] if argv is None else argv)
    cleaned_args, options = _extract_global_options(args)
    configure_logging(json_mode=options.format == "json", verbosity=options.verbosity)

    token = _OUTPUT.set(options)
    try:
        try:
            app(cleaned_args)
        except (ToStringError, ValueError, ImportError, AttributeError, OSError) as exc:
            print(f"error: {exc}", file=sys.stderr)
            raise SystemExit(1) from None
    finally:
        _OUTPUT.reset(token)


register_inspect_commands(app, emit)
