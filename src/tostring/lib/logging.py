"""Structlog configuration helpers."""

from __future__ import annotations

import logging as std_logging
import sys
from typing import TextIO

import structlog


def level_from_verbosity(verbosity: int) -> int:
    if verbosity <= 0:
        return std_logging.WARNING
    if verbosity == 1:
        return std_logging.INFO
    return std_logging.DEBUG


def configure_logging(
    json_mode: bool = False,
    verbosity: int = 0,
    stream: TextIO | None = None,
) -> None:
    """Route stdlib logging and structlog events to `stream` (stderr by default).

    The library itself never configures logging; applications and the CLI
    call this at startup. A later call replaces the earlier root handlers.
    """

    level = level_from_verbosity(verbosity)
    target = stream if stream is not None else sys.stderr
    handler = std_logging.StreamHandler(target)
    handler.setFormatter(std_logging.Formatter("%(message)s"))
    std_logging.basicConfig(level=level, handlers=[handler], force=True)

    renderer: structlog.typing.Processor = (
        structlog.processors.JSONRenderer() if json_mode else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        # Formatted output owns stdout; keep events off it.
        logger_factory=structlog.PrintLoggerFactory(file=target),
        cache_logger_on_first_use=False,
    )
