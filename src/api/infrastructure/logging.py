"""structlog setup: coloured console lines on a terminal, JSON elsewhere."""

import logging
import os
import sys

import structlog

_TRUTHY = {"1", "true", "yes"}


def _wants_colors() -> bool:
    # FORCE_COLOR covers containers, where stdout is never a TTY.
    return os.environ.get("FORCE_COLOR", "").lower() in _TRUTHY or sys.stdout.isatty()


def configure_logging(level: str = "INFO") -> None:
    """Install the processor chain and drop events below ``level``.

    Unknown level names fall back to INFO.
    """
    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]
    if _wants_colors():
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    else:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]

    threshold = logging.getLevelNamesMapping().get(level.upper(), logging.INFO)
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(threshold),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
