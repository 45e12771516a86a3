"""Structured logging configuration using structlog."""

from __future__ import annotations

import logging
import sys

import structlog


def build_processors(fmt: str = "console", colors: bool = False) -> list[structlog.types.Processor]:
    """Return the processor chain for ``fmt``.

    JSON lines carry tracebacks as a string field; the console renderer
    formats ``exc_info`` itself and must not see it pre-rendered.
    """
    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso", utc=True, key="ts"),
    ]
    if fmt == "json":
        processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=colors))
    return processors


def setup_logging(level: str = "info", fmt: str = "console") -> None:
    """Configure structlog for stderr output.

    stdout is reserved for the report, so every log line goes to stderr.
    Colors are used only when stderr is a terminal.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    structlog.configure(
        processors=build_processors(fmt, colors=sys.stderr.isatty()),
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger(component: str) -> structlog.stdlib.BoundLogger:
    """Get a logger bound with a component name."""
    return structlog.get_logger(component=component)  # type: ignore[return-value]
