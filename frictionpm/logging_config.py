"""
Structured logging for frictionpm: structlog on top of stdlib logging.

Logs go to stderr so the CLI's JSON results on stdout stay parseable.

Environment:
    FRICTIONPM_LOG_LEVEL   DEBUG | INFO (default) | WARNING | ERROR
    FRICTIONPM_LOG_FORMAT  "json" for one JSON object per line, else console

Usage:
    from frictionpm.logging_config import setup_logging, get_logger, bind_context

    setup_logging()
    bind_context(command="sweep")
    get_logger(__name__).info("Sweep finished")
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

import structlog


def _renderer(json_output: bool) -> structlog.types.Processor:
    if json_output:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def setup_logging(level: str | None = None, json_output: bool | None = None) -> None:
    level = level or os.environ.get("FRICTIONPM_LOG_LEVEL", "INFO")
    if json_output is None:
        json_output = os.environ.get("FRICTIONPM_LOG_FORMAT", "").lower() == "json"

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(json_output),
            ],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))


def bind_context(**values: Any) -> None:
    """Attach key/values to every log line emitted from this context."""
    structlog.contextvars.bind_contextvars(**values)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


__all__ = ["bind_context", "get_logger", "setup_logging"]
