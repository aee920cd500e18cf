"""Structured logging utilities with context management."""

import contextvars
import sys
from pathlib import Path
from typing import Any

from loguru import logger

# Context variables for the rule/host currently being inspected
inspection_context: contextvars.ContextVar[dict[str, Any]] = contextvars.ContextVar(
    "inspection_context", default={}
)

LOG_LEVELS = {
    "debug": "DEBUG",
    "info": "INFO",
    "warn": "WARNING",
    "warning": "WARNING",
    "error": "ERROR",
}


class LoggingContext:
    """
    Context manager for structured logging with automatic context injection.

    Example:
        with LoggingContext(rule="web", host="3yAYEDLXKL5"):
            logger.info("Inspecting host")  # Will include rule and host
    """

    def __init__(self, **context_data):
        self.context_data = context_data
        self.token = None

    def __enter__(self):
        current = inspection_context.get().copy()
        current.update(self.context_data)
        self.token = inspection_context.set(current)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.token:
            inspection_context.reset(self.token)


def get_logging_context() -> dict[str, Any]:
    return inspection_context.get().copy()


def resolve_level(level: str) -> str:
    """Map a CLI/env level name to a loguru level."""
    try:
        return LOG_LEVELS[level.lower()]
    except KeyError:
        raise ValueError(
            f"unsupported log level '{level}' has been set. It supports debug, info, warn, and error."
        ) from None


def configure_logging(level: str = "info", file: str | None = None, serialize: bool = True) -> None:
    """
    Configure loguru with a single sink and context injection.

    Args:
        level: debug, info, warn or error
        file: Append to this file instead of writing to stdout
        serialize: Emit JSON lines instead of plain text

    This should be called once at startup.
    """
    loguru_level = resolve_level(level)

    def context_filter(record):
        for key, value in inspection_context.get().items():
            record["extra"][key] = value
        return True

    if file:
        path = Path(file)
        if path.is_dir():
            raise ValueError(f"log file '{file}' is a directory")
        path.parent.mkdir(parents=True, exist_ok=True)
        sink: Any = str(path)
    else:
        sink = sys.stdout

    logger.remove()
    logger.add(
        sink=sink,
        format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {extra} | {name}:{function}:{line} | {message}",
        filter=context_filter,
        level=loguru_level,
        serialize=serialize,
        colorize=False,
    )
