"""Structured logging configuration using structlog.

Events are rendered by stdlib handlers through structlog's ProcessorFormatter,
so records from libraries that log through the standard library (httpx) get
the same treatment and a log file always receives one JSON object per line.
"""

import logging
import sys
from pathlib import Path
from typing import Any

import structlog
from structlog.types import EventDict, Processor

# Longest string value kept in a log field (pasted text, page HTML, URLs)
MAX_FIELD_LENGTH = 300

# Field names whose values never reach a log line
SECRET_FIELDS = frozenset({"supabase_service_role_key", "service_role_key", "apikey", "authorization"})


def shorten_fields(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Cut long string values and mask secrets."""
    for key, value in event_dict.items():
        if key.lower() in SECRET_FIELDS:
            event_dict[key] = "***"
        elif key != "event" and isinstance(value, str) and len(value) > MAX_FIELD_LENGTH:
            event_dict[key] = value[:MAX_FIELD_LENGTH] + "..."
    return event_dict


def _handler(handler: logging.Handler, pre_chain: list[Processor], as_json: bool) -> logging.Handler:
    if as_json:
        renderers: list[Processor] = [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        renderers = [
            structlog.dev.ConsoleRenderer(
                colors=sys.stdout.isatty(),
                exception_formatter=structlog.dev.plain_traceback,
            )
        ]

    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, *renderers],
        )
    )
    return handler


def setup_logging(
    level: str = "INFO",
    log_format: str = "console",
    log_file: str | None = None,
) -> None:
    """Configure structured logging for the application.

    Safe to call more than once; handlers from an earlier call are replaced.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        log_format: Output format ("console" for pretty, "json" for structured)
        log_file: Optional file path; always written as JSON lines
    """
    numeric_level = getattr(logging, level.upper())

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        shorten_fields,
    ]

    root = logging.getLogger()
    for old in [h for h in root.handlers if isinstance(h.formatter, structlog.stdlib.ProcessorFormatter)]:
        root.removeHandler(old)
        old.close()
    root.setLevel(numeric_level)

    root.addHandler(
        _handler(logging.StreamHandler(sys.stdout), shared_processors, as_json=log_format == "json")
    )

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        root.addHandler(
            _handler(logging.FileHandler(log_path, encoding="utf-8"), shared_processors, as_json=True)
        )

    structlog.configure(
        processors=[*shared_processors, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a logger instance.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)


class LogContext:
    """Context manager for adding temporary context to logs."""

    def __init__(self, **kwargs: str | int | float | bool) -> None:
        self.context = kwargs

    def __enter__(self) -> "LogContext":
        structlog.contextvars.bind_contextvars(**self.context)
        return self

    def __exit__(self, *args: object) -> None:
        structlog.contextvars.unbind_contextvars(*self.context.keys())


def log_import(kind: str, locator: str) -> LogContext:
    """Bind the import kind and its locator (URL or text length) to every log line."""
    return LogContext(import_kind=kind, locator=locator[:120])
