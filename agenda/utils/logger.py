"""Structured Logging - structlog setup and per-request context."""

import logging
import sys
import uuid

import structlog


def setup_logging(log_level: str = "INFO", json_logs: bool = True) -> None:
    """Configure structlog for the agenda service.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
        json_logs: Emit JSON lines; False renders for a terminal.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if json_logs:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[*shared_processors, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a logger bound to a module name (usually ``__name__``)."""
    return structlog.get_logger(name)


def bind_request_context(request_id: str | None, **context: str) -> str:
    """Attach a request id (generated when missing) to every log line of the request.

    Returns:
        The request id in use.
    """
    rid = request_id or uuid.uuid4().hex
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id=rid, **context)
    return rid
