"""Structured logging configuration for TubeHub.

Uses structlog for structured, JSON-capable logging with request correlation.
"""

import logging
import sys
import uuid
from contextvars import ContextVar

import structlog

# Context variable for request ID correlation
current_request_id: ContextVar[str | None] = ContextVar("current_request_id", default=None)


def add_request_id(_logger, _method_name, event_dict):
    """Structlog processor to inject request_id into all log events."""
    request_id = current_request_id.get()
    if request_id:
        event_dict["request_id"] = request_id
    return event_dict


def setup_logging(log_level: str = "INFO", json_output: bool = False) -> None:
    """Configure structured logging for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        json_output: If True, output JSON logs (for production). If False, use colored console output.
    """
    # Shared processors for both structlog and stdlib
    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        add_request_id,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if json_output:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # stdlib records (logging.getLogger) go through the same processors
    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(console_handler)
    root_logger.setLevel(getattr(logging, log_level.upper()))

    # Suppress noisy third-party loggers
    noisy_loggers = [
        "aiosqlite",
        "httpx",
        "uvicorn.access",
    ]
    for logger_name in noisy_loggers:
        logging.getLogger(logger_name).setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Bound structlog logger
    """
    return structlog.get_logger(name)


def set_request_context(request_id: str | None = None) -> str:
    """Set the current request ID for log correlation.

    Args:
        request_id: Incoming ID to reuse; a new one is generated when missing

    Returns:
        The request ID now in context
    """
    request_id = request_id or uuid.uuid4().hex
    current_request_id.set(request_id)
    return request_id


def clear_request_context() -> None:
    """Clear the current request context."""
    current_request_id.set(None)
