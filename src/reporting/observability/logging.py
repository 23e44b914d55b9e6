"""Structured logging configuration.

Features:
- JSON and text format support
- Request ID correlation
- Report definition context injection
"""

import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any

import structlog
from structlog.types import EventDict, Processor

from reporting.config import LogFormat, LogLevel, get_settings

# Context variables for operation tracking
request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)
definition_id_var: ContextVar[str | None] = ContextVar("definition_id", default=None)


def add_service_context(
    logger: logging.Logger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Add service context to log events."""
    settings = get_settings()
    event_dict["service"] = settings.app_name
    event_dict["environment"] = settings.environment.value
    return event_dict


def add_request_context(
    logger: logging.Logger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Add request context from context variables."""
    if request_id := request_id_var.get():
        event_dict["request_id"] = request_id
    if definition_id := definition_id_var.get():
        event_dict.setdefault("definition_id", definition_id)
    return event_dict


def add_timestamp(
    logger: logging.Logger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Add ISO 8601 timestamp."""
    event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def setup_logging(
    log_level: LogLevel | None = None,
    log_format: LogFormat | None = None,
) -> None:
    """Configure structured logging for the application.

    Args:
        log_level: Override log level (defaults to settings.log_level)
        log_format: Override log format (defaults to settings.log_format)
    """
    settings = get_settings()

    level = LogLevel(log_level or settings.log_level)
    fmt = LogFormat(log_format or settings.log_format)

    logging.basicConfig(
        level=getattr(logging, level.value),
        stream=sys.stdout,
        format="%(message)s",
    )

    # Shared processors for both JSON and text formats
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        add_timestamp,
        add_service_context,
        add_request_context,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if fmt == LogFormat.JSON:
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = shared_processors + [
            structlog.dev.ConsoleRenderer(
                colors=True,
                exception_formatter=structlog.dev.plain_traceback,
            ),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Suppress noisy loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance.

    Args:
        name: Logger name (defaults to module name)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)


class RequestContextManager:
    """Context manager for operation-scoped logging context.

    Usage:
        async with RequestContextManager(request_id="abc123", definition_id="def-1"):
            logger.info("Loading definition")  # Includes request_id and definition_id
    """

    def __init__(
        self,
        request_id: str | None = None,
        definition_id: str | None = None,
    ):
        self.request_id = request_id
        self.definition_id = definition_id
        self._tokens: list[tuple[ContextVar[Any], Any]] = []

    def __enter__(self) -> "RequestContextManager":
        if self.request_id:
            self._tokens.append((request_id_var, request_id_var.set(self.request_id)))
        if self.definition_id:
            self._tokens.append(
                (definition_id_var, definition_id_var.set(self.definition_id))
            )
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        for var, token in reversed(self._tokens):
            var.reset(token)
        self._tokens.clear()

    async def __aenter__(self) -> "RequestContextManager":
        return self.__enter__()

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.__exit__(exc_type, exc_val, exc_tb)


def log_external_call_start(
    logger: structlog.stdlib.BoundLogger,
    service: str,
    operation: str,
) -> None:
    """Log start of external service call."""
    logger.debug(
        "External call started",
        external_service=service,
        external_operation=operation,
    )


def log_external_call_end(
    logger: structlog.stdlib.BoundLogger,
    service: str,
    operation: str,
    success: bool,
    duration_ms: float,
    error: str | None = None,
) -> None:
    """Log completion of external service call."""
    log_data = {
        "external_service": service,
        "external_operation": operation,
        "success": success,
        "duration_ms": round(duration_ms, 2),
    }
    if error:
        log_data["error"] = error

    if success:
        logger.debug("External call completed", **log_data)
    else:
        logger.warning("External call failed", **log_data)
