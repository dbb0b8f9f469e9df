"""Structured logging configuration and helpers."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, cast

import structlog
from asgi_correlation_id.context import correlation_id

if TYPE_CHECKING:
    from structlog.stdlib import BoundLogger
    from structlog.typing import EventDict, WrappedLogger

# Loggers owned by the ASGI server; their records are routed through our handler.
SERVER_LOGGER_NAMES = ("uvicorn", "uvicorn.error", "uvicorn.access")

_LOGGING_CONFIGURED = False


def _resolve_log_level(log_level: str) -> int:
    """Resolve a user-provided log level into a stdlib constant."""
    resolved = getattr(logging, log_level.strip().upper(), logging.INFO)
    if not isinstance(resolved, int):
        return logging.INFO
    return resolved


def _is_json_format(log_format: str) -> bool:
    return log_format.strip().lower() == "json"


def _add_runtime_context(
    service_name: str,
    environment: str,
) -> structlog.types.Processor:
    """Create a processor that stamps service metadata and request id on each event."""

    def _processor(
        _logger: WrappedLogger,
        _method_name: str,
        event_dict: EventDict,
    ) -> EventDict:
        event_dict.setdefault("service", service_name)
        event_dict.setdefault("environment", environment)

        request_id = correlation_id.get()
        if request_id:
            event_dict.setdefault("request_id", request_id)

        return event_dict

    return _processor


def configure_logging(
    *,
    log_level: str,
    log_format: str,
    service_name: str,
    environment: str,
) -> None:
    """Configure stdlib and structlog for the current process.

    Subsequent calls are no-ops, so the app module and tests can both call it.
    """
    global _LOGGING_CONFIGURED
    if _LOGGING_CONFIGURED:
        return

    json_output = _is_json_format(log_format)
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        _add_runtime_context(service_name=service_name, environment=environment),
    ]

    renderer: structlog.types.Processor
    if json_output:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    handler = logging.StreamHandler()
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(_resolve_log_level(log_level))

    for logger_name in SERVER_LOGGER_NAMES:
        server_logger = logging.getLogger(logger_name)
        server_logger.handlers.clear()
        server_logger.propagate = True

    processors: list[structlog.types.Processor] = [
        *shared_processors,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
    ]
    if json_output:
        processors.append(structlog.processors.format_exc_info)
    processors.append(structlog.stdlib.ProcessorFormatter.wrap_for_formatter)

    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    _LOGGING_CONFIGURED = True


def get_logger(name: str | None = None) -> BoundLogger:
    """Return a configured structured logger."""
    return cast("BoundLogger", structlog.get_logger(name))


def bind_context(**values: object) -> None:
    """Bind context values to the active contextvars scope."""
    structlog.contextvars.bind_contextvars(**values)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
