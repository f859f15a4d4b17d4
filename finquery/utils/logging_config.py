"""structlog setup shared by the API, chat service and CLI entry point."""
import logging
from typing import Any

import structlog

# Client libraries that log every HTTP round trip at INFO
_NOISY_LOGGERS = ("httpx", "openai", "google.generativeai", "sqlalchemy.engine")


def configure_logging(
    log_level: str = "INFO",
    json_output: bool = True,
    service: str | None = None,
) -> None:
    """Configure structlog; ``service`` is bound to every event when given."""
    level = getattr(logging, log_level.upper(), logging.INFO)

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer(),
    ]
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    structlog.contextvars.clear_contextvars()
    if service:
        structlog.contextvars.bind_contextvars(service=service)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


def bind_request_context(request_id: str, user_id: str | None = None) -> None:
    """Attach request identifiers to every event logged while handling it."""
    structlog.contextvars.bind_contextvars(request_id=request_id, user_id=user_id)


def clear_request_context() -> None:
    structlog.contextvars.unbind_contextvars("request_id", "user_id")


def get_logger(name: str | None = None) -> Any:
    return structlog.get_logger(name)
