"""
Structured logging for speednet.

Every line is JSON with an ISO timestamp, the level and whatever is bound in
structlog contextvars for the current request (request id, actor, route).
"""

import contextvars
import logging
import logging.config
import os

import structlog

# Request ID for the current task; read by the Sentry middleware
request_id_var: contextvars.ContextVar[str] = contextvars.ContextVar(
    "request_id", default="no-request-id"
)

# SQL statements carry participant emails; keep them out of the logs
_QUIET_LOGGERS = ("sqlalchemy.engine", "sqlalchemy.pool", "aiosqlite")


def get_request_id() -> str:
    return request_id_var.get()


def set_request_id(request_id: str) -> None:
    """Set request ID for current context and bind it for every log line."""
    request_id_var.set(request_id)
    structlog.contextvars.bind_contextvars(request_id=request_id)


def bind_log_context(**fields) -> None:
    """Bind fields to every later log line of this request, skipping None values."""
    structlog.contextvars.bind_contextvars(
        **{key: value for key, value in fields.items() if value is not None}
    )


def resolve_log_level(level: str | None = None) -> str:
    """Explicit level, else LOG_LEVEL, else INFO. Unknown names fall back to INFO."""
    name = (level or os.getenv("LOG_LEVEL") or "INFO").strip().upper()
    if name not in logging.getLevelNamesMapping():
        return "INFO"
    return name


def configure_logging(level: str | None = None) -> None:
    """Configure structlog JSON output and route stdlib loggers through it."""
    log_level = resolve_log_level(level)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(log_level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Route stdlib logging (uvicorn, sqlalchemy) through structlog's formatter
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "()": structlog.stdlib.ProcessorFormatter,
                    "processor": structlog.dev.ConsoleRenderer(),
                },
            },
            "handlers": {
                "default": {
                    "level": log_level,
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                    "stream": "ext://sys.stdout",
                },
            },
            "loggers": {
                "": {
                    "handlers": ["default"],
                    "level": log_level,
                    "propagate": True,
                },
                **{name: {"level": "WARNING"} for name in _QUIET_LOGGERS},
            },
        }
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structlog logger. Request context is merged in from contextvars."""
    return structlog.get_logger(name)
