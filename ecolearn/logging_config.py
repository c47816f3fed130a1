"""
Central logging configuration for the EcoLearn progression service.

Provides:
- Structured logging (JSON in production, human-readable in development)
- Request correlation via contextvars (request_id set by middleware)
- Learner correlation via contextvars (profile_id set by progression routes)
- Environment-aware log levels

Usage:
    from ecolearn.logging_config import get_logger
    logger = get_logger(__name__)
    logger.info("Unit completed", extra={"unit_id": unit_id})
"""

import json
import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Optional

# Context var for request ID - set by middleware, available throughout request scope
request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

# Learner the current request acts on - set by progression routes
profile_id_var: ContextVar[Optional[str]] = ContextVar("profile_id", default=None)


def get_request_id() -> Optional[str]:
    """Get the current request ID from context, if set."""
    return request_id_var.get()


def get_profile_id() -> Optional[str]:
    return profile_id_var.get()


class RequestIdFilter(logging.Filter):
    """Filter that adds request_id and profile_id to log records from context."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = get_request_id() or "-"  # type: ignore[attr-defined]
        record.profile_id = get_profile_id() or "-"  # type: ignore[attr-defined]
        return True


class JsonFormatter(logging.Formatter):
    """Format log records as JSON for production log aggregators."""

    def format(self, record: logging.LogRecord) -> str:
        log_obj: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        # Add request_id when present
        req_id = getattr(record, "request_id", None)
        if req_id and req_id != "-":
            log_obj["request_id"] = req_id
        profile_id = getattr(record, "profile_id", None)
        if profile_id and profile_id != "-":
            log_obj["profile_id"] = profile_id

        # Include exception info if present
        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)

        # Add extra fields (anything passed via extra= in the log call)
        for key, value in record.__dict__.items():
            if key not in (
                "name", "msg", "args", "created", "filename", "funcName",
                "levelname", "levelno", "lineno", "module", "msecs",
                "pathname", "process", "processName", "relativeCreated",
                "stack_info", "exc_info", "exc_text", "thread", "threadName",
                "message", "taskName", "request_id", "profile_id",
            ) and value is not None:
                # Ensure JSON-serializable
                try:
                    json.dumps(value)
                    log_obj[key] = value
                except (TypeError, ValueError):
                    log_obj[key] = str(value)

        return json.dumps(log_obj)


def _create_dev_formatter() -> logging.Formatter:
    return logging.Formatter(
        "%(asctime)s %(levelname)-5s [%(name)s] req=%(request_id)s profile=%(profile_id)s %(message)s",
        datefmt="%H:%M:%S",
    )


def configure_logging(
    *,
    log_level: str = "INFO",
    environment: str = "development",
    debug: bool = False,
) -> None:
    """
    Configure application-wide logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        environment: 'development' or 'production'
        debug: If True, use DEBUG level regardless of log_level
    """
    level = logging.DEBUG if debug else getattr(logging, log_level.upper(), logging.INFO)

    # Ensure correlation fields exist on all records (default before filter runs)
    old_factory = logging.getLogRecordFactory()

    def record_factory(*args: Any, **kwargs: Any) -> logging.LogRecord:
        record = old_factory(*args, **kwargs)
        for field in ("request_id", "profile_id"):
            if not hasattr(record, field):
                setattr(record, field, "-")
        return record

    logging.setLogRecordFactory(record_factory)

    # Root logger
    root = logging.getLogger()
    root.setLevel(level)

    # Remove existing handlers to avoid duplicates on reload
    for h in root.handlers[:]:
        root.removeHandler(h)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)

    # Add filter to inject request_id and profile_id
    handler.addFilter(RequestIdFilter())

    if environment == "production":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(_create_dev_formatter())

    root.addHandler(handler)

    # Reduce noise from third-party loggers
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for the given module name.

    Logs will automatically include request_id and profile_id when available.
    Use extra={} for additional structured fields:
        logger.info("Access denied", extra={"target_id": target_id, "unmet": unmet})
    """
    return logging.getLogger(name)
