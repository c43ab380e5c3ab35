"""Structured logging configuration for the validation engine.

This module provides the logging setup shared by every engine module:
- JSON structured logging for machine parsing
- Colored console output for development
- Structured context attached to log records

The engine itself only calls get_logger(); setup_logging() is meant for
host applications and scripts that want the same formatting.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from enum import Enum
from typing import Any, ClassVar

from flowguard.core.config import settings


class LogLevel(str, Enum):
    """Log level enumeration for type-safe log level configuration."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging.

    Format:
        {
            "timestamp": "2025-01-12T10:30:45.123Z",
            "level": "DEBUG",
            "logger": "flowguard.services.workflow.validator",
            "message": "Workflow validated",
            "service": "flowguard",
            "context": {"node_count": 4, "error_count": 0}
        }
    """

    def __init__(self, service_name: str = "flowguard") -> None:
        super().__init__()
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as a single JSON line."""
        log_entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC)
            .isoformat()
            .replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "service": self.service_name,
        }

        if hasattr(record, "context"):
            log_entry["context"] = record.context

        if record.exc_info:
            log_entry["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": self.formatException(record.exc_info),
            }

        if record.levelno >= logging.ERROR:
            log_entry["source"] = {
                "function": record.funcName,
                "line": record.lineno,
                "file": record.pathname,
            }

        return json.dumps(log_entry, default=str, ensure_ascii=False)


class ColoredConsoleFormatter(logging.Formatter):
    """Colored console formatter for development environments."""

    # ANSI color codes
    COLORS: ClassVar[dict[str, str]] = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[41m",  # Red background
    }
    RESET: ClassVar[str] = "\033[0m"

    def __init__(self) -> None:
        super().__init__(fmt=settings.LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with colors.

        The record is copied so other handlers still see the plain level name.
        """
        record = logging.makeLogRecord(record.__dict__)
        log_color = self.COLORS.get(record.levelname, self.RESET)
        record.levelname = f"{log_color}{record.levelname}{self.RESET}"

        if getattr(record, "context", None):
            record.msg = f"{record.msg} | Context: {json.dumps(record.context, default=str)}"

        return super().format(record)


def setup_logging(
    log_level: str | None = None,
    enable_json: bool | None = None,
    logger_name: str = "flowguard",
) -> logging.Logger:
    """Configure the engine logger with a console handler.

    Args:
        log_level: Logging level name. Defaults to settings.LOG_LEVEL.
        enable_json: Emit JSON lines instead of colored text.
                     Defaults to settings.LOG_JSON_FORMAT.
        logger_name: Logger to configure. Defaults to the package logger.

    Returns:
        The configured logger.

    Examples:
        >>> logger = setup_logging(log_level="DEBUG")
        >>> logger.debug("ready", extra={"context": {"catalog": "default"}})
    """
    if log_level is None:
        log_level = settings.LOG_LEVEL
    if enable_json is None:
        enable_json = settings.LOG_JSON_FORMAT

    level = getattr(logging, log_level.upper(), logging.INFO)

    logger = logging.getLogger(logger_name)
    logger.setLevel(level)

    # Remove existing handlers to avoid duplicates
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    if enable_json:
        handler.setFormatter(JSONFormatter(service_name=settings.PROJECT_NAME))
    else:
        handler.setFormatter(ColoredConsoleFormatter())
    logger.addHandler(handler)

    logger.debug(
        f"Logging initialized - Level: {log_level}",
        extra={"context": {"log_level": log_level, "json": enable_json}},
    )

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance with the specified name.

    Args:
        name: Logger name (typically __name__ of the module)

    Examples:
        >>> from flowguard.core.logging import get_logger
        >>> logger = get_logger(__name__)
    """
    return logging.getLogger(name)


class LogContext:
    """Context helper for adding structured context to log records.

    Examples:
        >>> logger = get_logger(__name__)
        >>> with LogContext(logger, workflow="onboarding"):
        ...     logger.info("Validating workflow")
    """

    def __init__(self, logger: logging.Logger, **context: Any) -> None:
        self.logger = logger
        self.context = context
        self.old_factory = logging.getLogRecordFactory()

    def __enter__(self) -> LogContext:
        def record_factory(*args: Any, **kwargs: Any) -> logging.LogRecord:
            record = self.old_factory(*args, **kwargs)
            if not hasattr(record, "context"):
                record.context = self.context.copy()
            else:
                record.context = {**record.context, **self.context}
            return record

        logging.setLogRecordFactory(record_factory)
        return self

    def __exit__(self, *args: Any) -> None:
        logging.setLogRecordFactory(self.old_factory)


__all__ = [
    "ColoredConsoleFormatter",
    "JSONFormatter",
    "LogContext",
    "LogLevel",
    "get_logger",
    "setup_logging",
]
