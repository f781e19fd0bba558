"""Logging infrastructure for the Pantry Recipes service.

Provides centralized logging with configurable format (text/JSON) and level.
Configured via environment variables:
- LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: INFO)
- LOG_TYPE: text, json (default: text)

Records may carry context through `extra` (see CONTEXT_FIELDS), e.g.
    logger.info("[CACHE HIT] ...", extra={"cache_key": key})
Both formatters render the context fields that are present.

Logs go to stderr so that the query runner's results on stdout stay clean.
"""

import json
import logging
import os
import sys
from typing import Any, Iterable

# `extra` attributes rendered by the formatters, in output order
CONTEXT_FIELDS = ("owner_id", "cache_key")

# SDK loggers that are chatty at INFO (request bodies, retries, connection pool)
EXTERNAL_LOGGERS = ("google.genai", "google_genai", "aiohttp")


def _record_context(record: logging.LogRecord) -> dict[str, Any]:
    return {name: getattr(record, name) for name in CONTEXT_FIELDS if hasattr(record, name)}


class JSONFormatter(logging.Formatter):
    """Formatter that outputs one JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON.

        Returns:
            JSON string with timestamp, level, logger name, message, context
            fields that are set, and the traceback if any. Non-ASCII text
            (Spanish ingredient names) is kept as is.
        """
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **_record_context(record),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False, default=str)


class RichTextFormatter(logging.Formatter):
    """Formatter that outputs colored text with emoji icons."""

    COLORS = {
        "DEBUG": "\033[36m",      # Cyan
        "INFO": "\033[32m",       # Green
        "WARNING": "\033[33m",    # Yellow
        "ERROR": "\033[31m",      # Red
        "RESET": "\033[0m",
    }

    ICONS = {
        "DEBUG": "🔍",
        "INFO": "ℹ️",
        "WARNING": "⚠️",
        "ERROR": "❌",
    }

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as a colored line, context as trailing key=value pairs."""
        level = record.levelname
        color = self.COLORS.get(level, self.COLORS["RESET"])
        icon = self.ICONS.get(level, "")
        reset = self.COLORS["RESET"]

        timestamp = self.formatTime(record, "%Y-%m-%d %H:%M:%S")
        message = f"{color}{icon} {timestamp} {level:<8} {record.name:<12} {record.getMessage()}"

        context = _record_context(record)
        if context:
            message += " [" + " ".join(f"{name}={value}" for name, value in context.items()) + "]"
        message += reset

        if record.exc_info:
            message += f"\n{self.formatException(record.exc_info)}"

        return message


def get_logger(name: str) -> logging.Logger:
    """Create and configure logger instance.

    Args:
        name: Logger name.

    Returns:
        Configured logger. Calling again with the same name returns it unchanged.
    """
    logger_instance = logging.getLogger(name)

    if logger_instance.handlers:
        return logger_instance

    log_level = getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO)
    log_type = os.getenv("LOG_TYPE", "text").lower()

    logger_instance.setLevel(log_level)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(log_level)
    handler.setFormatter(JSONFormatter() if log_type == "json" else RichTextFormatter())
    logger_instance.addHandler(handler)

    return logger_instance


def quiet_external_loggers(names: Iterable[str] = EXTERNAL_LOGGERS, level: int = logging.WARNING) -> None:
    """Raise the threshold of third-party SDK loggers."""
    for name in names:
        logging.getLogger(name).setLevel(level)


logger = get_logger("pantry")
quiet_external_loggers()
