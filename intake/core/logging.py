"""
intake/core/logging.py

Logging configuration: one stdout handler, readable lines, and the
submission context (record_id, stage) appended when a log call passes it
through `extra=`.
"""

import logging
import sys
from datetime import datetime

CONTEXT_FIELDS = ("record_id", "stage")


class ContextFormatter(logging.Formatter):
    """Human-readable formatter that appends known context fields."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S")
        message = f"[{timestamp}] {record.levelname:<8} {record.name}: {record.getMessage()}"

        context_parts = [
            f"{field}={getattr(record, field)}"
            for field in CONTEXT_FIELDS
            if hasattr(record, field)
        ]
        if context_parts:
            message += f" [{', '.join(context_parts)}]"

        if record.exc_info:
            message += "\n" + self.formatException(record.exc_info)

        return message


def setup_logging(level: str = "INFO") -> logging.Logger:
    """
    Configures the root logger. Safe to call more than once.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(ContextFormatter())

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    # Keep SDK chatter out of the service log
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("google").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    logger = logging.getLogger("intake")
    logger.info("Logging configured (level=%s)", logging.getLevelName(log_level))
    return logger


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
