"""
Logging setup for the API.

JSON records in production, one readable line per record in development.
Records emitted while a request is being served carry the username of the
caller (or null for anonymous requests) in the `user` field.
"""

import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pythonjsonlogger.json import JsonFormatter

# Set by the identity dependency for the duration of a request
current_username: ContextVar[Optional[str]] = ContextVar("current_username", default=None)

NOISY_LOGGERS = {
    "sqlalchemy.engine": logging.WARNING,
    "passlib": logging.ERROR,
    "uvicorn.access": logging.WARNING,
}


class CustomJsonFormatter(JsonFormatter):
    """JSON formatter adding timestamp, level, origin and the calling user."""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["function"] = record.funcName
        log_record["user"] = current_username.get()

        if record.levelno >= logging.WARNING:
            log_record["location"] = f"{record.pathname}:{record.lineno}"


class UserFilter(logging.Filter):
    """Expose the calling user to plain-text format strings as %(user)s."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.user = current_username.get() or "-"
        return True


def _formatter(json_logs: bool) -> logging.Formatter:
    if json_logs:
        return CustomJsonFormatter("%(timestamp)s %(level)s %(logger)s %(message)s")
    return logging.Formatter(
        "%(asctime)s %(levelname)-7s %(name)s [%(user)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def setup_logging(log_level: str = "INFO", json_logs: bool = False) -> None:
    """
    Replace the root logger's handlers with a single stdout handler.

    Args:
        log_level: Level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: JSON records when True, plain text otherwise
    """
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(_formatter(json_logs))
    handler.addFilter(UserFilter())

    root_logger.setLevel(getattr(logging, log_level.upper()))
    root_logger.addHandler(handler)

    for name, level in NOISY_LOGGERS.items():
        logging.getLogger(name).setLevel(level)


def get_logger(name: str) -> logging.Logger:
    """Module logger; use as get_logger(__name__)."""
    return logging.getLogger(name)
