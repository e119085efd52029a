"""
Logging setup for the calendar backend.

Three named loggers are configured, each under the "calendar." namespace:
- api: request validation and unhandled errors
- services: event and series writes
- db: store transactions and database errors

Development writes readable lines to stdout. Production (CALENDAR_ENV=production)
writes one JSON object per line to a rotating file per logger in CALENDAR_LOG_DIR.
"""

import json
import logging
import logging.handlers
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional


LOGGER_NAMESPACE = "calendar"
LOGGER_NAMES = ("api", "services", "db")

MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUP_COUNT = 5


class JSONFormatter(logging.Formatter):
    """
    Render a record as a single JSON line.

    Fields passed as logger.info("msg", extra={"extra_fields": {...}}) are
    merged into the top-level object.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.utcnow().isoformat() + "Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}.{record.funcName}:{record.lineno}",
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        entry.update(getattr(record, "extra_fields", {}))
        return json.dumps(entry, default=str)


class ConsoleFormatter(logging.Formatter):
    """[2024-01-01 09:00:00] INFO - calendar.services - Created event series: ser_01h..."""

    def __init__(self):
        super().__init__(
            fmt="[%(asctime)s] %(levelname)s - %(name)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )


def _env(name: str, default: str) -> str:
    return os.environ.get(f"CALENDAR_{name}", default)


def _build_handler(short_name: str, production: bool) -> logging.Handler:
    """
    Create the output handler for one logger.

    Args:
        short_name: Logger name without namespace (api, services, db)
        production: Write JSON to a rotating file instead of stdout

    Returns:
        Configured handler
    """
    if not production:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(ConsoleFormatter())
        return handler

    log_dir = Path(_env("LOG_DIR", "logs"))
    log_dir.mkdir(parents=True, exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(
        log_dir / f"{short_name}.log",
        maxBytes=MAX_LOG_BYTES,
        backupCount=LOG_BACKUP_COUNT,
        encoding="utf-8"
    )
    handler.setFormatter(JSONFormatter())
    return handler


def configure_logging() -> Dict[str, logging.Logger]:
    """
    (Re)configure every named logger from the CALENDAR_* environment.

    Environment Variables:
        CALENDAR_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR or CRITICAL (default: INFO)
        CALENDAR_ENV: "production" switches to JSON file output
        CALENDAR_LOG_DIR: Directory for production log files (default: ./logs)

    Returns:
        Mapping of short logger name to Logger
    """
    level = getattr(logging, _env("LOG_LEVEL", "INFO").upper(), logging.INFO)
    production = _env("ENV", "development").lower() == "production"

    loggers = {}
    for short_name in LOGGER_NAMES:
        logger = logging.getLogger(f"{LOGGER_NAMESPACE}.{short_name}")
        logger.setLevel(level)
        logger.propagate = False
        logger.handlers.clear()
        logger.addHandler(_build_handler(short_name, production))
        loggers[short_name] = logger

    return loggers


_loggers: Optional[Dict[str, logging.Logger]] = None


def get_logger(name: str) -> logging.Logger:
    """
    Get a configured logger by short name.

    Raises:
        ValueError: If the name is not one of api, services, db

    Example:
        >>> logger = get_logger("services")
        >>> logger.info("Created event series", extra={"extra_fields": {"count": 52}})
    """
    global _loggers

    if _loggers is None:
        _loggers = configure_logging()

    if name not in _loggers:
        raise ValueError(
            f"Unknown logger name: {name}. Valid names: {', '.join(LOGGER_NAMES)}"
        )

    return _loggers[name]


def init_logging() -> Dict[str, logging.Logger]:
    """Configure logging at application start, replacing any earlier setup."""
    global _loggers
    _loggers = configure_logging()
    return _loggers
