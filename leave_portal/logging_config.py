"""
Logging Configuration
Console logging with an optional file handler and JSON formatter
"""
import os
import logging.config
from typing import Any, Dict

from leave_portal.config import settings


def build_logging_config() -> Dict[str, Any]:
    """Build the dictConfig for the current settings"""
    formatter = "json" if settings.LOG_FORMAT.lower() == "json" else "standard"

    handlers: Dict[str, Any] = {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": formatter,
            "stream": "ext://sys.stdout",
        },
    }

    if settings.LOG_FILE:
        log_dir = os.path.dirname(settings.LOG_FILE)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "formatter": formatter,
            "filename": settings.LOG_FILE,
            "maxBytes": 10 * 1024 * 1024,
            "backupCount": 5,
            "encoding": "utf-8",
        }

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            },
            "json": {
                "()": "pythonjsonlogger.jsonlogger.JsonFormatter",
                "format": "%(asctime)s %(levelname)s %(name)s %(message)s",
            },
        },
        "handlers": handlers,
        "loggers": {
            "leave_portal": {
                "handlers": list(handlers),
                "level": settings.LOG_LEVEL.upper(),
                "propagate": False,
            },
        },
        "root": {
            "handlers": ["console"],
            "level": "WARNING",
        },
    }


def setup_logging() -> None:
    """Apply the logging configuration (called once at startup)"""
    logging.config.dictConfig(build_logging_config())
