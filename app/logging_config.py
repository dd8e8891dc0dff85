from logging.config import dictConfig
import logging
from typing import Optional

from app.config import settings

NO_REQUEST_ID = "-"

# Sweep output goes to its own handler so scheduler logs stay greppable
SWEEP_LOGGERS = ("app.reset_streaks", "app.services.streak_sweeper", "app.routers.cron")


class SafeRequestIDFormatter(logging.Formatter):
    """Formatter that fills in ``request_id`` for records logged outside a request."""

    def format(self, record):
        if not getattr(record, "request_id", None):
            record.request_id = NO_REQUEST_ID
        return super().format(record)


def _resolve_level(level: Optional[str]) -> str:
    if level:
        return level.upper()
    return "DEBUG" if settings.DEBUG else settings.LOG_LEVEL.upper()


def build_logging_config(level: Optional[str] = None) -> dict:
    """
    dictConfig for the API and the streak reset command.

    Streak transitions are logged at DEBUG by the call sites, so they only
    show up when ``level`` (or DEBUG mode) asks for them.
    """
    app_level = _resolve_level(level)
    sweep_logger = {"level": "INFO", "handlers": ["sweep_console"], "propagate": False}

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "()": SafeRequestIDFormatter,
                "format": "%(asctime)s %(levelname)-7s [%(request_id)s] %(name)s: %(message)s",
            },
            "sweep": {
                "()": SafeRequestIDFormatter,
                "format": "%(asctime)s %(levelname)-7s [sweep %(request_id)s] %(message)s",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
            },
            "sweep_console": {
                "class": "logging.StreamHandler",
                "formatter": "sweep",
            },
        },
        "root": {
            "level": "WARNING",
            "handlers": ["console"],
        },
        "loggers": {
            "app": {"level": app_level, "handlers": ["console"], "propagate": False},
            **{name: dict(sweep_logger) for name in SWEEP_LOGGERS},
            "uvicorn.error": {"level": "INFO", "handlers": ["console"], "propagate": False},
            "uvicorn.access": {"level": "WARNING" if not settings.DEBUG else "INFO", "handlers": ["console"], "propagate": False},
            "slowapi": {"level": "WARNING", "handlers": ["console"], "propagate": False},
            # SQL echo is driven by the engine's echo flag in DEBUG mode
            "sqlalchemy.engine": {"level": "WARNING", "handlers": ["console"], "propagate": False},
        },
    }


LOGGING_CONFIG = build_logging_config()


def configure_logging(level: Optional[str] = None):
    """Configure logging for the API process or the reset command."""
    dictConfig(build_logging_config(level) if level else LOGGING_CONFIG)
