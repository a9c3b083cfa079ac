"""Logging configuration shared by the API, the CLI and migrations."""
import logging
import logging.config

from coachdesk.core.config import settings

_configured = False


def setup_logging(level: str | None = None) -> None:
    """Configure root logging once per process."""
    global _configured
    if _configured:
        return

    log_level = (level or settings.LOG_LEVEL or "INFO").upper()
    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(asctime)s %(levelname)s [%(name)s] %(message)s",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
            },
        },
        "root": {"handlers": ["console"], "level": log_level},
        "loggers": {
            "uvicorn.access": {"level": "WARNING"},
            "sqlalchemy.engine": {"level": "WARNING"},
        },
    })
    _configured = True
