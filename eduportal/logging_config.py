import logging
import os
from logging.config import dictConfig
from typing import Optional

DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
_NOISY_LOGGERS = ("httpx", "httpcore")


def configure_logging(level: Optional[str] = None) -> None:
    """Install the portal's root handler; EDUPORTAL_LOG_LEVEL wins when no level is passed."""
    resolved = (level or os.getenv("EDUPORTAL_LOG_LEVEL", "INFO")).upper()

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "portal": {"format": DEFAULT_LOG_FORMAT},
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "portal",
                },
            },
            "loggers": {
                "sqlalchemy.engine": {"level": "WARNING"},
            },
            "root": {
                "handlers": ["console"],
                "level": resolved,
            },
        }
    )

    if os.getenv("EDUPORTAL_DEBUG_HTTP", "0") == "1":
        for name in (*_NOISY_LOGGERS, "uvicorn.access"):
            logging.getLogger(name).setLevel(logging.DEBUG)
    else:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
