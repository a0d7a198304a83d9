"""
Logging configuration.

Text output by default; JSON lines (python-json-logger) when
``settings.log_json`` is enabled.
"""

import logging
import logging.config
from typing import Any, Dict, Optional

from pythonjsonlogger.json import JsonFormatter

from .settings import Settings, settings as default_settings

LOGGER_NAME = "nursery_server"

TEXT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
JSON_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def build_logging_config(cfg: Settings) -> Dict[str, Any]:
    """Build a dictConfig mapping for the given settings."""
    formatter = "json" if cfg.log_json else "text"
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "text": {"format": TEXT_FORMAT},
            "json": {"()": JsonFormatter, "fmt": JSON_FORMAT},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": formatter,
                "stream": "ext://sys.stderr",
            },
        },
        "loggers": {
            LOGGER_NAME: {
                "handlers": ["console"],
                "level": cfg.log_level.upper(),
                "propagate": False,
            },
        },
    }


def setup_logging(cfg: Optional[Settings] = None) -> logging.Logger:
    """Apply the logging configuration and return the package logger."""
    logging.config.dictConfig(build_logging_config(cfg or default_settings))
    return logging.getLogger(LOGGER_NAME)
