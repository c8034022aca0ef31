#!/usr/bin/env python3

import logging
import logging.config
from typing import Optional

from pythonjsonlogger import jsonlogger

from .config import metadata_config


def setup_logging(level: Optional[str] = None):
    """Setup JSON logging configuration"""
    level = (level or metadata_config.LOG_LEVEL).upper()

    logging_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "()": jsonlogger.JsonFormatter,
                "format": "%(asctime)s %(name)s %(levelname)s %(message)s"
            }
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "json",
                "stream": "ext://sys.stderr"
            }
        },
        "loggers": {
            "": {
                "handlers": ["console"],
                "level": level,
                "propagate": False
            },
            "uvicorn": {
                "handlers": ["console"],
                "level": "INFO",
                "propagate": False
            }
        }
    }

    logging.config.dictConfig(logging_config)
