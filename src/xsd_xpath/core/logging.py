#!/usr/bin/env python3

import logging
import logging.config
from pythonjsonlogger import jsonlogger


def setup_logging(level: str = "INFO"):
    """Setup JSON logging configuration

    Args:
        level: Root log level name (DEBUG, INFO, WARNING, ...)
    """
    logging_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "()": jsonlogger.JsonFormatter,
                "format": "%(asctime)s %(name)s %(levelname)s %(message)s %(schema_file)s %(root_node)s"
            }
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "json",
                "stream": "ext://sys.stdout"
            }
        },
        "loggers": {
            "": {
                "handlers": ["console"],
                "level": level.upper(),
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
