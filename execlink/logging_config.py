"""
Custom logging configuration for the interactive console.

Logs go to stderr because stdout belongs to the remote shell's output.
"""

import logging
import logging.config
import os
from typing import Any, Dict

KEEPALIVE_PREFIXES = ("> PING", "< PING", "> PONG", "< PONG")


class KeepaliveFilter(logging.Filter):
    """Filter to suppress websocket keepalive frame logs."""

    def filter(self, record: logging.LogRecord) -> bool:
        """Filter out ping/pong frames from the websockets debug logs."""
        if record.name.startswith("websockets"):
            message = record.getMessage()
            if message.startswith(KEEPALIVE_PREFIXES):
                return False  # Suppress keepalive logs
        return True  # Allow all other logs


def get_logging_config(level: str = None) -> Dict[str, Any]:
    """Get logging configuration with keepalive suppression."""
    level = (level or os.environ.get("LOG_LEVEL", "ERROR")).upper()
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "keepalive_filter": {
                "()": KeepaliveFilter
            }
        },
        "formatters": {
            "default": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            }
        },
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stderr"
            },
            "websockets": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stderr",
                "filters": ["keepalive_filter"]  # Apply filter to websocket logs
            }
        },
        "loggers": {
            "execlink": {
                "handlers": ["default"],
                "level": level,
                "propagate": False
            },
            "websockets": {
                "handlers": ["websockets"],
                "level": level,
                "propagate": False
            },
            "httpx": {
                "handlers": ["default"],
                "level": "WARNING",
                "propagate": False
            }
        },
        "root": {
            "level": level,
            "handlers": ["default"]
        }
    }


def configure_logging(level: str = None) -> None:
    """Apply the logging configuration."""
    logging.config.dictConfig(get_logging_config(level))
