"""
Logging setup for the rank API process.
"""

from __future__ import annotations

import json
import logging
from typing import Optional

SIMPLE_FORMAT = "%(levelname)s - %(name)s - %(message)s"

DETAILED_FORMAT = (
    "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s"
)

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Google client libraries are chatty at INFO; only their errors are useful.
MODULE_LOG_LEVELS = {
    "google": "ERROR",
    "google.cloud.firestore": "ERROR",
    "grpc": "ERROR",
    "urllib3": "WARNING",
    "uvicorn": "INFO",
    "uvicorn.access": "INFO",
}


class JsonFormatter(logging.Formatter):
    """One JSON object per line; the message and traceback are escaped."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": self.formatTime(record, DATE_FORMAT),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def build_formatter(log_format: Optional[str] = None) -> logging.Formatter:
    if log_format == "json":
        return JsonFormatter()
    if log_format == "simple":
        return logging.Formatter(SIMPLE_FORMAT, datefmt=DATE_FORMAT)
    return logging.Formatter(DETAILED_FORMAT, datefmt=DATE_FORMAT)


def setup_logging(log_level: str = "INFO", log_format: Optional[str] = None) -> None:
    """
    Configure the root logger with a single console handler.

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL.
        log_format: simple, detailed (default) or json.
    """
    level = log_level.upper()

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(build_formatter(log_format))
    root_logger.addHandler(console_handler)

    for module_name, module_level in MODULE_LOG_LEVELS.items():
        logging.getLogger(module_name).setLevel(module_level)

    root_logger.debug("Logging configured: level=%s, format=%s", level, log_format)
