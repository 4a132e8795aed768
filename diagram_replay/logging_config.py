"""
Structured logging configuration for diagram replay.

Provides JSON-formatted logs with trace_id support (the recording session
id) for correlating recorder and replay logs.

Environment Variables:
    DIAGRAM_REPLAY_LOG_LEVEL: Log level (DEBUG, INFO, WARNING, ERROR) - default: INFO
    DIAGRAM_REPLAY_LOG_FORMAT: Log format (json, text) - default: json

Usage:
    from diagram_replay.logging_config import setup_logging, get_logger

    setup_logging()
    logger = get_logger(__name__, trace_id="demo-session")
    logger.info("Replay started")
"""

import logging
import os
import sys
from typing import Optional, TextIO

from pythonjsonlogger.json import JsonFormatter

LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


class TraceIDFilter(logging.Filter):
    """
    Logging filter that adds trace_id to all log records.

    Ensures all logs have a trace_id field, even if not set via LoggerAdapter.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "trace_id"):
            record.trace_id = "N/A"  # type: ignore
        return True


def setup_logging(default_level: str = "INFO", stream: Optional[TextIO] = None) -> None:
    """
    Configure root logger with structured logging.

    Reads configuration from environment variables:
    - DIAGRAM_REPLAY_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: default_level)
    - DIAGRAM_REPLAY_LOG_FORMAT: json, text (default: json)
    """
    log_level = os.getenv("DIAGRAM_REPLAY_LOG_LEVEL", default_level).upper()
    log_format = os.getenv("DIAGRAM_REPLAY_LOG_FORMAT", "json").lower()
    level = LEVEL_MAP.get(log_level, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(level)
    handler.addFilter(TraceIDFilter())

    if log_format == "json":
        formatter: logging.Formatter = JsonFormatter(
            "%(asctime)s %(name)s %(levelname)s %(message)s %(trace_id)s",
            rename_fields={
                "asctime": "timestamp",
                "name": "logger",
                "levelname": "level",
            },
        )
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s [trace_id=%(trace_id)s]",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    handler.setFormatter(formatter)
    root_logger.addHandler(handler)

    # Silence asyncio debug chatter
    logging.getLogger("asyncio").setLevel(logging.WARNING)


def get_logger(name: str, trace_id: Optional[str] = None) -> logging.LoggerAdapter:
    """
    Get a logger with optional trace_id for correlation.

    Args:
        name: Logger name (typically __name__)
        trace_id: Trace ID for correlating logs (typically the session id)
    """
    logger = logging.getLogger(name)
    return logging.LoggerAdapter(logger, {"trace_id": trace_id or "N/A"})
