"""
Structured logging configuration.

JSON logs carry a trace_id so every log line of one proof operation
(derive -> fetch -> pack) can be correlated.

Environment Variables:
    SATI_LOG_LEVEL: Log level (DEBUG, INFO, WARNING, ERROR) - default: INFO
    SATI_LOG_FORMAT: Log format (json, text) - default: json

Usage:
    from sati.logging_config import setup_logging, get_logger

    setup_logging()
    logger = get_logger(__name__, trace_id="create-3xYb...")
    logger.info("Proof ready", extra={"root_index": 12})
"""

import logging
import os
import sys
from typing import Optional

from pythonjsonlogger.json import JsonFormatter

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


class TraceIDFilter(logging.Filter):
    """
    Logging filter that adds trace_id to all log records.

    Ensures every record has a trace_id field, even if not set via LoggerAdapter.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "trace_id"):
            record.trace_id = "N/A"  # type: ignore
        return True


def _formatter(log_format: str) -> logging.Formatter:
    if log_format == "text":
        return logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s [trace_id=%(trace_id)s]",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    return JsonFormatter(
        "%(asctime)s %(name)s %(levelname)s %(message)s %(trace_id)s",
        rename_fields={
            "asctime": "timestamp",
            "name": "logger",
            "levelname": "level",
        },
    )


def setup_logging(level: Optional[str] = None, log_format: Optional[str] = None) -> None:
    """
    Configure root logger with structured logging.

    Explicit arguments win over environment variables:
    - SATI_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: INFO)
    - SATI_LOG_FORMAT: json, text (default: json)
    """
    level_name = (level or os.getenv("SATI_LOG_LEVEL", "INFO")).upper()
    fmt = (log_format or os.getenv("SATI_LOG_FORMAT", "json")).lower()
    log_level = _LEVELS.get(level_name, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(log_level)
    handler.addFilter(TraceIDFilter())
    handler.setFormatter(_formatter(fmt))
    root_logger.addHandler(handler)

    # Silence noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


class TraceLoggerAdapter(logging.LoggerAdapter):
    """
    LoggerAdapter that merges per-call extra fields with the trace_id.

    The stdlib adapter replaces a call's extra with its own; here both
    reach the record, so fields like state or attempt show up in JSON logs.
    """

    def process(self, msg, kwargs):
        kwargs["extra"] = {**self.extra, **(kwargs.get("extra") or {})}
        return msg, kwargs


def get_logger(name: str, trace_id: Optional[str] = None) -> TraceLoggerAdapter:
    """
    Get a logger with optional trace_id for correlation.

    Args:
        name: Logger name (typically __name__)
        trace_id: Trace ID (typically the commitment address)

    Returns:
        TraceLoggerAdapter with trace_id in extra fields
    """
    logger = logging.getLogger(name)
    return TraceLoggerAdapter(logger, {"trace_id": trace_id or "N/A"})
