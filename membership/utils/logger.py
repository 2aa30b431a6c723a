"""Structured logging utilities for the membership reader.

All modules log through structlog so refresh and scheduler events carry
structured fields (paths, host counts, error types) instead of formatted text.
"""

import logging
import sys
import threading
import time
from typing import Optional, TextIO

import structlog
from structlog.types import EventDict, Processor


def add_timestamp(logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
    """Add epoch timestamp to log entries."""
    event_dict["timestamp"] = time.time()
    return event_dict


def add_thread_name(logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
    """Tag entries emitted from the periodic refresh thread."""
    thread = threading.current_thread()
    if thread is not threading.main_thread():
        event_dict["thread"] = thread.name
    return event_dict


def configure_logging(
    log_level: str = "INFO",
    json_output: bool = True,
    stream: Optional[TextIO] = None,
) -> None:
    """Configure structured logging for the process.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: If True, output JSON format. If False, use console format.
        stream: Where log lines are written (default: stdout). The CLI passes
            stderr so stdout carries only command output.
    """
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        add_thread_name,
        add_timestamp,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.extend([
            structlog.dev.ConsoleRenderer(colors=True),
        ])

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, log_level.upper())
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(
            file=stream if stream is not None else sys.stdout
        ),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str = "membership") -> structlog.stdlib.BoundLogger:
    """Get a configured logger instance.

    Args:
        name: Logger name (typically module name)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)


# Initialize logging with sensible defaults
# This will be reconfigured by run.py based on command-line flags
configure_logging()
