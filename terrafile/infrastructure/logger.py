"""
Package logger for Terrafile.

Informational records are written to stdout while warnings and errors go to
stderr, so module progress can be piped separately from failures.
"""

import logging
import sys


LOGGER_NAME = "terrafile"
LOG_FORMAT = "%(asctime)s %(levelname)-8s %(message)s"


class _StdStreamHandler(logging.StreamHandler):
    """StreamHandler bound to ``sys.<name>`` as it is at emit time."""

    def __init__(self, stream_name: str):
        super().__init__(getattr(sys, stream_name))
        self.stream_name = stream_name

    def emit(self, record: logging.LogRecord) -> None:
        self.stream = getattr(sys, self.stream_name)
        super().emit(record)


class _MaxLevelFilter(logging.Filter):
    """Let through only records strictly below ``level``."""

    def __init__(self, level: int):
        super().__init__()
        self.level = level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < self.level


def setup_logger(name: str = LOGGER_NAME, level: int = logging.INFO) -> logging.Logger:
    """
    Create (or reconfigure) the package logger.

    Args:
        name: Logger name
        level: Initial log level

    Returns:
        Configured logger with split stdout/stderr handlers
    """
    log = logging.getLogger(name)
    log.setLevel(level)
    log.propagate = False

    for handler in list(log.handlers):
        log.removeHandler(handler)

    formatter = logging.Formatter(LOG_FORMAT)

    stdout_handler = _StdStreamHandler("stdout")
    stdout_handler.setFormatter(formatter)
    stdout_handler.addFilter(_MaxLevelFilter(logging.WARNING))

    stderr_handler = _StdStreamHandler("stderr")
    stderr_handler.setFormatter(formatter)
    stderr_handler.setLevel(logging.WARNING)

    log.addHandler(stdout_handler)
    log.addHandler(stderr_handler)
    return log


logger = setup_logger()


__all__ = [
    "LOGGER_NAME",
    "logger",
    "setup_logger",
]
