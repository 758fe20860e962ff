"""Logging setup shared by the solver, the web application and uvicorn."""

import logging
import sys
from datetime import datetime

ROOT_LOGGER = "algebra_genius"

# uvicorn's own loggers; configured here so server lines match ours.
SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


class StructuredFormatter(logging.Formatter):
    """Render records as ``timestamp [LEVEL] logger: message``."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).isoformat(timespec="milliseconds")
        line = f"{timestamp} [{record.levelname}] {record.name}: {record.getMessage()}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def setup_logging(level: str = "INFO") -> logging.Logger:
    """Send application and server records to stderr in one format.

    The ``algebra_genius`` tree gets *level*; uvicorn's loggers share the
    same handler and level and stop propagating to the root logger, so a
    record is written once. Calling this again replaces the handlers.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(StructuredFormatter())

    for name in (ROOT_LOGGER,) + SERVER_LOGGERS:
        logger = logging.getLogger(name)
        logger.setLevel(numeric_level)
        logger.handlers.clear()
        if name == "uvicorn.error":
            # Propagates to "uvicorn".
            continue
        logger.addHandler(handler)
        logger.propagate = False

    return logging.getLogger(ROOT_LOGGER)


def get_logger(name: str) -> logging.Logger:
    """Return a child of the application logger for module *name*."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
