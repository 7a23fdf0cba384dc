"""
Logging configuration for the application.

Every record carries an ``errno`` field so error responses can be
searched by their canonical code. Records logged without one show "-".
Never logs sensitive data (request bodies, secrets, raw payloads).
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | errno=%(errno)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class ErrnoFilter(logging.Filter):
    """Give records logged without an errno a placeholder value."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "errno"):
            record.errno = "-"
        return True


def configure_logging(level: str = "INFO") -> None:
    """Configure logging for the application.

    Args:
        level: The log level string (DEBUG, INFO, WARNING, ERROR).
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        stream=sys.stdout,
        force=True,
    )
    for handler in logging.getLogger().handlers:
        handler.addFilter(ErrnoFilter())

    # Error responses are logged by the error handlers
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.error").setLevel(logging.WARNING)
