"""Process-wide logging setup; every record carries the request's correlation ID."""

import logging
import sys

from k8s_practice.core.middleware import correlation_id_var

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(correlation_id)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Lowered to WARNING; RequestLoggingMiddleware already writes the access lines
QUIET_LOGGERS = ("uvicorn", "uvicorn.access", "sqlalchemy.engine")


class CorrelationIdFilter(logging.Filter):
    """Stamp records with the current correlation ID ("-" outside a request)."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = correlation_id_var.get() or "-"
        return True


def setup_logging(log_level: str = "INFO") -> None:
    """Send all logging to stdout at ``log_level``.

    Replaces any handlers already on the root logger, so calling it again
    (e.g. on reload) does not duplicate lines.
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    handler.addFilter(CorrelationIdFilter())

    root_logger = logging.getLogger()
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.setLevel(log_level)
    root_logger.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
