"""Structured logging setup.

Log records are rendered as a single line with the standard fields followed
by any ``extra=`` fields as ``key=value`` pairs, e.g.::

    2024-05-01 12:00:00 INFO app.main Request completed method=GET path=/x status=200
"""

import logging
import sys

from app.core.config import settings

# Attributes present on every LogRecord; anything else came in through extra=
_RESERVED = set(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


class KeyValueFormatter(logging.Formatter):
    """Formatter appending ``extra`` fields as key=value pairs."""

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        extras = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RESERVED and not key.startswith("_")
        }
        if not extras:
            return base
        pairs = " ".join(f"{key}={value}" for key, value in sorted(extras.items()))
        return f"{base} {pairs}"


def setup_logging(level: str | None = None) -> None:
    """Configure the root logger once."""
    root = logging.getLogger()
    if getattr(root, "_portfolio_tracker_configured", False):
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        KeyValueFormatter(
            fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root.addHandler(handler)
    root.setLevel((level or settings.LOG_LEVEL).upper())

    # Third-party loggers are noisy at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.DEBUG else logging.WARNING
    )
    root._portfolio_tracker_configured = True


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
