"""
Logging for the `cybersafe` logger: a rotating file under `settings.log_dir` and a console
stream, both tagged with the id of the request being served.
"""

from __future__ import annotations

import logging
import os
import sys
import time
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Iterator, Optional

LOGGER_NAME = "cybersafe"
LOG_FILE = "cybersafe.log"
LOG_FORMAT = "%(asctime)s %(levelname)-8s request_id=%(request_id)s %(module)s:%(lineno)d %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_request_id: ContextVar[str] = ContextVar("cybersafe_request_id", default="-")


class RequestContextFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003
        record.request_id = _request_id.get()
        return True


class LevelColorFormatter(logging.Formatter):
    """Colors the level name only; the rest of the line stays plain for grep."""

    _COLORS = {
        logging.DEBUG: "\x1b[36m",
        logging.INFO: "\x1b[32m",
        logging.WARNING: "\x1b[33m",
        logging.ERROR: "\x1b[31m",
        logging.CRITICAL: "\x1b[1;31m",
    }

    def format(self, record: logging.LogRecord) -> str:
        color = self._COLORS.get(record.levelno)
        if color is None:
            return super().format(record)
        original = record.levelname
        record.levelname = f"{color}{original:<8}\x1b[0m"
        try:
            return super().format(record)
        finally:
            record.levelname = original


def _console_wants_color(stream) -> bool:
    if os.getenv("NO_COLOR"):
        return False
    return hasattr(stream, "isatty") and stream.isatty()


def configure_logging() -> logging.Logger:
    """Set up the `cybersafe` logger once; later calls return it unchanged."""
    logger = logging.getLogger(LOGGER_NAME)
    if logger.handlers:
        return logger

    from cybersafe.config import settings

    level = logging.getLevelNamesMapping().get(settings.log_level.upper(), logging.INFO)
    logger.setLevel(level)
    logger.propagate = False

    log_dir = Path(settings.log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    file_handler = RotatingFileHandler(log_dir / LOG_FILE, maxBytes=5 * 1024 * 1024, backupCount=5, encoding="utf-8")
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))

    console = logging.StreamHandler(sys.stdout)
    console_formatter = LevelColorFormatter if _console_wants_color(sys.stdout) else logging.Formatter
    console.setFormatter(console_formatter(LOG_FORMAT, DATE_FORMAT))

    for handler in (file_handler, console):
        handler.addFilter(RequestContextFilter())
        logger.addHandler(handler)
    return logger


def bind_request_id(request_id: Optional[str] = None) -> str:
    """Tag log lines from the current context with `request_id` (a fresh uuid if none given)."""
    rid = request_id or uuid.uuid4().hex
    _request_id.set(rid)
    return rid


def clear_request_id() -> None:
    _request_id.set("-")


@contextmanager
def timed(logger: logging.Logger, operation: str, **fields) -> Iterator[None]:
    """Log how long `operation` took, and whether it raised."""
    context = " ".join(f"{k}={v}" for k, v in fields.items())
    started = time.perf_counter()
    try:
        yield
    except Exception as e:
        elapsed = (time.perf_counter() - started) * 1000
        logger.warning("%s failed %s duration_ms=%.1f error=%s", operation, context, elapsed, type(e).__name__)
        raise
    elapsed = (time.perf_counter() - started) * 1000
    logger.info("%s ok %s duration_ms=%.1f", operation, context, elapsed)
