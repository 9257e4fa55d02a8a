"""JSON logging for Langotron with per-request context fields."""

from __future__ import annotations

import contextlib
import contextvars
import json
import logging
import os
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Dict, Iterator, Optional

LOGGER_NAME = "langotron"
LOG_DIR = Path(os.environ.get("LANGOTRON_LOG_DIR") or Path(__file__).resolve().parent.parent / "log")
LOG_FILE_NAME = "langotron.log"
DEFAULT_LOG_LEVEL = logging.INFO

# Fields promoted to the top level of every JSON line when present.
CONTEXT_FIELDS: tuple[str, ...] = (
    "correlation_id",
    "event",
    "language",
    "word_key",
    "duration_ms",
    "status",
)

# Attributes every LogRecord carries; anything else arrived through ``extra``.
_RECORD_ATTRIBUTES = frozenset(
    logging.LogRecord("", logging.INFO, "", 0, "", (), None).__dict__
) | {"message", "asctime"}

_context: contextvars.ContextVar[Dict[str, object]] = contextvars.ContextVar(
    "langotron_log_context", default={}
)
_logger: Optional[logging.Logger] = None


class JSONLogFormatter(logging.Formatter):
    """Render each record as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        payload: Dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        extra: Dict[str, object] = {}
        for key, value in record.__dict__.items():
            if key in CONTEXT_FIELDS:
                if value is not None:
                    payload[key] = value
            elif key not in _RECORD_ATTRIBUTES:
                extra[key] = value
        if extra:
            payload["extra"] = extra
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


class LogContextFilter(logging.Filter):
    """Copy the active :func:`log_context` values onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401
        for key, value in _context.get().items():
            if getattr(record, key, None) is None:
                setattr(record, key, value)
        return True


@contextlib.contextmanager
def log_context(**values: object) -> Iterator[Dict[str, object]]:
    """Attach ``values`` to every record logged inside the block.

    ``None`` values are ignored. Nested blocks inherit the outer values.
    """

    merged = {**_context.get(), **{k: v for k, v in values.items() if v is not None}}
    token = _context.set(merged)
    try:
        yield merged
    finally:
        _context.reset(token)


def _build_logger(level: int) -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False
    logger.addFilter(LogContextFilter())

    formatter = JSONLogFormatter()
    LOG_DIR.mkdir(parents=True, exist_ok=True)
    handlers: list[logging.Handler] = [
        logging.StreamHandler(),
        RotatingFileHandler(LOG_DIR / LOG_FILE_NAME, maxBytes=2 * 1024 * 1024, backupCount=3),
    ]
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger


def get_logger() -> logging.Logger:
    """Return the ``langotron`` logger, configuring it on first use."""

    global _logger
    if _logger is None:
        _logger = _build_logger(DEFAULT_LOG_LEVEL)
    return _logger


def configure_logging_level(debug_enabled: bool = False) -> int:
    """Switch between DEBUG and the default level; return the level applied."""

    level = logging.DEBUG if debug_enabled else DEFAULT_LOG_LEVEL
    logger = get_logger()
    logger.setLevel(level)
    for handler in logger.handlers:
        handler.setLevel(level)
    return level


__all__ = [
    "JSONLogFormatter",
    "LogContextFilter",
    "configure_logging_level",
    "get_logger",
    "log_context",
]
