"""Structured JSON logger for notionblog.

Every log record is emitted as a single-line JSON object so it can be
consumed by log aggregation pipelines without additional parsing.

Typical structured output::

    {"ts": "2025-12-15T10:00:00.123456+00:00", "level": "WARNING",
     "logger": "notionblog.retries", "message": "Rate limited, backing off",
     "operation": "list published posts", "delay_s": 2.0, "attempt": 2}

Usage::

    from notionblog.observability import get_logger

    log = get_logger("notionblog.transform")
    log.warning("page skipped", extra={"extra_fields": {"page_id": "abc"}})
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any


class StructuredFormatter(logging.Formatter):
    """Format log records as single-line JSON objects.

    Guaranteed keys: ``ts`` (ISO-8601 UTC), ``level``, ``logger`` and
    ``message``.  Structured fields passed as
    ``extra={"extra_fields": {...}}`` are merged into the top-level object;
    ``exc_info`` and ``stack_info`` are serialised when present.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        extra_fields: dict[str, Any] | None = getattr(
            record, "extra_fields", None
        )
        if extra_fields is not None:
            log_entry.update(extra_fields)

        if record.exc_info and record.exc_info[1] is not None:
            log_entry["exception"] = self.formatException(record.exc_info)

        if record.stack_info:
            log_entry["stack_info"] = self.formatStack(record.stack_info)

        # ensure_ascii=False keeps emoji category labels readable.
        return json.dumps(log_entry, default=str, ensure_ascii=False)


# One handler per logger name so that ``get_logger`` is idempotent.
_configured_loggers: set[str] = set()


def get_logger(
    name: str = "notionblog",
    *,
    level: int | str = logging.DEBUG,
    stream: Any | None = None,
) -> logging.Logger:
    """Get or create a structured JSON logger.

    Parameters
    ----------
    name:
        Logger name.  Defaults to ``"notionblog"``.
    level:
        Minimum log level, as an ``int`` or a case-insensitive name.
    stream:
        Output stream for the handler.  Defaults to ``sys.stderr``.

    Returns
    -------
    logging.Logger
        A logger with a :class:`StructuredFormatter` handler attached.
        Repeated calls with the same *name* do **not** add handlers.
    """
    logger = logging.getLogger(name)

    if name not in _configured_loggers:
        resolved_level = (
            logging.getLevelName(level.upper())
            if isinstance(level, str)
            else level
        )
        logger.setLevel(resolved_level)

        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(StructuredFormatter())
        logger.addHandler(handler)

        # Prevent duplicate lines when the root logger also has handlers.
        logger.propagate = False

        _configured_loggers.add(name)

    return logger
