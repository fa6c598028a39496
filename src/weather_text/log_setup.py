"""Logging setup for the refresh pipeline and its CLI host."""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import Any

from .redaction import sanitize_text


class JsonConsoleFormatter(logging.Formatter):
    """JSON formatter for structured console logs.

    `static_fields` (e.g. the host session id) are stamped on every event so
    log lines can be joined with the refresh journal.
    """

    def __init__(self, static_fields: dict[str, Any] | None = None) -> None:
        super().__init__()
        self.static_fields = dict(static_fields or {})

    def format(self, record: logging.LogRecord) -> str:
        event: dict[str, Any] = {
            "ts": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": sanitize_text(record.getMessage()),
            **self.static_fields,
        }
        if record.exc_info:
            event["exception"] = sanitize_text(self.formatException(record.exc_info))
        return json.dumps(event, default=str)


def setup_logger(
    name: str = "weather_text",
    level: int | str = logging.INFO,
    session_id: str | None = None,
) -> logging.Logger:
    """Create and configure a process-wide logger."""
    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False
    static_fields = {"session_id": session_id} if session_id else None
    if logger.handlers:
        for handler in logger.handlers:
            if isinstance(handler.formatter, JsonConsoleFormatter) and static_fields:
                handler.formatter.static_fields.update(static_fields)
        return logger

    handler = logging.StreamHandler()
    handler.setFormatter(JsonConsoleFormatter(static_fields))
    logger.addHandler(handler)
    return logger
