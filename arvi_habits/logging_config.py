# arvi_habits/logging_config.py
"""
Stderr-only JSON logging configuration.

The MCP server speaks over stdio, so log output never goes to stdout.
Pipeline events carry their name and payload into the JSON line via
``extra={"event": ..., "data": ...}``.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

# SDK and transport loggers: routed through our handler, capped at WARNING
QUIET_LOGGERS = ("httpx", "httpcore", "openai", "google_genai", "fastmcp")

_EVENT_FIELDS = ("event", "data")


class JsonFormatter(logging.Formatter):
    """One JSON object per record: ts, level, logger, msg, plus event fields."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for field in _EVENT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                entry[field] = value

        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str, ensure_ascii=False)


def configure_logging(level: str = "INFO") -> None:
    """
    Send all logging to stderr as JSON lines.

    Safe to call more than once: existing root handlers are replaced.

    Args:
        level: Root level name, e.g. "INFO" or "DEBUG"
    """
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JsonFormatter())

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level.upper())

    for name in QUIET_LOGGERS:
        sdk_logger = logging.getLogger(name)
        sdk_logger.handlers.clear()
        sdk_logger.addHandler(handler)
        sdk_logger.setLevel(logging.WARNING)
        sdk_logger.propagate = False
