"""Structured Logging: JSON formatter and setup for the mock server.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Extra fields (resource, method, path, error_code) surfaced when present
    - JSON format for log shipping, human-readable text for the terminal

Design Decisions:
    - setup_logging called once per process by the server/CLI
    - Replaces previously installed mockapi handlers, so repeated calls
      (tests, re-created servers) never duplicate lines
"""

import logging
import json
from datetime import datetime, timezone

EXTRA_FIELDS = (
    "resource", "method", "path", "status_code", "error_code", "data_file",
)


class JSONFormatter(logging.Formatter):
    """Format logs as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in EXTRA_FIELDS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


class _MockApiHandler(logging.StreamHandler):
    """Marker type so setup_logging can find its own handler."""


def setup_logging(level: str = "INFO", fmt: str = "text") -> None:
    """Configure root logging for the application."""
    handler = _MockApiHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
        ))
    for existing in list(logging.root.handlers):
        if isinstance(existing, _MockApiHandler):
            logging.root.removeHandler(existing)
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
