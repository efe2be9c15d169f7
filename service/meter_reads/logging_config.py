"""
Structured JSON logging configuration for the API process.

Provides a JSON formatter and a ``setup_logging()`` function that replaces
the default root logger configuration with one JSON object per line:
``timestamp``, ``level``, ``logger``, ``message`` and, when present,
``exception``.

CHANGELOG:
- 2026-10-12: Initial creation (STORY-001)

TODO:
- None
"""

import json
import logging
import sys
from datetime import UTC, datetime


class JSONFormatter(logging.Formatter):
    """Logging formatter that outputs a single JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        """Format *record* as a JSON string.

        Args:
            record: The log record to format.

        Returns:
            A single-line JSON string.
        """
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info and record.exc_info[1] is not None:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry, default=str)


def setup_logging(level: str | int = logging.INFO) -> None:
    """Configure the root logger with structured JSON output on stderr.

    Existing root handlers are removed so repeated calls do not duplicate
    output.

    Args:
        level: Log level name (e.g. ``"INFO"``) or numeric level.
    """
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JSONFormatter())
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level.upper() if isinstance(level, str) else level)
