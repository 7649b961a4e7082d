"""Structured Logging — formatters and one-shot setup for the Cattery API.

Invariants:
    - Every record carries timestamp, level, logger name and message
    - Entity fields (operation, cat_id, user_id, reason, ...) are emitted only when set
    - setup_logging replaces the root handlers it installed earlier (safe to call twice)
    - SQL statement logging follows database_echo, never the app log level

Design Decisions:
    - stdlib logging with a hand-written JSONFormatter: no extra dependency
    - Text format appends the same entity fields as key=value pairs so local
      output shows which cat/user a line is about
"""

import json
import logging
from datetime import datetime, timezone

EXTRA_FIELDS = (
    "operation", "cat_id", "user_id", "error_code", "path", "reason",
)

_HANDLER_NAME = "cattery"


def _extras(record: logging.LogRecord) -> dict:
    return {
        key: record.__dict__[key]
        for key in EXTRA_FIELDS
        if record.__dict__.get(key) is not None
    }


class JSONFormatter(logging.Formatter):
    """One JSON object per line (production)."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **_extras(record),
        }
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable line with entity fields appended."""

    def __init__(self):
        super().__init__("%(asctime)s %(levelname)s %(name)s - %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        extras = _extras(record)
        if extras:
            line += " | " + " ".join(f"{k}={v}" for k, v in extras.items())
        return line


def setup_logging(level: str = "INFO", fmt: str = "json", sql_echo: bool = False):
    """Install the Cattery handler on the root logger."""
    root = logging.getLogger()
    for existing in [h for h in root.handlers if h.get_name() == _HANDLER_NAME]:
        root.removeHandler(existing)

    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(JSONFormatter() if fmt == "json" else TextFormatter())
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if sql_echo else logging.WARNING,
    )
