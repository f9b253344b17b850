"""Logging setup - text or JSON output on a single stream handler.

All RXT modules log through `logging.getLogger(__name__)`; this module only
installs the handler. Call configure_logging() once at startup (the CLI
does this).
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Optional

from rxt.core.config import config

# Extra attributes surfaced by the JSON formatter when present on a record
EXTRA_FIELDS = ("export_format", "file_path", "record_count", "run_id")

_HANDLER_NAME = "rxt"


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


def configure_logging(level: Optional[str] = None, fmt: Optional[str] = None) -> logging.Handler:
    """Configure the `rxt` logger.

    Re-running replaces the previously installed handler instead of adding
    a second one.

    Args:
        level: Log level name (defaults to RXT_LOG_LEVEL)
        fmt: 'text' or 'json' (defaults to RXT_LOG_FORMAT)

    Returns:
        The installed handler
    """
    level = (level or config.log_level).upper()
    fmt = (fmt or config.log_format).lower()

    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s - %(message)s"))

    logger = logging.getLogger("rxt")
    for existing in list(logger.handlers):
        if existing.get_name() == _HANDLER_NAME:
            logger.removeHandler(existing)
    logger.addHandler(handler)
    logger.setLevel(getattr(logging, level, logging.INFO))
    return handler
