"""Logging configuration for the command-line entry point."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict

_TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
_RESERVED = set(logging.LogRecord("", 0, "", 0, "", (), None).__dict__) | {"message", "asctime"}


class JSONFormatter(logging.Formatter):
    """Formats records as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        # Fields passed through ``extra=``.
        for key, value in record.__dict__.items():
            if key not in _RESERVED and not key.startswith("_"):
                log_data[key] = value
        return json.dumps(log_data, default=str)


def setup_logging(log_level: str = "INFO", json_format: bool = False) -> None:
    level = getattr(logging, log_level.upper(), None)
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {log_level}")
    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter() if json_format else logging.Formatter(_TEXT_FORMAT))

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for existing in list(root_logger.handlers):
        if getattr(existing, "_docsummarizer", False):
            root_logger.removeHandler(existing)
    handler._docsummarizer = True  # type: ignore[attr-defined]
    root_logger.addHandler(handler)
