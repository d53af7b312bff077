"""Structured JSON logging configuration."""

import json
import logging
import os
from datetime import datetime, timezone
from typing import Any

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Attributes every LogRecord has; anything else came in through `extra=`
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime"}


class JSONFormatter(logging.Formatter):
    """Format log records as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat().replace('+00:00', 'Z'),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        # logger.info("Task created", extra={"taskId": ...}) lands on the record itself
        for key, value in vars(record).items():
            if key not in _RECORD_ATTRS and not callable(value):
                entry[key] = value

        return json.dumps(entry, default=str)


def setup_structured_logging(level: str = LOG_LEVEL) -> None:
    """Route every logger (uvicorn's included) through the JSON formatter."""
    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter())
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = [handler]

    # Access logs only for warnings and errors
    uvicorn_access = logging.getLogger("uvicorn.access")
    uvicorn_access.handlers = [handler]
    uvicorn_access.setLevel(logging.WARNING)
