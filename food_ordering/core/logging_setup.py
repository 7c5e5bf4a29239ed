from __future__ import annotations

import json
import logging
import os
import re
from datetime import datetime, timezone

from food_ordering.core.request_context import current_context

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# key=value / key: value pairs whose value must never reach the log stream
_SECRET_VALUE = re.compile(
    r"(?P<key>\bbearer\s+|\b(?:access_token|token|password|secret)\s*[:=]\s*)(?P<value>[^\s\",}]+)",
    re.IGNORECASE,
)

# attributes passed through ``extra=`` that are copied into the JSON line
_EXTRA_FIELDS = ("endpoint", "method", "status_code", "duration_ms", "order_id")


def mask_secrets(text: str) -> str:
    return _SECRET_VALUE.sub(r"\g<key>***", text)


class JsonFormatter(logging.Formatter):
    """Renders each record as one JSON object tagged with the request context."""

    def format(self, record: logging.LogRecord) -> str:
        context = current_context()
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": mask_secrets(record.getMessage()),
            "request_id": getattr(record, "request_id", None) or context.request_id,
            "user_id": getattr(record, "user_id", None) or context.user_id,
        }
        entry.update(
            (name, getattr(record, name))
            for name in _EXTRA_FIELDS
            if getattr(record, name, None) is not None
        )
        if record.exc_info:
            entry["exception"] = mask_secrets(self.formatException(record.exc_info))
        return json.dumps(entry, ensure_ascii=False, default=str)


def configure_logging(stream=None) -> logging.Handler:
    handler = logging.StreamHandler(stream)
    handler.setFormatter(JsonFormatter())

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(LOG_LEVEL)

    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(name).setLevel(LOG_LEVEL)
    return handler
