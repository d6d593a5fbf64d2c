"""JSON-lines logging for the API, scripts and client."""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from app.core.config import get_config

# Attributes present on every LogRecord; anything else came in through `extra=`.
_RESERVED_RECORD_FIELDS = set(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}

_QUIET_IN_PRODUCTION = ("sqlalchemy.engine", "urllib3", "multipart", "uvicorn.access")


def record_extras(record: logging.LogRecord) -> dict[str, Any]:
    """Fields supplied through ``extra=`` on the logging call."""
    return {key: value for key, value in vars(record).items() if key not in _RESERVED_RECORD_FIELDS}


class JsonFormatter(logging.Formatter):
    def __init__(self, service: str) -> None:
        super().__init__()
        self.service = service

    def format(self, record: logging.LogRecord) -> str:
        line: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "service": self.service,
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in record_extras(record).items():
            line.setdefault(key, value)
        if record.exc_info:
            line["exception"] = self.formatException(record.exc_info)
        return json.dumps(line, default=str)


def configure_logging(force: bool = False) -> None:
    """Attach JSON handlers to the root logger; a no-op once handlers exist unless forced."""
    config = get_config()
    root = logging.getLogger()
    if root.handlers and not force:
        return
    for handler in list(root.handlers):
        root.removeHandler(handler)

    root.setLevel(config.LOG_LEVEL)
    formatter = JsonFormatter(service=config.APP_NAME)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if config.LOG_FILE:
        handlers.append(logging.FileHandler(config.LOG_FILE, encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)

    if config.is_production:
        for name in _QUIET_IN_PRODUCTION:
            logging.getLogger(name).setLevel(logging.WARNING)
