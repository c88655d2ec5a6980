"""Structured JSON logging configuration."""

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any

from grouproster.app.core.settings import get_settings

_EXTRA_FIELDS = ("group_id", "token_purpose", "attempt", "request_path")


class JSONFormatter(logging.Formatter):
    """
    JSON formatter with consistent fields:
    - timestamp (ISO 8601)
    - level
    - logger
    - message
    - group_id / token_purpose / attempt / request_path when passed via ``extra``
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for field in _EXTRA_FIELDS:
            if hasattr(record, field):
                log_data[field] = getattr(record, field)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def configure_logging() -> None:
    """Configure the root logger with the JSON formatter on stderr."""
    settings = get_settings()
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in root_logger.handlers[:]:
        if getattr(handler, "_grouproster", False):
            root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(JSONFormatter())
    console_handler._grouproster = True
    root_logger.addHandler(console_handler)

    # SQL echo is noisy at INFO
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    root_logger.info(f"Logging configured: level={settings.log_level}, format=JSON")
