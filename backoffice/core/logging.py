# =============================================================================
# LOGGER - Structured Logging Configuration
# =============================================================================
# Root logging setup for the back-office service.
# =============================================================================

from __future__ import annotations

import json
import logging
import sys
from typing import Optional

from backoffice.core.settings import settings

TEXT_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"


class JsonFormatter(logging.Formatter):
    """Render each record as a single JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "time": self.formatTime(record),
            "logger": record.name,
            "level": record.levelname,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def setup_logging(
    level: Optional[str] = None,
    log_format: Optional[str] = None,
) -> logging.Logger:
    """
    Configure the root logger.

    Args:
        level: Log level (defaults to settings.LOG_LEVEL)
        log_format: "text" or "json" (defaults to settings.LOG_FORMAT)

    Returns:
        The configured root logger
    """
    level = (level or settings.LOG_LEVEL).upper()
    log_format = log_format or settings.LOG_FORMAT

    root = logging.getLogger()
    root.setLevel(getattr(logging, level, logging.INFO))

    # Clear existing handlers
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    if log_format == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))
    root.addHandler(handler)

    return root
