"""Logging setup.

Library modules only create loggers with ``logging.getLogger(__name__)``
and pass context through ``extra={...}``. Applications call
``configure_logging()`` once at startup to decide where records go and
how they look.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .config import ObservabilityConfig, get_config

# Attributes every LogRecord has; anything else came in through ``extra``.
_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
) | {"message", "asctime", "taskName"}

_HANDLER_NAME = "midway"

# Their request lines include the full URL, Mapbox access token included.
_URL_LOGGERS = ("httpx", "httpcore")


class JSONFormatter(logging.Formatter):
    """One JSON object per line, including ``extra`` fields."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key not in _RECORD_ATTRS and not key.startswith("_"):
                payload[key] = value
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str, ensure_ascii=False)


def configure_logging(config: Optional[ObservabilityConfig] = None) -> logging.Handler:
    """Install a stream handler on the root logger.

    Calling it again replaces the handler installed by the previous
    call instead of adding a second one. HTTP client loggers are held
    at WARNING or above.

    Args:
        config: Logging settings; defaults to the application config.

    Returns:
        The installed handler.
    """
    config = config or get_config().observability

    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    if config.structured:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(config.format))

    root = logging.getLogger()
    for existing in list(root.handlers):
        if existing.get_name() == _HANDLER_NAME:
            root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(config.level.upper())
    for name in _URL_LOGGERS:
        logging.getLogger(name).setLevel(max(logging.WARNING, root.level))
    return handler
