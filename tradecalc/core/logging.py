import json
import logging
import math
from enum import Enum
from typing import Any, Dict, Optional

from tradecalc.core.config import get_log_level


# Attributes every LogRecord carries; anything else arrived through `extra=`.
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime"}


class StructuredFormatter(logging.Formatter):
    """
    Render calculator log records as single-line JSON.

    Enum members (sides, error kinds) are written as their values and
    non-finite floats (an overflowing notional, a nan size) as strings, so
    every line stays strict JSON.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        fields = {
            key: _jsonable(value)
            for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRS and not key.startswith("_")
        }
        event = fields.pop("event", None)
        if event:
            payload["event"] = event
        if fields:
            payload["extra"] = fields
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str, allow_nan=False)


def _jsonable(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, float) and not math.isfinite(value):
        return repr(value)
    return value


def init_logging(level: Optional[str] = None) -> None:
    """Attach the JSON formatter to the root logger.

    When no level is passed the configured ``LOG_LEVEL`` setting is used.
    """
    if level is None:
        level = get_log_level()
    log_level = getattr(logging, str(level).upper(), logging.INFO)
    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter())
    logging.basicConfig(level=log_level, handlers=[handler], force=True)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a module-scoped logger."""
    return logging.getLogger(name if name else "tradecalc")
