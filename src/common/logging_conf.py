"""JSON-line logging for the ANTEKHUB client.

`setup_logging()` is idempotent: it only attaches a handler when the root
logger has none, so test runners and host applications keep their own.
"""
from __future__ import annotations

import json
import logging
import os
import sys
from datetime import UTC, datetime
from typing import Any, Dict, Optional, Union

ENV_LOG_LEVEL = "LOG_LEVEL"

# Attributes every LogRecord carries; anything else came in via `extra=`.
_RESERVED = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """One JSON object per line: ts, level, logger, message and any extras."""

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        payload: Dict[str, Any] = {
            "ts": datetime.now(UTC).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key in _RESERVED or key in payload:
                continue
            payload[key] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def _resolve_level(level: Optional[Union[str, int]]) -> int:
    if level is None:
        level = os.environ.get(ENV_LOG_LEVEL) or "INFO"
    if isinstance(level, int):
        return level
    return getattr(logging, level.upper(), logging.INFO)


def setup_logging(level: Optional[Union[str, int]] = None) -> None:
    root = logging.getLogger()
    if root.handlers:
        return
    lvl = _resolve_level(level)
    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setLevel(lvl)
    handler.setFormatter(JsonFormatter())
    root.setLevel(lvl)
    root.addHandler(handler)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    return logging.getLogger(name or "antekhub")


__all__ = ["JsonFormatter", "get_logger", "setup_logging"]
