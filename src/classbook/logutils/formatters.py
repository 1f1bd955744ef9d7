"""Formatters: JSON lines for files and aggregation, plain text for consoles."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

from .context import get_context
from .masking import mask_dict, mask_sensitive_string


def _record_message(record: logging.LogRecord, mask_sensitive: bool) -> str:
    message = record.getMessage()
    return mask_sensitive_string(message) if mask_sensitive else message


def _record_extra(record: logging.LogRecord, mask_sensitive: bool) -> dict[str, Any] | None:
    extra = getattr(record, "extra_data", None)
    if not isinstance(extra, dict) or not extra:
        return None
    return mask_dict(extra) if mask_sensitive else extra


class JSONFormatter(logging.Formatter):
    """One JSON object per record with context and ``extra_data`` fields."""

    def __init__(self, mask_sensitive: bool = True, include_context: bool = True) -> None:
        super().__init__()
        self.mask_sensitive = mask_sensitive
        self.include_context = include_context

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": _record_message(record, self.mask_sensitive),
            "source": {"function": record.funcName, "line": record.lineno},
        }

        if self.include_context:
            payload["context"] = get_context().to_dict()

        extra = _record_extra(record, self.mask_sensitive)
        if extra:
            payload["extra"] = extra

        if record.exc_info and record.exc_info[0]:
            payload["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": mask_sensitive_string(str(record.exc_info[1])),
                "traceback": self.formatException(record.exc_info),
            }

        return json.dumps(payload, default=str)


class StandardFormatter(logging.Formatter):
    """``TIMESTAMP LEVEL LOGGER [CORRELATION_ID] MESSAGE key=value ...``"""

    DEFAULT_FORMAT = "%(asctime)s %(levelname)-7s %(name)s [%(correlation_id)s] %(message)s"
    DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

    def __init__(self, fmt: str | None = None, mask_sensitive: bool = True) -> None:
        super().__init__(fmt=fmt or self.DEFAULT_FORMAT, datefmt=self.DEFAULT_DATE_FORMAT)
        self.mask_sensitive = mask_sensitive

    def format(self, record: logging.LogRecord) -> str:
        record.correlation_id = get_context().correlation_id
        original_msg, original_args = record.msg, record.args
        record.msg = _record_message(record, self.mask_sensitive)
        record.args = None
        try:
            line = super().format(record)
        finally:
            record.msg, record.args = original_msg, original_args

        extra = _record_extra(record, self.mask_sensitive)
        if extra:
            line += " " + " ".join(f"{key}={value}" for key, value in extra.items())
        return line


class CompactFormatter(logging.Formatter):
    """``[LEVEL] MESSAGE`` for the Rich console handler."""

    LEVEL_LABELS = {
        "DEBUG": "DEBUG",
        "INFO": "INFO ",
        "WARNING": "WARN ",
        "ERROR": "ERROR",
        "CRITICAL": "CRIT ",
    }

    def __init__(self, mask_sensitive: bool = True) -> None:
        super().__init__()
        self.mask_sensitive = mask_sensitive

    def format(self, record: logging.LogRecord) -> str:
        label = self.LEVEL_LABELS.get(record.levelname, record.levelname)
        return f"[{label}] {_record_message(record, self.mask_sensitive)}"
