"""Structured logging for classbook.

Usage:
    from classbook.logutils import get_logger, with_context

    logger = get_logger(__name__)

    with with_context(operation="create", entity="Student"):
        logger.info("Student created", extra={"extra_data": {"student_id": 7}})
"""

from .config import Environment, LogConfig, LogOutput, get_config, reset_config, set_config
from .context import (
    LogContext,
    clear_context,
    get_context,
    get_correlation_id,
    update_context,
    with_context,
)
from .formatters import CompactFormatter, JSONFormatter, StandardFormatter
from .handlers import RichConsoleHandler, SafeRotatingFileHandler, StreamHandlerWithFlush
from .logger import get_logger, reset_logging
from .masking import MASK, is_sensitive_key, mask_dict, mask_sensitive_string

__all__ = [
    "get_logger",
    "reset_logging",
    "with_context",
    "get_context",
    "clear_context",
    "get_correlation_id",
    "update_context",
    "LogContext",
    "LogConfig",
    "LogOutput",
    "Environment",
    "get_config",
    "set_config",
    "reset_config",
    "JSONFormatter",
    "StandardFormatter",
    "CompactFormatter",
    "RichConsoleHandler",
    "SafeRotatingFileHandler",
    "StreamHandlerWithFlush",
    "MASK",
    "mask_sensitive_string",
    "mask_dict",
    "is_sensitive_key",
]
