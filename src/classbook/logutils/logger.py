"""Logger factory used by every classbook module."""

from __future__ import annotations

import logging
import sys

from .config import LogConfig, LogOutput, get_config
from .formatters import CompactFormatter, JSONFormatter, StandardFormatter
from .handlers import RichConsoleHandler, SafeRotatingFileHandler, StreamHandlerWithFlush

_configured_loggers: set[str] = set()


def get_logger(name: str | None = None, config: LogConfig | None = None) -> logging.Logger:
    """Return a logger configured from ``config`` (or the environment).

    Args:
        name: Logger name, usually ``__name__``
        config: Explicit configuration; defaults to ``get_config()``

    Returns:
        Configured Logger instance
    """
    logger = logging.getLogger(name)
    key = name or "root"
    if key not in _configured_loggers:
        _configure_logger(logger, config or get_config())
        _configured_loggers.add(key)
    return logger


def _configure_logger(logger: logging.Logger, config: LogConfig) -> None:
    level = config.module_levels.get(logger.name, config.level)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    logger.handlers.clear()
    if logger.name != "root":
        logger.propagate = False
    for handler in _create_handlers(config):
        logger.addHandler(handler)


def _create_handlers(config: LogConfig) -> list[logging.Handler]:
    handlers: list[logging.Handler] = []

    if config.output in (LogOutput.CONSOLE, LogOutput.BOTH):
        console: logging.Handler
        if config.json_format:
            console = StreamHandlerWithFlush(sys.stderr)
            console.setFormatter(JSONFormatter(mask_sensitive=config.mask_sensitive))
        elif config.use_rich:
            console = RichConsoleHandler()
            console.setFormatter(CompactFormatter(mask_sensitive=config.mask_sensitive))
        else:
            console = StreamHandlerWithFlush(sys.stderr)
            console.setFormatter(StandardFormatter(mask_sensitive=config.mask_sensitive))
        handlers.append(console)

    if config.output in (LogOutput.FILE, LogOutput.BOTH) and config.log_file:
        file_handler = SafeRotatingFileHandler(
            config.log_file,
            max_bytes=config.max_file_size,
            backup_count=config.backup_count,
        )
        # Files are always JSON lines
        file_handler.setFormatter(JSONFormatter(mask_sensitive=config.mask_sensitive))
        handlers.append(file_handler)

    return handlers


def reset_logging() -> None:
    """Drop handlers from every logger configured through ``get_logger``."""
    for key in _configured_loggers:
        logging.getLogger(None if key == "root" else key).handlers.clear()
    _configured_loggers.clear()
