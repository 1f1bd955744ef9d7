"""Environment-aware logging configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class Environment(Enum):
    DEVELOPMENT = "development"
    TESTING = "testing"
    PRODUCTION = "production"


class LogOutput(Enum):
    CONSOLE = "console"
    FILE = "file"
    BOTH = "both"


def _flag(value: str) -> bool:
    return value.lower() in ("true", "1", "yes")


@dataclass
class LogConfig:
    """Logging configuration container."""

    level: str = "INFO"
    output: LogOutput = LogOutput.CONSOLE
    json_format: bool = False
    use_rich: bool = True
    mask_sensitive: bool = True
    log_file: Path | None = None
    max_file_size: int = 5 * 1024 * 1024
    backup_count: int = 3
    module_levels: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_env(cls) -> LogConfig:
        """Build a configuration from defaults for the detected environment,
        then apply overrides.

        Environment variables:
            LOG_LEVEL: DEBUG, INFO, WARNING, ERROR, CRITICAL
            LOG_OUTPUT: console, file, both
            LOG_JSON: emit JSON lines on the console (true/false)
            LOG_RICH: use the Rich console handler (true/false)
            LOG_MASK_SENSITIVE: mask passwords and e-mails (true/false)
            LOG_FILE: path of the rotating log file
        """
        config = cls.defaults_for(cls.detect_environment())

        if level := os.getenv("LOG_LEVEL"):
            config.level = level.upper()
        if output := os.getenv("LOG_OUTPUT"):
            try:
                config.output = LogOutput(output.lower())
            except ValueError:
                pass
        if json_format := os.getenv("LOG_JSON"):
            config.json_format = _flag(json_format)
        if use_rich := os.getenv("LOG_RICH"):
            config.use_rich = _flag(use_rich)
        if mask := os.getenv("LOG_MASK_SENSITIVE"):
            config.mask_sensitive = _flag(mask)
        if log_file := os.getenv("LOG_FILE"):
            config.log_file = Path(log_file)

        return config

    @staticmethod
    def detect_environment() -> Environment:
        env_name = os.getenv("CLASSBOOK_ENV", os.getenv("ENV", "")).lower()
        if env_name in ("prod", "production"):
            return Environment.PRODUCTION
        if env_name in ("test", "testing") or os.getenv("PYTEST_CURRENT_TEST"):
            return Environment.TESTING
        return Environment.DEVELOPMENT

    @classmethod
    def defaults_for(cls, env: Environment) -> LogConfig:
        if env == Environment.PRODUCTION:
            return cls(level="INFO", output=LogOutput.BOTH, json_format=True, use_rich=False)
        if env == Environment.TESTING:
            return cls(level="DEBUG", use_rich=False)
        return cls(level="DEBUG", use_rich=True)


_config: LogConfig | None = None


def get_config() -> LogConfig:
    global _config
    if _config is None:
        _config = LogConfig.from_env()
    return _config


def set_config(config: LogConfig) -> None:
    global _config
    _config = config


def reset_config() -> None:
    global _config
    _config = None
