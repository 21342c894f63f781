"""
Logger setup: attach console and rotating JSON file handlers from a LoggerConfig.
"""
from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional

from truckmates_ai.core.logger.config import LoggerConfig
from truckmates_ai.core.logger.formatters import JsonFormatter, PlainConsoleFormatter

_active_config: Optional[LoggerConfig] = None


def _level(name: str) -> int:
    return getattr(logging, name.upper(), logging.INFO)


def configure(config: Optional[LoggerConfig] = None) -> LoggerConfig:
    """
    Configure the package logger tree. Safe to call more than once: existing
    handlers on the root are replaced, not duplicated.
    """
    global _active_config
    config = config or LoggerConfig.from_env()
    _active_config = config

    root = logging.getLogger(config.root_name)
    root.setLevel(_level(config.level))
    root.handlers.clear()

    if config.console:
        formatter = JsonFormatter() if config.console_style == "json" else PlainConsoleFormatter()
        root.addHandler(build_console_handler(config.level, formatter=formatter))

    if config.log_dir and config.log_dir.strip():
        try:
            root.addHandler(
                build_rotating_file_handler(
                    config.log_dir,
                    basename=config.log_file_basename,
                    max_bytes=config.max_bytes,
                    backup_count=config.backup_count,
                    level=config.level,
                )
            )
        except OSError as exc:
            root.warning("Logger: cannot write to %s (%s), file handler skipped", config.log_dir, exc)

    root.propagate = False
    return config


def get_logger(name: str) -> logging.Logger:
    """Return a named logger, configuring the tree from env on first use."""
    if _active_config is None:
        configure()
    return logging.getLogger(name)


def build_rotating_file_handler(
    log_dir: str,
    basename: str = "truckmates_ai",
    max_bytes: int = 5 * 1024 * 1024,
    backup_count: int = 5,
    level: str = "INFO",
) -> RotatingFileHandler:
    """Rotating file handler writing JSON Lines to ``<log_dir>/<basename>.log``."""
    os.makedirs(log_dir, exist_ok=True)
    handler = RotatingFileHandler(
        os.path.join(log_dir, f"{basename}.log"),
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
    )
    handler.setLevel(_level(level))
    handler.setFormatter(JsonFormatter())
    return handler


def build_console_handler(
    level: str = "INFO",
    *,
    formatter: Optional[logging.Formatter] = None,
) -> logging.StreamHandler:
    handler = logging.StreamHandler()
    handler.setLevel(_level(level))
    handler.setFormatter(formatter or PlainConsoleFormatter())
    return handler
