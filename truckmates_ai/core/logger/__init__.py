"""
Project logger: console plus optional rotating JSON file.

Usage:
    from truckmates_ai.core.logger import configure, LoggerConfig

    # Once at startup (the API lifespan does this); env is used when no config is given
    configure(LoggerConfig(level="DEBUG", log_dir="/var/log/truckmates"))

    # Library modules keep using the standard pattern
    logger = logging.getLogger(__name__)
"""
from truckmates_ai.core.logger.config import LoggerConfig
from truckmates_ai.core.logger.formatters import JsonFormatter, PlainConsoleFormatter
from truckmates_ai.core.logger.setup import (
    build_console_handler,
    build_rotating_file_handler,
    configure,
    get_logger,
)

__all__ = [
    "LoggerConfig",
    "JsonFormatter",
    "PlainConsoleFormatter",
    "configure",
    "get_logger",
    "build_rotating_file_handler",
    "build_console_handler",
]
