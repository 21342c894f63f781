"""
Logger configuration, built in code or read from the environment.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Any, Optional

_TRUTHY = ("1", "true", "yes", "on")


def _env_flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() in _TRUTHY


@dataclass(frozen=True)
class LoggerConfig:
    """
    Settings for the ``truckmates_ai`` logger tree.

    Handlers are attached to ``root_name``; every module logger obtained with
    ``logging.getLogger(__name__)`` inside the package inherits them.
    """

    level: str = "INFO"
    # Directory for the JSON rotating file; None disables the file handler
    log_dir: Optional[str] = None
    log_file_basename: str = "truckmates_ai"
    max_bytes: int = 5 * 1024 * 1024
    backup_count: int = 5
    root_name: str = "truckmates_ai"
    console: bool = True
    # "plain" for human-readable lines, "json" to emit JSON Lines on the console too
    console_style: str = "plain"

    @classmethod
    def from_env(cls) -> "LoggerConfig":
        """Build from LOG_LEVEL, LOG_DIR, LOG_FILE_BASENAME, LOG_MAX_BYTES,
        LOG_BACKUP_COUNT, LOG_ROOT_NAME, LOG_CONSOLE and LOG_CONSOLE_STYLE."""
        return cls(
            level=os.environ.get("LOG_LEVEL", "INFO").upper(),
            log_dir=os.environ.get("LOG_DIR") or None,
            log_file_basename=os.environ.get("LOG_FILE_BASENAME", "truckmates_ai"),
            max_bytes=int(os.environ.get("LOG_MAX_BYTES", str(5 * 1024 * 1024))),
            backup_count=int(os.environ.get("LOG_BACKUP_COUNT", "5")),
            root_name=os.environ.get("LOG_ROOT_NAME", "truckmates_ai"),
            console=_env_flag("LOG_CONSOLE", "true"),
            console_style=os.environ.get("LOG_CONSOLE_STYLE", "plain").lower(),
        )

    def with_overrides(self, **overrides: Any) -> "LoggerConfig":
        """Return a copy with the non-None overrides applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})
