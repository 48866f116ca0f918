from __future__ import annotations

"""
Logging Configuration Models.

Defines the configuration dataclass used to initialize the logging
subsystem, built from the ``app_settings`` section of the saved
application state.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

_LEVEL_MAP: Dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

# Quiet by default: stdout carries the heatmap itself, stderr only problems
DEFAULT_LEVEL = "WARNING"


@dataclass(frozen=True)
class LoggingConfig:
    """
    Immutable specification for the logging subsystem initialization.

    Attributes:
        level: Minimum severity level to capture.
        console: Flag to enable stderr stream output.
        log_file: Optional absolute path for persistent file storage.
        max_bytes: Maximum size per log segment before rotation. One run
                   logs a line per rejected record, so segments stay small.
        backup_count: Number of historical log segments to preserve.
        console_fmt: Format for terminal output.
        file_fmt: Format for file entries; carries the thread name so
                  background dataset loads can be told apart.
        datefmt: Timestamp format.
    """
    level: str = DEFAULT_LEVEL
    console: bool = True
    log_file: Optional[str] = None

    max_bytes: int = 512 * 1024
    backup_count: int = 3

    console_fmt: str = "codeheatmap: %(levelname)s: %(message)s"
    file_fmt: str = "%(asctime)s | %(levelname)s | %(threadName)s | %(name)s | %(message)s"
    datefmt: str = "%Y-%m-%d %H:%M:%S"

    @classmethod
    def from_app_settings(
            cls,
            settings: Mapping[str, Any],
            *,
            debug: bool = False,
            log_path: Optional[str] = None,
    ) -> "LoggingConfig":
        """
        Build the configuration from the saved ``app_settings`` section.

        Args:
            settings: Mapping with ``log_level`` and ``log_to_file``.
            debug: Force DEBUG regardless of the saved level.
            log_path: File used when ``log_to_file`` is enabled.

        Returns:
            LoggingConfig: Console logging, plus the file when enabled.
        """
        level = "DEBUG" if debug else str(settings.get("log_level") or DEFAULT_LEVEL)
        log_file = log_path if settings.get("log_to_file") is True else None
        return cls(level=level, console=True, log_file=log_file)
