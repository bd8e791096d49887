from __future__ import annotations

"""
Logging Configuration Model.

LoggingConfig carries everything configure_logging needs; from_config()
derives it from the validated application configuration.
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


@dataclass(frozen=True)
class LoggingConfig:
    """
    Logging setup for one hearth process.

    Diagnostics go to stderr so they never mix with the build report that
    the driver prints on stdout.

    Attributes:
        level: Minimum severity name (see _LEVEL_MAP); unknown names mean INFO.
        console: Emit diagnostics on stderr.
        log_file: Optional rotating log file.
        max_bytes: Rollover threshold of the log file.
        backup_count: Rotated files kept next to the log file.
    """
    level: str = "WARNING"
    console: bool = True
    log_file: Optional[str] = None

    max_bytes: int = 1024 * 1024
    backup_count: int = 3

    console_fmt: str = "hearth: %(levelname)s: %(message)s"
    file_fmt: str = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
    datefmt: str = "%Y-%m-%d %H:%M:%S"

    @classmethod
    def from_config(cls, conf: Mapping[str, Any], *, console: bool = True) -> "LoggingConfig":
        """Build from the 'log_level' and 'log_file' keys of an application config."""
        return cls(
            level=conf.get("log_level") or cls.level,
            console=console,
            log_file=conf.get("log_file") or None,
        )
