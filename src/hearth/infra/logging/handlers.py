from __future__ import annotations

"""
Handler factories for the logging subsystem.

Every handler created here is tagged, so reconfiguration only removes
hearth's own handlers and leaves those installed by task units alone.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional, TextIO

_HANDLER_TAG_ATTR: str = "_hearth_handler"


def _tag_handler(handler: logging.Handler) -> logging.Handler:
    setattr(handler, _HANDLER_TAG_ATTR, True)
    return handler


def _is_our_handler(handler: logging.Handler) -> bool:
    return bool(getattr(handler, _HANDLER_TAG_ATTR, False))


def _create_console_handler(
        level_int: int,
        fmt: str,
        stream: Optional[TextIO] = None,
) -> logging.Handler:
    """Diagnostics stream handler; defaults to stderr, resolved at call time."""
    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setLevel(level_int)
    handler.setFormatter(logging.Formatter(fmt))
    return _tag_handler(handler)


def _create_rotating_file_handler(
        log_file: str,
        level_int: int,
        formatter: logging.Formatter,
        max_bytes: int,
        backup_count: int,
) -> Optional[RotatingFileHandler]:
    """
    Open a rotating log file, creating its directory.

    A log file that cannot be opened must not abort a build, so the failure
    is reported on stderr and None is returned.
    """
    try:
        os.makedirs(os.path.dirname(os.path.abspath(log_file)), exist_ok=True)
        handler = RotatingFileHandler(
            log_file,
            maxBytes=int(max_bytes),
            backupCount=int(backup_count),
            encoding="utf-8",
        )
    except OSError as e:
        sys.stderr.write(f"hearth: cannot open log file '{log_file}': {e}\n")
        return None

    handler.setLevel(level_int)
    handler.setFormatter(formatter)
    _tag_handler(handler)
    return handler
