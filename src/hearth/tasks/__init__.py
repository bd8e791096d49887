from __future__ import annotations

from .base import Target
from .primitives import DEFAULT_TASKS, TaskRegistry, parse_mode

__all__ = [
    "Target",
    "TaskRegistry",
    "DEFAULT_TASKS",
    "parse_mode",
]
