from __future__ import annotations

"""
Task Unit Contract.

Every user-authored build target subclasses Target, takes no constructor
arguments and implements main(). Build steps are expressed as calls to
named task primitives through task().
"""

from abc import ABC, abstractmethod
from typing import Any

from hearth.tasks.primitives import DEFAULT_TASKS, TaskRegistry


class Target(ABC):
    """
    Abstract base class for task units.

    Attributes:
        tasks: Registry the task() calls are dispatched to. Subclasses may
            point this at their own registry.
    """

    tasks: TaskRegistry = DEFAULT_TASKS

    @abstractmethod
    def main(self) -> None:
        """Main task target procedure."""

    def task(self, name: str, *args: Any, **kwargs: Any) -> Any:
        """
        Invoke a named task primitive.

        Args:
            name: Primitive name (e.g. 'chmod').
            *args: Positional parameters forwarded untouched.

        Raises:
            BuildError: If the primitive is unknown or fails.
        """
        return self.tasks.run(name, *args, **kwargs)
