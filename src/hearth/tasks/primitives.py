from __future__ import annotations

"""
Task Primitive Catalog.

Built-in, name-addressed build actions that task units invoke through
Target.task(). Each primitive validates its own parameters and reports
failures as BuildError.
"""

import logging
import os
import shutil
import subprocess
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from hearth.domain.errors import BuildError

logger = logging.getLogger(__name__)

TaskFunction = Callable[..., Any]


class TaskRegistry:
    """Mapping of primitive names to callables."""

    def __init__(self) -> None:
        self._tasks: Dict[str, TaskFunction] = {}

    def register(self, name: str) -> Callable[[TaskFunction], TaskFunction]:
        """
        Decorator registering a primitive under the given name.

        Args:
            name: Public task name used by Target.task().
        """
        def decorator(func: TaskFunction) -> TaskFunction:
            self._tasks[name] = func
            return func
        return decorator

    def run(self, name: str, *args: Any, **kwargs: Any) -> Any:
        """
        Execute a registered primitive.

        Raises:
            BuildError: If the name is unknown or the primitive fails for any reason.
        """
        func = self._tasks.get(name)
        if func is None:
            raise BuildError(f"Unknown task '{name}'. Available: {', '.join(self.names())}")

        logger.debug(f"Task '{name}' args={args!r}")
        try:
            return func(*args, **kwargs)
        except BuildError:
            raise
        except OSError as e:
            raise BuildError(f"Task '{name}' failed: {e}") from e
        except Exception as e:
            raise BuildError(f"Task '{name}' failed: {type(e).__name__}: {e}") from e

    def names(self) -> List[str]:
        return sorted(self._tasks)

    def __contains__(self, name: object) -> bool:
        return name in self._tasks


DEFAULT_TASKS = TaskRegistry()


# -----------------------------------------------------------------------------
# BUILT-IN PRIMITIVES
# -----------------------------------------------------------------------------

def parse_mode(mode: Union[int, str]) -> int:
    """
    Interpret a permission mode written as octal digits.

    Accepts 777, "777", "0o755" or "0755". Booleans are rejected.
    """
    if isinstance(mode, bool) or not isinstance(mode, (int, str)):
        raise BuildError(f"Invalid permission mode: {mode!r}")

    text = str(mode).strip().lower()
    if text.startswith("0o"):
        text = text[2:]
    try:
        value = int(text, 8)
    except ValueError:
        raise BuildError(f"Invalid permission mode: {mode!r}") from None

    if not 0 <= value <= 0o7777:
        raise BuildError(f"Permission mode out of range: {mode!r}")
    return value


def _require_paths(task: str, paths: Tuple[Any, ...]) -> None:
    if not paths:
        raise BuildError(f"Task '{task}' requires at least one path.")
    for p in paths:
        if not isinstance(p, (str, os.PathLike)):
            raise BuildError(f"Task '{task}' expects path arguments, received {p!r}.")


@DEFAULT_TASKS.register("chmod")
def chmod(mode: Union[int, str], *paths: str) -> None:
    """Change the permission bits of one or more paths."""
    _require_paths("chmod", paths)
    value = parse_mode(mode)
    for p in paths:
        os.chmod(p, value)
        logger.info(f"chmod {value:o} {p}")


@DEFAULT_TASKS.register("mkdir")
def mkdir(*paths: str) -> None:
    """Create directories, including parents. Existing directories are kept."""
    _require_paths("mkdir", paths)
    for p in paths:
        os.makedirs(p, exist_ok=True)
        logger.info(f"mkdir {p}")


@DEFAULT_TASKS.register("copy")
def copy(source: str, destination: str) -> None:
    """Copy a file or a directory tree."""
    _require_paths("copy", (source, destination))
    if os.path.isdir(source):
        shutil.copytree(source, destination, dirs_exist_ok=True)
    else:
        shutil.copy2(source, destination)
    logger.info(f"copy {source} -> {destination}")


@DEFAULT_TASKS.register("remove")
def remove(*paths: str) -> None:
    """Delete files or directory trees. Missing paths are ignored."""
    _require_paths("remove", paths)
    for p in paths:
        if os.path.isdir(p) and not os.path.islink(p):
            shutil.rmtree(p)
        elif os.path.lexists(p):
            os.remove(p)
        else:
            continue
        logger.info(f"remove {p}")


@DEFAULT_TASKS.register("exec")
def exec_command(*command: str, cwd: Optional[str] = None) -> int:
    """Run an external command; a non-zero exit status fails the build."""
    if not command:
        raise BuildError("Task 'exec' requires a command.")

    argv = [str(part) for part in command]
    logger.info(f"exec {' '.join(argv)}")
    completed = subprocess.run(argv, cwd=cwd)
    if completed.returncode != 0:
        raise BuildError(f"Command '{argv[0]}' exited with status {completed.returncode}.")
    return completed.returncode


@DEFAULT_TASKS.register("echo")
def echo(*parts: Any) -> None:
    logger.info(" ".join(str(p) for p in parts))
