from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Provides cross-platform path manipulation and the ordered filesystem search
used to locate nested manifests and task-unit sources. Acts as an
abstraction over the 'os' module to ensure uniform behavior across Windows
and Unix-like systems.
"""

import os
from typing import Callable, Iterable, Optional

# -----------------------------------------------------------------------------
# GLOBAL CONSTANTS
# -----------------------------------------------------------------------------

APP_DIR_NAME = "Hearth"
UNIX_APP_DIR_NAME = ".hearth"

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def get_user_data_dir() -> str:
    """
    Resolve the standard OS-specific directory for persistent application data.

    Automatically creates the hierarchy if it does not exist.
    Standards:
    - Windows: %LOCALAPPDATA%/Hearth
    - Linux/Mac: ~/.hearth

    Returns:
        str: Absolute path to the application data directory.
    """
    path: str = ""

    # Windows specific resolution
    if os.name == "nt":
        base = os.environ.get("LOCALAPPDATA") or os.environ.get("APPDATA")
        if base:
            path = os.path.join(base, APP_DIR_NAME)

    # Posix fallback (Linux/Mac)
    if not path:
        path = os.path.join(os.path.expanduser("~"), UNIX_APP_DIR_NAME)

    # Idempotent directory creation
    try:
        os.makedirs(path, exist_ok=True)
    except OSError:
        pass

    return os.path.abspath(path)


def normalize_path(path: Optional[str], fallback: str) -> str:
    """
    Normalize a path string into an absolute filesystem path.

    Handles environment variable expansion ($VAR/%VAR%) and user home
    shortcuts (~/). Reverts to fallback if the input is empty.

    Args:
        path: Raw input path string.
        fallback: Default path to use if the input is blank.

    Returns:
        str: Normalized absolute path.
    """
    p = (path or "").strip()
    if not p:
        p = fallback
    p = os.path.expandvars(os.path.expanduser(p))
    return os.path.abspath(p)


def to_native(relative: str, separator: str) -> str:
    """Translate a '/'-delimited document path into the configured separator."""
    if separator == "/":
        return relative
    return relative.replace("/", separator)

# -----------------------------------------------------------------------------
# ORDERED SEARCH API
# -----------------------------------------------------------------------------

def find_in_roots(
        roots: Iterable[str],
        relative: str,
        predicate: Callable[[str], bool] = os.path.exists,
) -> Optional[str]:
    """
    Return the first '<root>/<relative>' candidate accepted by the predicate.

    Roots are visited in the given order, so the first root holding a match
    wins. Absolute paths bypass the roots entirely.

    Args:
        roots: Search roots in priority order.
        relative: Path to look for under each root.
        predicate: Acceptance test for a candidate path.

    Returns:
        Optional[str]: Absolute path of the match, or None.
    """
    if os.path.isabs(relative):
        return relative if predicate(relative) else None

    for root in roots:
        candidate = os.path.abspath(os.path.join(normalize_path(root, os.getcwd()), relative))
        if predicate(candidate):
            return candidate
    return None
