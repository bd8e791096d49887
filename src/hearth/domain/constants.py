from __future__ import annotations

"""
Domain Constants.

Centralizes the names, separators, exit codes and console styles shared by
the resolution engine and the interface layer.
"""

import os
from typing import Dict, Optional

# -----------------------------------------------------------------------------
# MANIFEST CONVENTIONS
# -----------------------------------------------------------------------------

DEFAULT_MANIFEST_NAME = ".hearth.yml"

# Separator used inside target paths and manifest values, independent of OS
TARGET_PATH_SEPARATOR = "/"
DEFAULT_DIRECTORY_SEPARATOR = os.sep

# Keys recognized inside a manifest entry
KEY_FILE = "file"
KEY_CLASS = "class"
KEY_MANIFEST = "manifest"

ENTRY_KIND_TARGET = "target"
ENTRY_KIND_MANIFEST = "manifest"

# -----------------------------------------------------------------------------
# PROCESS EXIT CODES
# -----------------------------------------------------------------------------

EXIT_SUCCESS = 0
EXIT_BUILD_FAILED = 1
EXIT_USAGE_ERROR = 2

# -----------------------------------------------------------------------------
# CONSOLE STYLES
# -----------------------------------------------------------------------------

STYLE_KEYS = ("foreground", "background", "attribute")

DEFAULT_BANNER_STYLE: Dict[str, Optional[str]] = {
    "foreground": "cyan",
    "background": None,
    "attribute": None,
}

DEFAULT_FAILURE_STYLE: Dict[str, Optional[str]] = {
    "foreground": "red",
    "background": None,
    "attribute": "bold",
}

DEFAULT_SUCCESS_STYLE: Dict[str, Optional[str]] = {
    "foreground": "green",
    "background": None,
    "attribute": "bold",
}

FAILURE_BANNER = "BUILD FAILED"
SUCCESS_BANNER = "BUILD SUCCESSFUL"
