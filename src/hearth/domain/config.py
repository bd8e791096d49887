from __future__ import annotations

"""
Configuration Domain Management.

Handles persistent storage of tool preferences (manifest name, extra search
locations, console styles, logging) as JSON in the user data directory,
with default fallback when the file is missing or corrupted.
"""

import json
import logging
import os
from typing import Any, Dict, Optional

from hearth.domain.constants import (
    DEFAULT_BANNER_STYLE,
    DEFAULT_FAILURE_STYLE,
    DEFAULT_MANIFEST_NAME,
)
from hearth.infra.fs import get_user_data_dir

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Constants & Defaults
# -----------------------------------------------------------------------------
CONFIG_FILE_NAME = "config.json"
CURRENT_CONFIG_VERSION = "1.0.0"


def get_config_path() -> str:
    """Absolute path of the persistent configuration file."""
    return os.path.join(get_user_data_dir(), CONFIG_FILE_NAME)


def get_default_config() -> Dict[str, Any]:
    """
    Generate the default runtime configuration.

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    return {
        # Resolution
        "manifest_name": DEFAULT_MANIFEST_NAME,
        "locations": [],

        # Presentation
        "banner_style": dict(DEFAULT_BANNER_STYLE),
        "failure_style": dict(DEFAULT_FAILURE_STYLE),

        # Diagnostics
        "log_level": "WARNING",
        "log_file": None,
    }


# -----------------------------------------------------------------------------
# Persistence Logic
# -----------------------------------------------------------------------------
def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load configuration from disk, merged over the defaults.

    Unknown keys are kept so the validator can report them. A missing or
    unreadable file yields the defaults.

    Args:
        path: Optional explicit file; defaults to the user data dir file.

    Returns:
        Dict[str, Any]: The merged configuration.
    """
    config_path = path or get_config_path()
    config = get_default_config()

    if not os.path.exists(config_path):
        logger.debug(f"Config file not found at {config_path}. Using defaults.")
        return config

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load config {config_path}: {e}. Using defaults.")
        return config

    if not isinstance(data, dict):
        logger.warning("Corrupted config file. Using defaults.")
        return config

    data.pop("version", None)
    config.update(data)
    return config


def save_config(config: Dict[str, Any], path: Optional[str] = None) -> bool:
    """
    Persist configuration to disk, stamped with the current schema version.

    Args:
        config: The configuration dictionary to save.
        path: Optional explicit file; defaults to the user data dir file.

    Returns:
        bool: True if the file was written.
    """
    config_path = path or get_config_path()
    payload = dict(config)
    payload["version"] = CURRENT_CONFIG_VERSION
    try:
        os.makedirs(os.path.dirname(os.path.abspath(config_path)), exist_ok=True)
        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, indent=4)
        logger.debug(f"Configuration saved to {config_path}")
    except OSError as e:
        logger.error(f"Failed to save configuration: {e}")
        return False
    return True
