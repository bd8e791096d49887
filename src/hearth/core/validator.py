from __future__ import annotations

"""
Configuration Validation Service.

Gatekeeper between raw configuration sources (JSON file, CLI overrides)
and the driver. Coerces types, fills defaults and reports every correction
as a warning, or raises in strict mode.
"""

import logging
import os
from typing import Any, Dict, List, Optional, Tuple

from hearth.domain.config import get_default_config
from hearth.domain.constants import STYLE_KEYS
from hearth.domain.errors import InvalidConfigurationError
from hearth.infra.logging.config import _LEVEL_MAP

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def validate_config(
        config: Any,
        *,
        strict: bool = False,
) -> Tuple[Dict[str, Any], List[str]]:
    """
    Validate and normalize a configuration dictionary.

    Args:
        config: Raw configuration data (usually a dictionary).
        strict: If True, raise InvalidConfigurationError instead of correcting.

    Returns:
        Tuple[Dict[str, Any], List[str]]: Normalized configuration and warnings.
    """
    warnings: List[str] = []
    defaults = get_default_config()

    if not isinstance(config, dict):
        msg = f"Invalid config type: expected dict, received {type(config).__name__}."
        _reject(msg, warnings, strict, "Using defaults.")
        return defaults, warnings

    unknown = sorted(str(k) for k in set(config) - set(defaults))
    for key in unknown:
        _reject(f"Unknown configuration key '{key}'.", warnings, strict, "Ignored.")

    merged: Dict[str, Any] = dict(defaults)
    merged.update({k: v for k, v in config.items() if k in defaults})

    merged["manifest_name"] = _as_manifest_name(
        merged.get("manifest_name"), defaults["manifest_name"], warnings, strict
    )
    merged["locations"] = _as_locations(merged.get("locations"), warnings, strict)
    merged["banner_style"] = _as_style(
        merged.get("banner_style"), defaults["banner_style"], "banner_style", warnings, strict
    )
    merged["failure_style"] = _as_style(
        merged.get("failure_style"), defaults["failure_style"], "failure_style", warnings, strict
    )
    merged["log_level"] = _as_level(merged.get("log_level"), defaults["log_level"], warnings, strict)
    merged["log_file"] = _as_optional_str(merged.get("log_file"), "log_file", warnings, strict)

    return merged, warnings


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _reject(msg: str, warnings: List[str], strict: bool, action: str) -> None:
    if strict:
        raise InvalidConfigurationError(msg)
    warnings.append(f"{msg} {action}")
    logger.debug(msg)


def _as_manifest_name(value: Any, fallback: str, warnings: List[str], strict: bool) -> str:
    if isinstance(value, str) and value.strip():
        name = value.strip()
        if os.path.basename(name) != name:
            _reject(f"Invalid field 'manifest_name': '{name}' must be a file name.",
                    warnings, strict, "Using fallback.")
            return fallback
        return name

    _reject("Invalid field 'manifest_name': expected a non-empty str.", warnings, strict, "Using fallback.")
    return fallback


def _as_locations(value: Any, warnings: List[str], strict: bool) -> List[str]:
    """Accept a list of strings or a CSV string; drop invalid items."""
    if value is None:
        return []

    if isinstance(value, str):
        items = [x.strip() for x in value.split(",") if x.strip()]
        if len(items) > 1:
            warnings.append("Field 'locations' converted from CSV string to list.")
        return items

    if not isinstance(value, list):
        _reject(f"Invalid field 'locations': expected list[str], received {type(value).__name__}.",
                warnings, strict, "Using fallback.")
        return []

    out: List[str] = []
    for i, item in enumerate(value):
        if not isinstance(item, str):
            _reject(f"Invalid item in 'locations[{i}]': expected str.", warnings, strict, "Item discarded.")
            continue
        if item.strip():
            out.append(item.strip())
    return out


def _as_style(
        value: Any,
        fallback: Dict[str, Optional[str]],
        field: str,
        warnings: List[str],
        strict: bool,
) -> Dict[str, Optional[str]]:
    if value is None:
        return dict(fallback)
    if not isinstance(value, dict):
        _reject(f"Invalid field '{field}': expected a mapping.", warnings, strict, "Using fallback.")
        return dict(fallback)

    style: Dict[str, Optional[str]] = {}
    for key in STYLE_KEYS:
        item = value.get(key)
        if item is not None and not isinstance(item, str):
            _reject(f"Invalid option '{field}.{key}': expected str.", warnings, strict, "Option cleared.")
            item = None
        style[key] = item

    for key in sorted(str(k) for k in set(value) - set(STYLE_KEYS)):
        _reject(f"Unrecognized option '{field}.{key}'.", warnings, strict, "Ignored.")
    return style


def _as_level(value: Any, fallback: str, warnings: List[str], strict: bool) -> str:
    if isinstance(value, str) and value.strip().upper() in _LEVEL_MAP:
        return value.strip().upper()
    _reject(f"Invalid field 'log_level': {value!r}.", warnings, strict, "Using fallback.")
    return fallback


def _as_optional_str(value: Any, field: str, warnings: List[str], strict: bool) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, str):
        return value.strip() or None
    _reject(f"Invalid field '{field}': expected str, received {type(value).__name__}.",
            warnings, strict, "Using fallback.")
    return None
