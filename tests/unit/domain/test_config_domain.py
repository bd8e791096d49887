from __future__ import annotations

"""
Unit tests for the Config Domain.

Verifies:
1. Default configuration generation.
2. Resilience against missing or corrupted config files.
3. Persistence (Save/Load) without touching real user data.
"""

import json
from unittest.mock import patch

import pytest

from hearth.domain.config import (
    CURRENT_CONFIG_VERSION,
    get_config_path,
    get_default_config,
    load_config,
    save_config,
)


@pytest.fixture
def mock_user_data_dir(tmp_path):
    """Redirect the user data directory to a temporary folder."""
    config_dir = tmp_path / "Hearth"
    config_dir.mkdir()
    with patch("hearth.domain.config.get_user_data_dir", return_value=str(config_dir)):
        yield config_dir


def test_default_config_uses_hearth_manifest() -> None:
    cfg = get_default_config()
    assert cfg["manifest_name"] == ".hearth.yml"
    assert cfg["locations"] == []


def test_defaults_are_independent_copies() -> None:
    first = get_default_config()
    first["locations"].append("/tmp")
    first["banner_style"]["foreground"] = "red"

    second = get_default_config()
    assert second["locations"] == []
    assert second["banner_style"]["foreground"] == "cyan"


def test_config_path_lives_in_user_data_dir(mock_user_data_dir) -> None:
    assert get_config_path() == str(mock_user_data_dir / "config.json")


def test_missing_file_returns_defaults(mock_user_data_dir) -> None:
    assert load_config() == get_default_config()


def test_corrupted_file_returns_defaults(mock_user_data_dir) -> None:
    (mock_user_data_dir / "config.json").write_text("{ not json", encoding="utf-8")
    assert load_config() == get_default_config()


def test_non_dict_payload_returns_defaults(mock_user_data_dir) -> None:
    (mock_user_data_dir / "config.json").write_text("[1, 2]", encoding="utf-8")
    assert load_config() == get_default_config()


def test_save_then_load_merges_over_defaults(mock_user_data_dir) -> None:
    save_config({"locations": ["/shared/targets"], "log_level": "DEBUG"})

    raw = json.loads((mock_user_data_dir / "config.json").read_text(encoding="utf-8"))
    assert raw["version"] == CURRENT_CONFIG_VERSION

    cfg = load_config()
    assert cfg["locations"] == ["/shared/targets"]
    assert cfg["log_level"] == "DEBUG"
    assert cfg["manifest_name"] == ".hearth.yml"
    assert "version" not in cfg


def test_explicit_path_overrides_user_data_dir(tmp_path) -> None:
    path = tmp_path / "custom.json"
    save_config({"manifest_name": "build.yml"}, path=str(path))
    assert load_config(str(path))["manifest_name"] == "build.yml"
