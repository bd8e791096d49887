from __future__ import annotations

"""
Unit tests for the Location Registry.

Verifies:
1. Insertion order and duplicate skipping.
2. Rejection of non-string candidates without partial mutation.
3. First-registered-wins search semantics.
"""

import os

import pytest

from hearth.core.registry import LocationRegistry
from hearth.domain.errors import InvalidConfigurationError


def test_add_single_location_returns_self() -> None:
    registry = LocationRegistry()
    assert registry.add_locations("/opt/a") is registry
    assert registry.locations == ("/opt/a",)


def test_distinct_locations_preserve_insertion_order() -> None:
    registry = LocationRegistry().add_locations(["/c", "/a", "/b"])
    assert list(registry) == ["/c", "/a", "/b"]
    assert len(registry) == 3


def test_duplicate_location_is_silently_skipped() -> None:
    registry = LocationRegistry(["/a", "/b"])
    registry.add_locations("/a").add_locations(["/b", "/a"])
    assert registry.locations == ("/a", "/b")


def test_duplicates_within_one_call_are_collapsed() -> None:
    registry = LocationRegistry().add_locations(["/a", "/a", "/b"])
    assert registry.locations == ("/a", "/b")


@pytest.mark.parametrize("bad", [42, None, 3.5, b"/bytes", ["/ok", 7], [{"path": "/x"}]])
def test_non_string_location_raises_and_leaves_registry_unmodified(bad) -> None:
    registry = LocationRegistry(["/existing"])
    with pytest.raises(InvalidConfigurationError):
        registry.add_locations(bad)
    assert registry.locations == ("/existing",)


def test_adding_does_not_touch_filesystem(tmp_path) -> None:
    missing = str(tmp_path / "does-not-exist")
    registry = LocationRegistry(missing)
    assert missing in registry
    assert not os.path.exists(missing)


def test_find_prefers_first_registered_location(tmp_path) -> None:
    first = tmp_path / "first"
    second = tmp_path / "second"
    for root in (first, second):
        (root / "shared").mkdir(parents=True)
        (root / "shared" / "unit.py").write_text("x = 1", encoding="utf-8")

    registry = LocationRegistry([str(first), str(second)])
    for _ in range(3):
        assert registry.find(os.path.join("shared", "unit.py")) == str(first / "shared" / "unit.py")


def test_find_skips_locations_without_match(tmp_path) -> None:
    first = tmp_path / "first"
    second = tmp_path / "second"
    first.mkdir()
    (second / "pkg").mkdir(parents=True)
    (second / "pkg" / "x.py").write_text("", encoding="utf-8")

    registry = LocationRegistry([str(first), str(second)])
    assert registry.find(os.path.join("pkg", "x.py"), os.path.isfile) == str(second / "pkg" / "x.py")
    assert registry.find("nope.py") is None
