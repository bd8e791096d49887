from __future__ import annotations

"""
Unit tests for the Resolver.

Verifies:
1. Successful lookups through nested manifests.
2. TargetNotFoundError for missing segments and leaves with extra segments.
3. Accessor preconditions and lazy, per-branch parsing.
4. Index mode listing.
"""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from hearth.core import manifest as manifest_module
from hearth.core.registry import LocationRegistry
from hearth.core.resolver import Resolver
from hearth.domain.errors import (
    IllegalStateError,
    InvalidArgumentError,
    ManifestNotFoundError,
    ManifestParseError,
    TargetNotFoundError,
)


@pytest.fixture
def resolver(project: Path, monkeypatch) -> Resolver:
    monkeypatch.chdir(project)
    return Resolver(LocationRegistry(str(project))).set_initial_manifest_path(".hearth.yml")


def test_lookup_nested_target(resolver: Resolver, project: Path) -> None:
    resolver.lookup(["a", "b"])

    assert resolver.get_target_file() == str(project / "targets" / "b.py")
    assert resolver.get_target_class_name() == "targets.b.BTarget"
    assert resolver.get_resolved().path == ("a", "b")


def test_lookup_top_level_target(resolver: Resolver, project: Path) -> None:
    resolver.lookup(["demo"])
    assert resolver.get_target_file() == str(project / "targets" / "demo.py")


def test_lookup_missing_segment_reports_segment(resolver: Resolver) -> None:
    with pytest.raises(TargetNotFoundError) as exc:
        resolver.lookup(["a", "c"])

    assert exc.value.segment == "c"
    assert exc.value.walked == ("a",)
    assert "'c'" in str(exc.value)


def test_lookup_leaf_before_path_exhausted(resolver: Resolver) -> None:
    with pytest.raises(TargetNotFoundError) as exc:
        resolver.lookup(["a", "b", "extra"])

    assert exc.value.segment == "extra"
    assert exc.value.walked == ("a", "b")


def test_lookup_ending_on_manifest_is_not_a_target(resolver: Resolver) -> None:
    with pytest.raises(TargetNotFoundError) as exc:
        resolver.lookup(["a"])
    assert exc.value.segment == "a"


def test_lookup_empty_path_fails(resolver: Resolver) -> None:
    with pytest.raises(TargetNotFoundError):
        resolver.lookup([])


def test_lookup_rejects_bare_string(resolver: Resolver) -> None:
    with pytest.raises(InvalidArgumentError):
        resolver.lookup("a/b")


def test_accessors_before_lookup_raise_illegal_state(resolver: Resolver) -> None:
    with pytest.raises(IllegalStateError):
        resolver.get_target_file()
    with pytest.raises(IllegalStateError):
        resolver.get_target_class_name()
    with pytest.raises(IllegalStateError):
        resolver.get_index()


def test_failed_lookup_clears_previous_resolution(resolver: Resolver) -> None:
    resolver.lookup(["demo"])
    with pytest.raises(TargetNotFoundError):
        resolver.lookup(["missing"])
    with pytest.raises(IllegalStateError):
        resolver.get_target_file()


def test_lookup_parses_only_the_walked_branch(project: Path, write_file, monkeypatch) -> None:
    write_file(project / "other" / ".hearth.yml", "broken: [\n")
    with open(project / ".hearth.yml", "a", encoding="utf-8") as f:
        f.write("other:\n  manifest: other\n")
    monkeypatch.chdir(project)

    calls = []
    original = manifest_module.parse_manifest

    def spy(path):
        calls.append(path)
        return original(path)

    with patch.object(manifest_module, "parse_manifest", side_effect=spy):
        resolver = Resolver(LocationRegistry(str(project)))
        resolver.lookup(["a", "b"])

    assert calls == [str(project / ".hearth.yml"), str(project / "a" / ".hearth.yml")]

    with pytest.raises(ManifestParseError):
        Resolver(LocationRegistry(str(project))).index()


def test_missing_initial_manifest(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    with pytest.raises(ManifestNotFoundError):
        Resolver().lookup(["demo"])
    with pytest.raises(ManifestNotFoundError):
        Resolver().index()


def test_missing_nested_manifest_is_target_not_found(tmp_path: Path, write_file, monkeypatch) -> None:
    write_file(tmp_path / ".hearth.yml", """
        ext:
          manifest: vendor/ext
    """)
    monkeypatch.chdir(tmp_path)

    with pytest.raises(TargetNotFoundError) as exc:
        Resolver(LocationRegistry(str(tmp_path))).lookup(["ext", "x"])
    assert exc.value.segment == "ext"
    assert "not found in any location" in str(exc.value)


def test_first_registered_location_wins(tmp_path: Path, write_file, monkeypatch) -> None:
    root = tmp_path / "root"
    first = tmp_path / "first"
    second = tmp_path / "second"
    write_file(root / ".hearth.yml", """
        lib:
          manifest: lib
    """)
    for loc, cls in ((first, "First"), (second, "Second")):
        write_file(loc / "lib" / ".hearth.yml", f"""
            build:
              file: lib/{cls.lower()}.py
              class: lib.{cls}
        """)
        write_file(loc / "lib" / f"{cls.lower()}.py", f"class {cls}:\n    def main(self):\n        pass\n")
    monkeypatch.chdir(root)

    registry = LocationRegistry([str(first), str(second)])
    for _ in range(3):
        resolver = Resolver(registry).set_initial_manifest_path(".hearth.yml")
        resolver.lookup(["lib", "build"])
        assert resolver.get_target_class_name() == "lib.First"
        assert resolver.get_target_file() == str(first / "lib" / "first.py")


def test_empty_registry_falls_back_to_manifest_directory(project: Path, monkeypatch) -> None:
    monkeypatch.chdir(project)
    resolver = Resolver()
    resolver.lookup(["a", "b"])
    assert resolver.get_target_file() == str(project / "targets" / "b.py")


def test_custom_directory_separator_translates_references(project: Path, monkeypatch) -> None:
    monkeypatch.chdir(project)
    resolver = Resolver(LocationRegistry(str(project))).set_directory_separator(os.sep)
    resolver.lookup(["demo"])
    assert os.path.isfile(resolver.get_target_file())


def test_index_lists_every_target(resolver: Resolver, output) -> None:
    resolver.set_output(output).index()

    assert [e.path for e in resolver.get_index()] == ["demo", "a/b"]
    assert output.texts == ["  demo  - Demo target", "  a/b"]


def test_index_of_empty_manifest(tmp_path: Path, output, monkeypatch) -> None:
    (tmp_path / ".hearth.yml").write_text("", encoding="utf-8")
    monkeypatch.chdir(tmp_path)

    resolver = Resolver().set_output(output)
    resolver.index()

    assert resolver.get_index() == []
    assert output.texts == ["No targets defined."]


@pytest.mark.parametrize("setter, value", [
    ("set_initial_manifest_path", ""),
    ("set_initial_manifest_path", 5),
    ("set_directory_separator", ""),
    ("set_directory_separator", None),
])
def test_setters_validate_input(setter: str, value) -> None:
    with pytest.raises(InvalidArgumentError):
        getattr(Resolver(), setter)(value)
