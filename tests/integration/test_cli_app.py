from __future__ import annotations

"""
Integration tests for the CLI application controller.

Runs hearth.interface.cli.app.main in-process against a sample project,
with the persisted configuration redirected to a temporary directory.
"""

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from hearth.domain.config import load_config, save_config
from hearth.infra.logging import shutdown_logging
from hearth.interface.cli import app


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path: Path):
    config_dir = tmp_path / "userdata"
    config_dir.mkdir()
    with patch("hearth.domain.config.get_user_data_dir", return_value=str(config_dir)):
        yield config_dir
    shutdown_logging()


def test_list_mode_exits_zero(project: Path, output, monkeypatch) -> None:
    monkeypatch.chdir(project)

    code = app.main([], output=output)

    assert code == 0
    assert "  demo  - Demo target" in output.texts
    assert "  a/b" in output.texts


def test_runs_target(project: Path, output, monkeypatch) -> None:
    monkeypatch.chdir(project)

    assert app.main(["demo"], output=output) == 0
    assert (project / "build" / "DemoTarget").is_dir()


def test_unknown_target_exits_one(project: Path, output, monkeypatch) -> None:
    monkeypatch.chdir(project)

    assert app.main(["a/c"], output=output) == 1
    assert "BUILD FAILED" in output.texts


def test_extra_location_from_cli(tmp_path: Path, project: Path, write_file, output, monkeypatch) -> None:
    shared = tmp_path / "shared"
    write_file(shared / "tools" / ".hearth.yml", """
        lint:
          file: tools/lint.py
          class: tools.lint.Lint
    """)
    write_file(shared / "tools" / "lint.py", """
        from hearth.tasks import Target


        class Lint(Target):
            def main(self):
                self.task("mkdir", "lint-ran")
    """)
    with open(project / ".hearth.yml", "a", encoding="utf-8") as f:
        f.write("tools:\n  manifest: tools\n")
    monkeypatch.chdir(project)

    assert app.main(["tools/lint"], output=output) == 1
    assert app.main(["tools/lint", "-L", str(shared)], output=output) == 0
    assert (project / "lint-ran").is_dir()


def test_persisted_configuration_is_applied(isolated_environment, project: Path, write_file, output, monkeypatch) -> None:
    write_file(project / "build.yml", """
        only:
          file: targets/demo.py
          class: targets.demo.DemoTarget
    """)
    save_config({"manifest_name": "build.yml"})
    monkeypatch.chdir(project)

    assert app.main([], output=output) == 0
    assert output.texts[0].endswith("(build.yml)")
    assert "  only" in output.texts

    output.lines.clear()
    assert app.main(["--use-defaults"], output=output) == 0
    assert output.texts[0].endswith("(.hearth.yml)")


def test_dump_config_prints_effective_configuration(project: Path, capsys, monkeypatch) -> None:
    monkeypatch.chdir(project)

    assert app.main(["--dump-config", "-m", "other.yml"]) == 0

    dumped = json.loads(capsys.readouterr().out)
    assert dumped["manifest_name"] == "other.yml"


def test_invalid_style_is_usage_error(project: Path, monkeypatch) -> None:
    save_config({"banner_style": {"foreground": "no-such-colour"}})
    monkeypatch.chdir(project)

    assert app.main([]) == 2


def test_unit_raising_hearth_error_is_failed_build_not_usage_error(project: Path, write_file, output, monkeypatch) -> None:
    write_file(project / "targets" / "strict.py", """
        from hearth.domain.errors import InvalidArgumentError
        from hearth.tasks import Target


        class Strict(Target):
            def main(self):
                raise InvalidArgumentError("unsupported platform")
    """)
    with open(project / ".hearth.yml", "a", encoding="utf-8") as f:
        f.write("strict:\n  file: targets/strict.py\n  class: targets.strict.Strict\n")
    monkeypatch.chdir(project)

    assert app.main(["strict"], output=output) == 1
    assert "BUILD FAILED" in output.texts


def test_save_config_persists_effective_configuration(isolated_environment, project: Path, capsys, monkeypatch) -> None:
    monkeypatch.chdir(project)

    assert app.main(["--save-config", "-m", "build.yml", "-L", "/shared"]) == 0

    saved = json.loads((isolated_environment / "config.json").read_text(encoding="utf-8"))
    assert saved["manifest_name"] == "build.yml"
    assert saved["locations"] == ["/shared"]
    assert "Configuration saved" in capsys.readouterr().out
    assert load_config()["manifest_name"] == "build.yml"


def test_save_config_reports_unwritable_location(project: Path, monkeypatch) -> None:
    monkeypatch.chdir(project)

    with patch("hearth.interface.cli.app.save_config", return_value=False):
        assert app.main(["--save-config"]) == 2
