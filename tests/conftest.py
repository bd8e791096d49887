from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. An in-memory output sink recording every printed line.
3. A sample project tree with nested manifests and task-unit sources.
"""

import os
import sys
import textwrap
from pathlib import Path
from typing import Any, Callable, List, Tuple

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)


# -----------------------------------------------------------------------------
# Test Doubles
# -----------------------------------------------------------------------------
class RecordingOutput:
    """Output sink keeping (text, style) pairs instead of printing them."""

    def __init__(self) -> None:
        self.lines: List[Tuple[str, Any]] = []

    def print_line(self, text: str, style: Any = None) -> "RecordingOutput":
        self.lines.append((text, style))
        return self

    @property
    def texts(self) -> List[str]:
        return [text for text, _ in self.lines]


@pytest.fixture
def output() -> RecordingOutput:
    return RecordingOutput()


# -----------------------------------------------------------------------------
# Project Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def write_file() -> Callable[[Path, str], Path]:
    """Write dedented text to a path, creating parent directories."""
    def _write(path: Path, content: str) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(content).lstrip("\n"), encoding="utf-8")
        return path
    return _write


UNIT_SOURCE = """
from hearth.tasks import Target


class {name}(Target):
    runs = 0

    def main(self):
        type(self).runs += 1
        self.task("mkdir", "build/{name}")
"""


@pytest.fixture
def project(tmp_path: Path, write_file) -> Path:
    """
    Create a sample project.

    Structure:
    /project
      .hearth.yml          demo (target), a (manifest -> a/)
      targets/demo.py      DemoTarget
      targets/b.py         BTarget
      a/.hearth.yml        b (target)
    """
    root = tmp_path / "project"
    write_file(root / ".hearth.yml", """
        demo:
          file: targets/demo.py
          class: targets.demo.DemoTarget
          description: Demo target
        a:
          manifest: a
    """)
    write_file(root / "a" / ".hearth.yml", """
        b:
          file: targets/b.py
          class: targets.b.BTarget
    """)
    write_file(root / "targets" / "demo.py", UNIT_SOURCE.format(name="DemoTarget"))
    write_file(root / "targets" / "b.py", UNIT_SOURCE.format(name="BTarget"))
    return root
