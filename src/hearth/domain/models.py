from __future__ import annotations

"""
Resolution Domain Data Models.

Defines the immutable structures exchanged between the manifest parser,
the resolver, the execution driver and the interface layer.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

from hearth.domain.constants import (
    ENTRY_KIND_MANIFEST,
    ENTRY_KIND_TARGET,
    EXIT_BUILD_FAILED,
    EXIT_SUCCESS,
    STYLE_KEYS,
)
from hearth.domain.errors import InvalidArgumentError

# -----------------------------------------------------------------------------
# MANIFEST MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class ManifestEntry:
    """
    A single named entry of a manifest document.

    Attributes:
        name: Target name, unique within its manifest.
        kind: Either 'target' (leaf) or 'manifest' (nested reference).
        file: Task-unit source path as written in the document.
        class_name: Fully-qualified task-unit class name.
        manifest: Nested manifest reference as written in the document.
        description: Optional free text shown when listing targets.
    """
    name: str
    kind: str
    file: str = ""
    class_name: str = ""
    manifest: str = ""
    description: str = ""

    @property
    def is_target(self) -> bool:
        return self.kind == ENTRY_KIND_TARGET

    @property
    def is_manifest(self) -> bool:
        return self.kind == ENTRY_KIND_MANIFEST


@dataclass(frozen=True)
class ManifestNode:
    """
    One parsed manifest document.

    Attributes:
        path: Absolute path of the document on disk.
        entries: Ordered mapping of target name to entry.
    """
    path: str
    entries: Mapping[str, ManifestEntry] = field(default_factory=dict)

    def get(self, name: str) -> Optional[ManifestEntry]:
        return self.entries.get(name)

    def names(self) -> Tuple[str, ...]:
        return tuple(self.entries)


# -----------------------------------------------------------------------------
# RESOLUTION MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class ResolvedTarget:
    """
    Outcome of a successful lookup.

    Attributes:
        file: Absolute path to the task-unit source file.
        class_name: Fully-qualified name of the task-unit class.
        path: Target path segments that were walked.
    """
    file: str
    class_name: str
    path: Tuple[str, ...] = ()


@dataclass(frozen=True)
class IndexEntry:
    """A target discovered while indexing the whole manifest tree."""
    path: str
    file: str
    class_name: str
    description: str = ""


# -----------------------------------------------------------------------------
# PRESENTATION & RESULT MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class StyleConfig:
    """
    Console style for a single output line.

    Attributes:
        foreground: Text color name (e.g. 'red').
        background: Background color name.
        attribute: Text attribute (e.g. 'bold', 'underline').
    """
    foreground: Optional[str] = None
    background: Optional[str] = None
    attribute: Optional[str] = None

    @classmethod
    def from_value(cls, value: Any) -> "StyleConfig":
        """
        Build a style from a StyleConfig, a mapping or None.

        Raises:
            InvalidArgumentError: On unknown keys or non-string values.
        """
        if value is None:
            return cls()
        if isinstance(value, StyleConfig):
            return value
        if not isinstance(value, Mapping):
            raise InvalidArgumentError(
                f"Style must be a mapping, received {type(value).__name__}."
            )

        unknown = sorted(str(k) for k in set(value) - set(STYLE_KEYS))
        if unknown:
            raise InvalidArgumentError(f"Unrecognized style options: {', '.join(unknown)}")

        for key in STYLE_KEYS:
            item = value.get(key)
            if item is not None and not isinstance(item, str):
                raise InvalidArgumentError(f"Style option '{key}' must be a string.")

        return cls(
            foreground=value.get("foreground"),
            background=value.get("background"),
            attribute=value.get("attribute"),
        )

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {
            "foreground": self.foreground,
            "background": self.background,
            "attribute": self.attribute,
        }


@dataclass(frozen=True)
class BuildResult:
    """
    Final outcome of a driver run, inspected once by the process entry point.

    Attributes:
        failed: Whether any failure was recorded during the run.
        error: Message of the last recorded failure.
    """
    failed: bool
    error: str = ""

    @property
    def exit_code(self) -> int:
        return EXIT_BUILD_FAILED if self.failed else EXIT_SUCCESS
